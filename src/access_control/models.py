"""Authorization models: Role, RolePermission, and CustomGrant."""

from datetime import datetime

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q


def validate_action_list(value):
    """Stored actions must be a non-empty list of strings."""
    if not isinstance(value, list) or not value or not all(isinstance(action, str) for action in value):
        raise ValidationError("Actions must be a non-empty list of strings.", code="invalid_actions")


class Role(models.Model):
    """Named bundle of (resource, actions) permissions assignable to users."""

    class Category(models.TextChoices):
        SYSTEM = "system", "System"
        SALES = "sales", "Sales"
        MANAGEMENT = "management", "Management"
        SUPPORT = "support", "Support"

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField()
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.SALES)
    # 1=Basic, 2=Intermediate, 3=Advanced, 4=Admin, 5=Super
    level = models.PositiveSmallIntegerField(
        default=1, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    is_system = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name

    def permission_entries(self) -> list[dict]:
        """Return the role's permissions as ``{"resource", "actions"}`` dicts."""
        return [
            {"resource": permission.resource, "actions": list(permission.actions)}
            for permission in self.permissions.all()
            if isinstance(permission.actions, list)
        ]


class RolePermission(models.Model):
    """Actions a Role allows on a single resource."""

    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="permissions")
    resource = models.CharField(max_length=50)
    actions = models.JSONField(default=list, validators=[validate_action_list])

    class Meta:
        ordering = ["resource"]
        unique_together = ("role", "resource")

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.role.name} -> {self.resource}"


class CustomGrantQuerySet(models.QuerySet):
    """Query helpers for evaluating grants against a point in time."""

    def effective(self, now: datetime):
        """Grants that are active and not expired at ``now``.

        ``expires_at`` must be strictly after ``now``; a grant expiring exactly
        at ``now`` is already inert.
        """
        return self.filter(is_active=True).filter(
            Q(expires_at__isnull=True) | Q(expires_at__gt=now)
        )

    def for_key(self, user_id, resource: str):
        return self.filter(user_id=user_id, resource=resource)


class CustomGrant(models.Model):
    """Per-user override granting actions on one resource, optionally time-bound.

    At most one grant exists per (user, resource). Re-assigning the pair
    replaces ``actions``, ``expires_at`` and ``granted_by`` wholesale; the old
    actions are not merged into the new ones.
    """

    STATE_ACTIVE = "active"
    STATE_EXPIRED = "expired"
    STATE_REVOKED = "revoked"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="custom_grants"
    )
    resource = models.CharField(max_length=50)
    actions = models.JSONField(default=list, validators=[validate_action_list])
    granted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="issued_grants",
    )
    is_active = models.BooleanField(default=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomGrantQuerySet.as_manager()

    class Meta:
        ordering = ["resource"]
        constraints = [
            models.UniqueConstraint(fields=["user", "resource"], name="unique_custom_grant_per_resource"),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.user_id} -> {self.resource}"

    def state_at(self, now: datetime) -> str:
        """Derive the grant's state; expiry is computed, never stored."""
        if not self.is_active:
            return self.STATE_REVOKED
        if self.expires_at is not None and self.expires_at <= now:
            return self.STATE_EXPIRED
        return self.STATE_ACTIVE


__all__ = ["Role", "RolePermission", "CustomGrant"]

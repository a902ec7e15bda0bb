"""Role catalog and custom grant management.

These operations back the administrative API. Unlike the resolver, they
surface failures to the caller: NotFound, ValidationError, Conflict, and
database errors (mapped to 503 by the exception handler).
"""

import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, ProtectedError
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from .exceptions import Conflict
from .models import CustomGrant, Role, RolePermission
from .registry import unregistered_pairs

logger = logging.getLogger(__name__)

ROLE_FIELDS = ("name", "description", "category", "level", "is_active")
ROLE_LEVELS = (1, 5)


def _unique_actions(actions: Iterable[str]) -> list[str]:
    """Drop duplicate actions while keeping their first-seen order."""
    return list(dict.fromkeys(actions))


def normalize_permissions(permissions: Any) -> list[dict[str, Any]]:
    """Validate role permission entries and merge duplicate resources.

    Raises ValidationError for malformed entries, empty action lists, and
    pairs missing from the permission registry.
    """
    if not isinstance(permissions, list):
        raise ValidationError({"permissions": ["Permissions must be a list."]})

    merged: dict[str, list[str]] = {}
    for entry in permissions:
        if not isinstance(entry, dict):
            raise ValidationError({"permissions": ["Each permission must be an object."]})
        resource = entry.get("resource")
        actions = entry.get("actions")
        if not resource or not isinstance(resource, str):
            raise ValidationError({"permissions": ["Each permission needs a resource."]})
        if not actions or not isinstance(actions, list) or not all(isinstance(a, str) for a in actions):
            raise ValidationError({"permissions": [f"Permission for '{resource}' needs a non-empty actions list."]})
        merged[resource] = _unique_actions(merged.get(resource, []) + actions)

    entries = [{"resource": resource, "actions": actions} for resource, actions in merged.items()]
    missing = unregistered_pairs(entries)
    if missing:
        pairs = ", ".join(f"{resource}:{action}" for resource, action in missing)
        raise ValidationError({"permissions": [f"Unknown permissions: {pairs}."]})
    return entries


class RoleService:
    """Create, update, delete, and assign roles while keeping their invariants."""

    @classmethod
    def list_roles(cls):
        return Role.objects.prefetch_related("permissions").annotate(user_count=Count("users"))

    @classmethod
    def get_role(cls, role_id) -> Role:
        try:
            return cls.list_roles().get(pk=role_id)
        except (Role.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFound("Role not found")

    @classmethod
    def create_role(
        cls,
        name: str,
        description: str,
        permissions: Any,
        category: str = Role.Category.SALES,
        level: int = 1,
        is_system: bool = False,
        is_active: bool = True,
    ) -> Role:
        """Create a role; names are unique."""
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["Role name is required."]})
        if not (description or "").strip():
            raise ValidationError({"description": ["Role description is required."]})
        _validate_role_attributes({"category": category, "level": level})
        entries = normalize_permissions(permissions)

        if Role.objects.filter(name=name).exists():
            raise ValidationError({"name": ["Role with this name already exists."]})

        try:
            with transaction.atomic():
                role = Role.objects.create(
                    name=name,
                    description=description,
                    category=category,
                    level=level,
                    is_system=is_system,
                    is_active=is_active,
                )
                cls._replace_permissions(role, entries)
        except IntegrityError:
            raise ValidationError({"name": ["Role with this name already exists."]})

        logger.info("Created role %s (id=%s, system=%s)", role.name, role.pk, role.is_system)
        return cls.get_role(role.pk)

    @classmethod
    def update_role(cls, role_id, **changes) -> Role:
        """Update a non-system role. ``permissions``, when given, replaces the whole set."""
        unknown = set(changes) - set(ROLE_FIELDS) - {"permissions"}
        if unknown:
            raise ValidationError({field: ["This field cannot be updated."] for field in sorted(unknown)})

        entries = None
        if "permissions" in changes:
            entries = normalize_permissions(changes.pop("permissions"))

        if "name" in changes:
            changes["name"] = (changes["name"] or "").strip()
            if not changes["name"]:
                raise ValidationError({"name": ["Role name is required."]})
        if "description" in changes and not (changes["description"] or "").strip():
            raise ValidationError({"description": ["Role description is required."]})
        _validate_role_attributes(changes)

        try:
            with transaction.atomic():
                role = cls._lock_role(role_id)
                if role.is_system:
                    raise Conflict("System roles cannot be modified.")
                name = changes.get("name")
                if name and name != role.name and Role.objects.filter(name=name).exists():
                    raise ValidationError({"name": ["Role with this name already exists."]})
                for attr, value in changes.items():
                    setattr(role, attr, value)
                role.save()
                if entries is not None:
                    cls._replace_permissions(role, entries)
        except IntegrityError:
            raise ValidationError({"name": ["Role with this name already exists."]})

        logger.info("Updated role %s (id=%s)", role.name, role.pk)
        return cls.get_role(role.pk)

    @classmethod
    def delete_role(cls, role_id) -> None:
        """Delete a non-system role no user references.

        The role row stays locked from the reference check through the delete,
        and ``assign_role`` takes the same lock, so a concurrent assignment
        either lands first (and the delete is refused) or waits for the delete.
        The PROTECT foreign key on ``User.role`` backs this at the storage level.
        """
        with transaction.atomic():
            role = cls._lock_role(role_id)
            if role.is_system:
                raise Conflict("System roles cannot be deleted.")

            in_use = role.users.count()
            if in_use:
                raise Conflict(
                    f"Cannot delete role. {in_use} user(s) are currently assigned to this role."
                )
            try:
                with transaction.atomic():
                    role.delete()
            except (ProtectedError, IntegrityError):
                raise Conflict("Cannot delete role while users are assigned to it.")

        logger.info("Deleted role %s (id=%s)", role.name, role_id)

    @classmethod
    def assign_role(cls, user_id, role_id) -> Any:
        """Point a user at a role, or clear it when ``role_id`` is None."""
        with transaction.atomic():
            user = _lock_user(user_id)
            role = None
            if role_id is not None:
                role = cls._lock_role(role_id)
                if not role.is_active:
                    raise ValidationError({"role": ["Inactive roles cannot be assigned."]})
            user.role = role
            user.save(update_fields=["role", "updated_at"])

        logger.info("Assigned role %s to user=%s", getattr(role, "name", None), user.pk)
        return user

    @classmethod
    def set_super_admin(cls, user_id, enabled: Optional[bool] = None) -> Any:
        """Set the super-admin flag, or toggle it when ``enabled`` is None."""
        with transaction.atomic():
            user = _lock_user(user_id)
            user.is_super_admin = (not user.is_super_admin) if enabled is None else bool(enabled)
            user.save(update_fields=["is_super_admin", "updated_at"])

        logger.info("Super admin %s for user=%s", "enabled" if user.is_super_admin else "disabled", user.pk)
        return user

    @classmethod
    def role_stats(cls) -> dict[str, Any]:
        roles = Role.objects.annotate(user_count=Count("users")).order_by("name")
        return {
            "total_roles": roles.count(),
            "roles": [
                {
                    "id": role.pk,
                    "name": role.name,
                    "description": role.description,
                    "is_system": role.is_system,
                    "is_active": role.is_active,
                    "user_count": role.user_count,
                }
                for role in roles
            ],
        }

    @staticmethod
    def _lock_role(role_id) -> Role:
        try:
            return Role.objects.select_for_update().get(pk=role_id)
        except (Role.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFound("Role not found")

    @staticmethod
    def _replace_permissions(role: Role, entries: list[dict[str, Any]]) -> None:
        role.permissions.all().delete()
        RolePermission.objects.bulk_create(
            RolePermission(role=role, resource=entry["resource"], actions=entry["actions"])
            for entry in entries
        )


class CustomGrantService:
    """Per-user, per-resource grants with upsert (replace, never merge) semantics."""

    @classmethod
    def assign_custom_permissions(
        cls,
        user_id,
        resource: str,
        actions: Any,
        expires_at: Optional[datetime] = None,
        granted_by=None,
    ) -> CustomGrant:
        """Create or wholly replace the grant for ``(user_id, resource)``.

        An existing grant's actions, expiry, and granter are overwritten and
        the grant is re-activated. Concurrent assignments for the same pair
        resolve to whichever commits last.
        """
        errors: dict[str, list[str]] = {}
        if not user_id:
            errors["user_id"] = ["User ID is required."]
        if not resource or not isinstance(resource, str):
            errors["resource"] = ["Resource is required."]
        if not actions or not isinstance(actions, (list, tuple)) or not all(isinstance(a, str) for a in actions):
            errors["actions"] = ["At least one action is required."]
        if errors:
            raise ValidationError(errors)

        actions = _unique_actions(actions)
        missing = unregistered_pairs([{"resource": resource, "actions": actions}])
        if missing:
            pairs = ", ".join(f"{res}:{action}" for res, action in missing)
            raise ValidationError({"actions": [f"Unknown permissions: {pairs}."]})

        user = _get_user(user_id)
        grant, created = CustomGrant.objects.update_or_create(
            user=user,
            resource=resource,
            defaults={
                "actions": actions,
                "expires_at": expires_at,
                "granted_by": granted_by,
                "is_active": True,
            },
        )
        logger.info(
            "%s custom grant %s:%s for user=%s (expires_at=%s, granted_by=%s)",
            "Created" if created else "Replaced",
            resource,
            ",".join(actions),
            user.pk,
            expires_at,
            getattr(granted_by, "pk", None),
        )
        return grant

    @classmethod
    def remove_custom_permissions(cls, user_id, resource: str) -> None:
        """Delete the grant for ``(user_id, resource)``; NotFound if there is none."""
        try:
            deleted, _ = CustomGrant.objects.for_key(user_id, resource).delete()
        except (ValueError, DjangoValidationError):
            deleted = 0
        if not deleted:
            raise NotFound("Custom permission not found")
        logger.info("Removed custom grant %s for user=%s", resource, user_id)

    @classmethod
    def revoke_custom_permissions(cls, user_id, resource: str) -> CustomGrant:
        """Deactivate the grant but keep the record for auditing."""
        try:
            updated = CustomGrant.objects.for_key(user_id, resource).update(
                is_active=False, updated_at=timezone.now()
            )
        except (ValueError, DjangoValidationError):
            updated = 0
        if not updated:
            raise NotFound("Custom permission not found")
        logger.info("Revoked custom grant %s for user=%s", resource, user_id)
        return CustomGrant.objects.for_key(user_id, resource).get()

    @classmethod
    def list_custom_permissions(
        cls, user_id, include_inactive: bool = False, now: Optional[datetime] = None
    ) -> list[CustomGrant]:
        """Effective grants for the user, or every grant when ``include_inactive``."""
        user = _get_user(user_id)
        grants = CustomGrant.objects.filter(user=user)
        if not include_inactive:
            grants = grants.effective(now or timezone.now())
        return list(grants)


def _validate_role_attributes(values: dict[str, Any]) -> None:
    """Reject a ``category`` or ``level`` outside what the Role fields allow."""
    errors: dict[str, list[str]] = {}
    if "category" in values and values["category"] not in Role.Category.values:
        errors["category"] = [f"Category must be one of: {', '.join(Role.Category.values)}."]
    if "level" in values:
        level = values["level"]
        low, high = ROLE_LEVELS
        if isinstance(level, bool) or not isinstance(level, int) or not low <= level <= high:
            errors["level"] = [f"Level must be an integer from {low} to {high}."]
    if errors:
        raise ValidationError(errors)


def _get_user(user_id):
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFound("User not found")


def _lock_user(user_id):
    User = get_user_model()
    try:
        return User.objects.select_for_update().get(pk=user_id)
    except (User.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFound("User not found")


__all__ = ["RoleService", "CustomGrantService", "normalize_permissions"]

"""The principal every authorization decision is made for.

Django's groups and model permissions are not used (no ``PermissionsMixin``).
What a principal may do comes from its ``role``, its custom grants
(``access_control.CustomGrant``) and the ``is_super_admin`` flag, all read
fresh by ``access_control.resolver.PermissionResolver``.
"""

import uuid
from typing import ClassVar, Optional

from django.contrib.auth.models import AbstractBaseUser
from django.db import models

from .managers import UserManager, hash_password, password_matches


class User(AbstractBaseUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    password_hash = models.CharField(max_length=128)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    # PROTECT: a role still referenced by a principal cannot be deleted.
    role = models.ForeignKey(
        "access_control.Role",
        on_delete=models.PROTECT,
        related_name="users",
        null=True,
        blank=True,
    )
    is_active = models.BooleanField(default=True)
    is_super_admin = models.BooleanField(default=False)
    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: ClassVar[list[str]] = []

    objects = UserManager()

    class Meta:
        ordering = ["-date_joined"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.email

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def set_password(self, raw_password: Optional[str]) -> None:  # type: ignore[override]
        self.password_hash = hash_password(raw_password) if raw_password is not None else ""

    def check_password(self, raw_password: Optional[str]) -> bool:  # type: ignore[override]
        return password_matches(self.password_hash, raw_password)


__all__ = ["User"]

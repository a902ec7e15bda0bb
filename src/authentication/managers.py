"""Principal creation and bcrypt password handling."""

import bcrypt
from django.contrib.auth.base_user import BaseUserManager

BCRYPT_ROUNDS = 12


def hash_password(raw_password: str) -> str:
    return bcrypt.hashpw(raw_password.encode(), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def password_matches(password_hash: str, raw_password: str | None) -> bool:
    """Compare ``raw_password`` with a stored bcrypt hash.

    An empty or non-bcrypt stored value never matches.
    """
    if not password_hash or raw_password is None:
        return False
    try:
        return bcrypt.checkpw(raw_password.encode(), password_hash.encode())
    except ValueError:
        return False


class UserManager(BaseUserManager):
    """Creates principals. Roles and grants are managed by ``access_control``."""

    use_in_migrations = True

    def create_user(self, email: str, password: str | None = None, role=None, **extra_fields):
        """Create a principal, optionally holding ``role``. Never a super admin by default."""
        if not email:
            raise ValueError("Principals need an email address")
        if password is None:
            raise ValueError("Password must be provided")
        if role is not None and not role.is_active:
            raise ValueError(f"Role '{role.name}' is inactive and cannot be assigned")

        extra_fields.setdefault("is_super_admin", False)
        user = self.model(email=self.normalize_email(email), role=role, **extra_fields)
        user.password_hash = hash_password(password)
        user.save(using=self._db)
        return user

    def create_super_admin(self, email: str, password: str, role=None, **extra_fields):
        """Create a principal that passes every permission check."""
        extra_fields.update(is_super_admin=True, is_active=True)
        return self.create_user(email, password, role=role, **extra_fields)

    def active(self):
        return self.filter(is_active=True)


__all__ = ["UserManager", "hash_password", "password_matches"]

"""Authorization resolver: decides whether a user may act on a resource.

Three independent sources can say "yes", consulted in this order and
short-circuiting on the first one that does:

1. the user's ``is_super_admin`` flag;
2. the permissions of the user's (active) role;
3. the user's custom grant for the resource, if active and not expired.

Sources are OR-ed; nothing can deny what another source allows. Every call
reads the current database state, so a revoked or expired grant stops
working on the very next check. Any failure while reading (missing user,
malformed id, database error, malformed stored actions) resolves to
"denied".
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.utils import timezone

from .models import CustomGrant

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass
class EffectivePermissions:
    """Read model of everything a user is allowed to do."""

    role_permissions: list[dict[str, Any]] = field(default_factory=list)
    custom_permissions: list[CustomGrant] = field(default_factory=list)
    is_super_admin: bool = False


class PermissionResolver:
    """Evaluate permission checks against current role and grant state.

    Instances are cheap and hold nothing but the clock used for expiry, so
    callers create one per request (see ``ResolverMixin``) and tests can pass
    a fixed clock.
    """

    def __init__(self, clock: Clock = timezone.now) -> None:
        self._clock = clock

    def has_permission(self, user_id, resource: str, action: str) -> bool:
        """Return True if ``user_id`` may perform ``action`` on ``resource``.

        ``resource`` and ``action`` are compared by exact, case-sensitive
        equality with the stored strings.
        """
        try:
            user = self._load_user(user_id)
            if user is None:
                return False
            if user.is_super_admin:
                return True
            if any(
                entry.resource == resource and _lists_action(entry.actions, action)
                for entry in self._role_entries(user)
            ):
                return True
            grant = self._effective_grants(user.pk).for_key(user.pk, resource).first()
            allowed = grant is not None and _lists_action(grant.actions, action)
        except Exception:
            logger.warning(
                "Permission check failed closed for user=%s %s:%s", user_id, resource, action,
                exc_info=True,
            )
            return False

        if not allowed:
            logger.debug("Denied %s:%s for user=%s", resource, action, user_id)
        return allowed

    def has_resource_access(self, user_id, resource: str) -> bool:
        """Return True if ``user_id`` holds any action at all on ``resource``.

        Meant for deciding what to show, not for gating mutations.
        """
        try:
            user = self._load_user(user_id)
            if user is None:
                return False
            if user.is_super_admin:
                return True
            if any(entry.resource == resource for entry in self._role_entries(user)):
                return True
            grant = self._effective_grants(user.pk).for_key(user.pk, resource).first()
            return grant is not None and _is_action_list(grant.actions)
        except Exception:
            logger.warning(
                "Resource access check failed closed for user=%s resource=%s", user_id, resource,
                exc_info=True,
            )
            return False

    def get_user_all_permissions(self, user_id) -> EffectivePermissions:
        """Collect role permissions, effective custom grants, and the super-admin flag.

        Applies no decision logic. A missing user, or a read failure, yields an
        empty result.
        """
        try:
            user = self._load_user(user_id)
            if user is None:
                return EffectivePermissions()
            role_permissions = [
                {"resource": entry.resource, "actions": list(entry.actions)}
                for entry in self._role_entries(user)
            ]
            custom_permissions = [
                grant for grant in self._effective_grants(user.pk) if _is_action_list(grant.actions)
            ]
        except Exception:
            logger.warning("Could not load permissions for user=%s", user_id, exc_info=True)
            return EffectivePermissions()

        return EffectivePermissions(
            role_permissions=role_permissions,
            custom_permissions=custom_permissions,
            is_super_admin=user.is_super_admin,
        )

    def is_super_admin(self, user_id) -> bool:
        try:
            user = self._load_user(user_id)
        except Exception:
            logger.warning("Super-admin check failed closed for user=%s", user_id, exc_info=True)
            return False
        return bool(user and user.is_super_admin)

    def now(self) -> datetime:
        return self._clock()

    @staticmethod
    def _load_user(user_id) -> Optional[Any]:
        if not user_id:
            return None
        User = get_user_model()
        try:
            return (
                User.objects.select_related("role")
                .prefetch_related("role__permissions")
                .get(pk=user_id)
            )
        except (User.DoesNotExist, ValidationError, ValueError, TypeError):
            return None

    @staticmethod
    def _role_entries(user) -> list:
        role = user.role
        if role is None or not role.is_active:
            return []
        return [entry for entry in role.permissions.all() if _is_action_list(entry.actions)]

    def _effective_grants(self, user_id):
        return CustomGrant.objects.filter(user_id=user_id).effective(self._clock())


def _is_action_list(actions) -> bool:
    # Rows written outside RoleService/CustomGrantService may hold anything.
    return isinstance(actions, list) and bool(actions) and all(isinstance(item, str) for item in actions)


def _lists_action(actions, action: str) -> bool:
    return _is_action_list(actions) and action in actions


__all__ = ["PermissionResolver", "EffectivePermissions"]

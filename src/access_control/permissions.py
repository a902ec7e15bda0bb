"""DRF permission classes that delegate to the PermissionResolver."""

from typing import Optional

from rest_framework import permissions

from .resolver import PermissionResolver

DEFAULT_ACTIONS = {
    "list": "read",
    "retrieve": "read",
    "create": "create",
    "update": "update",
    "partial_update": "update",
    "destroy": "delete",
}

METHOD_ACTIONS = {
    "GET": "read",
    "HEAD": "read",
    "OPTIONS": "read",
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "delete",
}


class ResolverMixin:
    """Give a view its own PermissionResolver for the lifetime of the request."""

    permission_resolver_class = PermissionResolver

    def get_permission_resolver(self) -> PermissionResolver:
        resolver = getattr(self, "_permission_resolver", None)
        if resolver is None:
            resolver = self.permission_resolver_class()
            self._permission_resolver = resolver
        return resolver


def action_for(view, view_action: Optional[str], method: str) -> Optional[str]:
    """Map a viewset action or HTTP method on ``view`` to a registry action.

    ``permission_actions`` on the view wins, keyed by viewset action name or,
    for plain APIViews, by HTTP method. Works on view classes and instances.
    """
    mapping = getattr(view, "permission_actions", None) or {}
    if view_action and view_action in mapping:
        return mapping[view_action]
    if method in mapping:
        return mapping[method]
    if view_action and view_action in DEFAULT_ACTIONS:
        return DEFAULT_ACTIONS[view_action]
    return METHOD_ACTIONS.get(method)


def required_permission(view, request) -> Optional[tuple[str, str]]:
    """Resolve the (resource, action) pair a request needs on ``view``."""
    resource = getattr(view, "permission_resource", None)
    if not resource:
        return None
    action = action_for(view, getattr(view, "action", None), request.method)
    return (resource, action) if action else None


class ResolverPermission(permissions.BasePermission):
    """Allow the request only if the resolver grants the view's permission."""

    message = "You do not have permission to perform this action on this resource."

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not user or not getattr(user, "is_authenticated", False):
            return False

        required = required_permission(view, request)
        if required is None:
            return False

        resource, action = required
        return _resolver_for(view).has_permission(user.pk, resource, action)


class SuperAdminOnly(permissions.BasePermission):
    """Restrict a view to super admins, re-read from storage on every request."""

    message = "Super admin access required."

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not user or not getattr(user, "is_authenticated", False):
            return False
        return _resolver_for(view).is_super_admin(user.pk)


def _resolver_for(view) -> PermissionResolver:
    getter = getattr(view, "get_permission_resolver", None)
    return getter() if getter else PermissionResolver()


__all__ = ["ResolverMixin", "ResolverPermission", "SuperAdminOnly", "action_for", "required_permission"]

"""System checks validating permission declarations against the registry.

Resolver checks compare strings exactly, so a misspelt resource or action
silently denies at request time. These checks surface such typos when the
project starts instead.
"""

from django.core.checks import Error, Tags, Warning, register
from django.db import DatabaseError
from django.urls import URLPattern, URLResolver, get_resolver

from .defaults import DEFAULT_ROLES
from .permissions import ResolverPermission, action_for
from .registry import REGISTRY_VERSION, is_registered, unregistered_pairs

IGNORED_METHODS = ("head", "options")


def _iter_views(patterns):
    """Yield ``(view_class, {method: viewset_action} | None)`` for every routed view."""
    for entry in patterns:
        if isinstance(entry, URLResolver):
            yield from _iter_views(entry.url_patterns)
        elif isinstance(entry, URLPattern):
            view_cls = getattr(entry.callback, "cls", None)
            if view_cls is not None:
                yield view_cls, getattr(entry.callback, "actions", None)


def _method_actions(view_cls, actions):
    if actions:
        return [(method.upper(), view_action) for method, view_action in actions.items()]
    return [
        (method.upper(), None)
        for method in view_cls.http_method_names
        if method not in IGNORED_METHODS and hasattr(view_cls, method)
    ]


@register()
def rbac_views_declare_registered_permissions(app_configs, **kwargs):
    """Every resolver-guarded view must name a resource and registered actions."""
    errors: list[Error] = []
    seen: set[tuple] = set()

    for view_cls, actions in _iter_views(get_resolver().url_patterns):
        if ResolverPermission not in getattr(view_cls, "permission_classes", []):
            continue

        resource = getattr(view_cls, "permission_resource", None)
        if not resource:
            if (view_cls, None) not in seen:
                seen.add((view_cls, None))
                errors.append(
                    Error(
                        f"{view_cls.__name__} uses ResolverPermission but does not "
                        f"define permission_resource.",
                        obj=view_cls,
                        id="access_control.E001",
                    )
                )
            continue

        for method, view_action in _method_actions(view_cls, actions):
            action = action_for(view_cls, view_action, method)
            key = (view_cls, resource, action)
            if key in seen:
                continue
            seen.add(key)
            if action is None or not is_registered(resource, action):
                errors.append(
                    Error(
                        f"{view_cls.__name__} requires '{resource}:{action}' which is not "
                        f"in permission registry {REGISTRY_VERSION}.",
                        obj=view_cls,
                        id="access_control.E002",
                    )
                )

    return errors


@register()
def default_roles_use_registered_permissions(app_configs, **kwargs):
    errors: list[Error] = []
    for role in DEFAULT_ROLES:
        for resource, action in unregistered_pairs(role["permissions"]):
            errors.append(
                Error(
                    f"Default role '{role['name']}' grants unknown permission '{resource}:{action}'.",
                    id="access_control.E003",
                )
            )
    return errors


@register(Tags.database)
def stored_permissions_are_registered(app_configs, databases=None, **kwargs):
    """Warn about stored role permissions and grants the registry does not know.

    Such rows keep working (the resolver still matches them exactly) but
    cannot be re-saved through the API.
    """
    if not databases:
        return []

    from .models import CustomGrant, RolePermission

    warnings: list[Warning] = []
    for alias in databases:
        try:
            role_rows = list(RolePermission.objects.using(alias).select_related("role"))
            grant_rows = list(CustomGrant.objects.using(alias))
        except DatabaseError:
            # Tables may not exist yet (e.g. before the first migrate).
            continue

        for row in role_rows:
            for resource, action in unregistered_pairs([{"resource": row.resource, "actions": row.actions}]):
                warnings.append(
                    Warning(
                        f"Role '{row.role.name}' stores unknown permission '{resource}:{action}'.",
                        obj=row.role,
                        id="access_control.W001",
                    )
                )
        for grant in grant_rows:
            for resource, action in unregistered_pairs([{"resource": grant.resource, "actions": grant.actions}]):
                warnings.append(
                    Warning(
                        f"Custom grant for user {grant.user_id} stores unknown permission "
                        f"'{resource}:{action}'.",
                        id="access_control.W001",
                    )
                )
    return warnings

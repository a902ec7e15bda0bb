"""Closed registry of the (resource, action) pairs the CRM knows about.

Permissions are still stored as plain strings on roles and custom grants.
This registry is the single list those strings are validated against when
they are written, and the list system checks compare views, default roles,
and stored rows with at startup.
"""

from typing import Iterable, Mapping

REGISTRY_VERSION = "2024.1"

_CRUD = ("create", "read", "update", "delete")

RESOURCE_ACTIONS: Mapping[str, frozenset[str]] = {
    # Core CRM
    "contacts": frozenset(_CRUD + ("import", "export", "assign")),
    "leads": frozenset(_CRUD + ("import", "export", "assign")),
    "customers": frozenset(_CRUD + ("import", "export", "assign")),
    "referrals": frozenset(_CRUD + ("assign",)),
    # Sales & pipeline
    "pipeline": frozenset(_CRUD + ("assign", "configure")),
    "opportunities": frozenset(_CRUD + ("assign", "approve", "reject")),
    "deals": frozenset(_CRUD + ("assign", "approve", "reject")),
    "campaigns": frozenset(_CRUD + ("approve", "reject", "configure", "schedule", "send")),
    # Communication
    "email": frozenset(
        _CRUD + ("send", "schedule", "manage", "sync", "star", "cancel", "edit", "view")
    ),
    "emails": frozenset(_CRUD + ("send", "schedule")),
    "sms": frozenset(_CRUD + ("send", "schedule", "manage")),
    "communications": frozenset(_CRUD + ("send",)),
    "templates": frozenset(_CRUD + ("generate",)),
    "ai_generator": frozenset(_CRUD + ("generate", "configure")),
    # Calendar & scheduling
    "calendar": frozenset(_CRUD + ("schedule", "integrate")),
    "appointments": frozenset(_CRUD + ("schedule", "approve")),
    "meetings": frozenset(_CRUD + ("schedule",)),
    "reminders": frozenset(_CRUD + ("schedule", "configure")),
    # Tasks & workflow
    "tasks": frozenset(_CRUD + ("assign", "approve", "reject")),
    "workflows": frozenset(_CRUD + ("automate", "configure")),
    "boards": frozenset(_CRUD + ("assign",)),
    "automations": frozenset(_CRUD + ("automate", "configure")),
    # Analytics & reporting
    "reports": frozenset(_CRUD + ("export", "analyze")),
    "analytics": frozenset(_CRUD + ("analyze", "configure")),
    "dashboards": frozenset(_CRUD + ("configure", "analyze")),
    "kpis": frozenset(_CRUD + ("analyze",)),
    # System & admin
    "users": frozenset(_CRUD + ("assign", "export")),
    "roles": frozenset(_CRUD + ("assign", "export")),
    "permissions": frozenset(_CRUD + ("assign", "export")),
    "integrations": frozenset(_CRUD + ("integrate", "configure")),
    "settings": frozenset(_CRUD + ("configure",)),
    # Notes & documents
    "notes": frozenset(_CRUD + ("dictate",)),
    "meeting_notes": frozenset(_CRUD + ("transcribe", "summarize")),
    "documents": frozenset(_CRUD + ("import", "export")),
    "files": frozenset(_CRUD + ("import", "export")),
    "dictation": frozenset(_CRUD + ("dictate",)),
}


def is_registered(resource: str, action: str) -> bool:
    """Return True if ``action`` is a known action on ``resource``.

    Comparison is exact and case-sensitive, like the resolver's.
    """
    return action in RESOURCE_ACTIONS.get(resource, frozenset())


def unregistered_pairs(entries: Iterable[Mapping]) -> list[tuple[str, str]]:
    """List the (resource, action) pairs in ``entries`` missing from the registry.

    ``entries`` are permission dicts shaped like ``{"resource": ..., "actions": [...]}``.
    """
    missing: list[tuple[str, str]] = []
    for entry in entries:
        resource = entry.get("resource", "")
        for action in entry.get("actions", []):
            if not is_registered(resource, action):
                missing.append((resource, action))
    return missing


def as_catalog() -> dict:
    """Registry grouped by resource with sorted actions, for permission screens."""
    return {
        "version": REGISTRY_VERSION,
        "resources": {
            resource: sorted(actions) for resource, actions in sorted(RESOURCE_ACTIONS.items())
        },
    }


__all__ = ["REGISTRY_VERSION", "RESOURCE_ACTIONS", "is_registered", "unregistered_pairs", "as_catalog"]

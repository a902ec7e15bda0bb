"""Default CRM roles created by ``manage.py seed_rbac``."""

SUPER_ADMIN_ROLE = "Super Admin"

DEFAULT_ROLES = [
    {
        "name": SUPER_ADMIN_ROLE,
        "description": "Full system access with all permissions across all modules",
        "category": "system",
        "level": 5,
        "is_system": True,
        "permissions": [
            {"resource": "contacts", "actions": ["create", "read", "update", "delete", "import", "export", "assign"]},
            {"resource": "leads", "actions": ["create", "read", "update", "delete", "import", "export", "assign"]},
            {"resource": "campaigns", "actions": ["create", "read", "update", "delete", "approve", "reject", "configure"]},
            {"resource": "ai_generator", "actions": ["create", "read", "update", "delete", "generate", "configure"]},
            {
                "resource": "email",
                "actions": [
                    "create", "read", "update", "delete", "send", "schedule",
                    "manage", "sync", "star", "cancel", "edit", "view",
                ],
            },
            {"resource": "sms", "actions": ["create", "read", "update", "delete", "send", "schedule", "manage"]},
            {"resource": "calendar", "actions": ["create", "read", "update", "delete", "schedule", "integrate"]},
            {"resource": "appointments", "actions": ["create", "read", "update", "delete", "schedule", "approve"]},
            {"resource": "reminders", "actions": ["create", "read", "update", "delete", "schedule", "configure"]},
            {"resource": "tasks", "actions": ["create", "read", "update", "delete", "assign", "approve", "reject"]},
            {"resource": "reports", "actions": ["create", "read", "update", "delete", "export", "analyze"]},
            {"resource": "analytics", "actions": ["create", "read", "update", "delete", "analyze", "configure"]},
            {"resource": "dashboards", "actions": ["create", "read", "update", "delete", "configure", "analyze"]},
            {"resource": "users", "actions": ["create", "read", "update", "delete", "assign", "export"]},
            {"resource": "roles", "actions": ["create", "read", "update", "delete", "assign", "export"]},
            {"resource": "permissions", "actions": ["create", "read", "update", "delete", "assign", "export"]},
            {"resource": "settings", "actions": ["create", "read", "update", "delete", "configure"]},
            {"resource": "notes", "actions": ["create", "read", "update", "delete", "dictate"]},
            {"resource": "meeting_notes", "actions": ["create", "read", "update", "delete", "transcribe", "summarize"]},
        ],
    },
    {
        "name": "Sales Director",
        "description": "Executive level access to all sales operations and analytics",
        "category": "management",
        "level": 4,
        "permissions": [
            {"resource": "contacts", "actions": ["read", "update", "export", "assign"]},
            {"resource": "leads", "actions": ["read", "update", "export", "assign"]},
            {"resource": "campaigns", "actions": ["read", "update", "approve", "reject", "configure"]},
            {"resource": "ai_generator", "actions": ["read", "update", "generate", "configure"]},
            {
                "resource": "email",
                "actions": ["read", "update", "send", "schedule", "manage", "sync", "star", "cancel", "edit", "view"],
            },
            {"resource": "sms", "actions": ["read", "update", "send", "schedule", "manage"]},
            {"resource": "calendar", "actions": ["read", "update", "schedule", "integrate"]},
            {"resource": "appointments", "actions": ["read", "update", "schedule", "approve"]},
            {"resource": "reminders", "actions": ["read", "update", "schedule", "configure"]},
            {"resource": "tasks", "actions": ["read", "update", "assign", "approve", "reject"]},
            {"resource": "reports", "actions": ["read", "update", "export", "analyze"]},
            {"resource": "analytics", "actions": ["read", "update", "analyze", "configure"]},
            {"resource": "dashboards", "actions": ["read", "update", "configure", "analyze"]},
            {"resource": "users", "actions": ["read", "update", "assign"]},
            {"resource": "roles", "actions": ["read"]},
            {"resource": "settings", "actions": ["read", "update", "configure"]},
            {"resource": "notes", "actions": ["read", "update", "dictate"]},
            {"resource": "meeting_notes", "actions": ["read", "update", "transcribe", "summarize"]},
        ],
    },
    {
        "name": "Sales Manager",
        "description": "Team management with oversight of sales operations and team performance",
        "category": "management",
        "level": 3,
        "permissions": [
            {"resource": "contacts", "actions": ["read", "update", "export", "assign"]},
            {"resource": "leads", "actions": ["read", "update", "export", "assign"]},
            {"resource": "campaigns", "actions": ["read", "update", "configure"]},
            {"resource": "ai_generator", "actions": ["read", "update", "generate"]},
            {"resource": "email", "actions": ["read", "update", "send", "schedule", "manage", "edit", "view"]},
            {"resource": "sms", "actions": ["read", "update", "send", "schedule", "manage"]},
            {"resource": "calendar", "actions": ["read", "update", "schedule"]},
            {"resource": "appointments", "actions": ["read", "update", "schedule", "approve"]},
            {"resource": "reminders", "actions": ["read", "update", "schedule"]},
            {"resource": "tasks", "actions": ["read", "update", "assign", "approve"]},
            {"resource": "reports", "actions": ["read", "update", "export", "analyze"]},
            {"resource": "analytics", "actions": ["read", "update", "analyze"]},
            {"resource": "dashboards", "actions": ["read", "update", "configure", "analyze"]},
            {"resource": "users", "actions": ["read", "update", "assign"]},
            {"resource": "settings", "actions": ["read", "update"]},
            {"resource": "notes", "actions": ["read", "update", "dictate"]},
        ],
    },
    {
        "name": "Senior Sales Representative",
        "description": "Experienced sales professional with advanced CRM and AI features access",
        "category": "sales",
        "level": 3,
        "permissions": [
            {"resource": "contacts", "actions": ["create", "read", "update", "export", "assign"]},
            {"resource": "leads", "actions": ["create", "read", "update", "export", "assign"]},
            {"resource": "campaigns", "actions": ["read", "update"]},
            {"resource": "ai_generator", "actions": ["read", "update", "generate"]},
            {"resource": "calendar", "actions": ["read", "update", "schedule"]},
            {"resource": "appointments", "actions": ["create", "read", "update", "schedule"]},
            {"resource": "reminders", "actions": ["create", "read", "update", "schedule"]},
            {"resource": "tasks", "actions": ["create", "read", "update", "assign"]},
            {"resource": "reports", "actions": ["read", "export", "analyze"]},
            {"resource": "analytics", "actions": ["read", "analyze"]},
            {"resource": "dashboards", "actions": ["read", "analyze"]},
            {"resource": "notes", "actions": ["create", "read", "update", "dictate"]},
            {"resource": "meeting_notes", "actions": ["create", "read", "update", "transcribe", "summarize"]},
        ],
    },
    {
        "name": "Sales Representative",
        "description": "Standard sales professional with core CRM and AI features",
        "category": "sales",
        "level": 2,
        "permissions": [
            {"resource": "contacts", "actions": ["create", "read", "update", "assign"]},
            {"resource": "leads", "actions": ["create", "read", "update", "assign"]},
            {"resource": "campaigns", "actions": ["read"]},
            {"resource": "ai_generator", "actions": ["read", "generate"]},
            {"resource": "calendar", "actions": ["read", "update", "schedule"]},
            {"resource": "appointments", "actions": ["create", "read", "update", "schedule"]},
            {"resource": "reminders", "actions": ["create", "read", "update", "schedule"]},
            {"resource": "tasks", "actions": ["create", "read", "update"]},
            {"resource": "reports", "actions": ["read"]},
            {"resource": "analytics", "actions": ["read"]},
            {"resource": "dashboards", "actions": ["read"]},
            {"resource": "notes", "actions": ["create", "read", "update", "dictate"]},
            {"resource": "meeting_notes", "actions": ["create", "read", "update", "transcribe", "summarize"]},
        ],
    },
    {
        "name": "Junior Sales Representative",
        "description": "Entry-level sales professional with basic CRM access",
        "category": "sales",
        "level": 1,
        "permissions": [
            {"resource": "contacts", "actions": ["read", "update"]},
            {"resource": "leads", "actions": ["read", "update"]},
            {"resource": "customers", "actions": ["read", "update"]},
            {"resource": "campaigns", "actions": ["read"]},
            {"resource": "ai_generator", "actions": ["read", "generate"]},
            {"resource": "calendar", "actions": ["read"]},
            {"resource": "appointments", "actions": ["read", "schedule"]},
            {"resource": "reminders", "actions": ["read"]},
            {"resource": "tasks", "actions": ["read", "update"]},
            {"resource": "reports", "actions": ["read"]},
            {"resource": "analytics", "actions": ["read"]},
            {"resource": "dashboards", "actions": ["read"]},
            {"resource": "notes", "actions": ["read", "update"]},
            {"resource": "meeting_notes", "actions": ["read"]},
        ],
    },
    {
        "name": "Marketing Specialist",
        "description": "Marketing professional with campaign and communication access",
        "category": "support",
        "level": 2,
        "permissions": [
            {"resource": "contacts", "actions": ["read", "export"]},
            {"resource": "leads", "actions": ["read", "export"]},
            {"resource": "customers", "actions": ["read", "export"]},
            {"resource": "ai_generator", "actions": ["read", "update", "generate", "configure"]},
            {"resource": "reports", "actions": ["read", "export", "analyze"]},
            {"resource": "analytics", "actions": ["read", "analyze"]},
            {"resource": "dashboards", "actions": ["read", "analyze"]},
            {"resource": "notes", "actions": ["read", "update"]},
            {"resource": "meeting_notes", "actions": ["read"]},
        ],
    },
    {
        "name": "Customer Success Manager",
        "description": "Customer success professional with customer relationship access",
        "category": "support",
        "level": 2,
        "permissions": [
            {"resource": "contacts", "actions": ["read", "update"]},
            {"resource": "customers", "actions": ["read", "update"]},
            {"resource": "calendar", "actions": ["read", "schedule"]},
            {"resource": "appointments", "actions": ["read", "schedule"]},
            {"resource": "reminders", "actions": ["read", "schedule"]},
            {"resource": "tasks", "actions": ["read", "update"]},
            {"resource": "reports", "actions": ["read"]},
            {"resource": "analytics", "actions": ["read"]},
            {"resource": "dashboards", "actions": ["read"]},
            {"resource": "notes", "actions": ["read", "update"]},
            {"resource": "meeting_notes", "actions": ["read"]},
        ],
    },
]

__all__ = ["DEFAULT_ROLES", "SUPER_ADMIN_ROLE"]

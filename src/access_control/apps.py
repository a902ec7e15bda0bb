"""App configuration for the authorization engine.

Loading the app registers the system checks that validate permission
declarations against the registry at startup.
"""

from django.apps import AppConfig


class AccessControlConfig(AppConfig):
    """Roles, custom grants, and the permission resolver."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "access_control"

    def ready(self) -> None:
        from . import checks  # noqa: F401

"""App configuration for the principal model and login flow."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Holds the User model, bcrypt hashing, and JWT token handling."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"

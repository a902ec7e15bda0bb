"""URL patterns for authentication endpoints."""

from django.urls import path

from access_control.views import MyPermissionsView
from .views import LoginView, LogoutView, MeView

urlpatterns = [
    path("login/", LoginView.as_view(), name="auth-login"),
    path("logout/", LogoutView.as_view(), name="auth-logout"),
    path("me/", MeView.as_view(), name="auth-me"),
    path("me/permissions/", MyPermissionsView.as_view(), name="auth-me-permissions"),
]

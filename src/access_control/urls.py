"""Routing for role, custom grant, and permission check endpoints."""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    CustomGrantDetailView,
    CustomGrantListView,
    CustomGrantRevokeView,
    PermissionCheckView,
    RoleViewSet,
    SuperAdminView,
    UserPermissionsView,
    UserRoleView,
)

router = DefaultRouter()
router.include_root_view = False
router.register(r"roles", RoleViewSet, basename="role")

urlpatterns = [
    path("", include(router.urls)),
    path("users/<uuid:user_id>/permissions/", UserPermissionsView.as_view(), name="user-permissions"),
    path("users/<uuid:user_id>/role/", UserRoleView.as_view(), name="user-role"),
    path("users/<uuid:user_id>/super-admin/", SuperAdminView.as_view(), name="user-super-admin"),
    path(
        "users/<uuid:user_id>/custom-permissions/",
        CustomGrantListView.as_view(),
        name="user-custom-permissions",
    ),
    path(
        "users/<uuid:user_id>/custom-permissions/<str:resource>/",
        CustomGrantDetailView.as_view(),
        name="user-custom-permission-detail",
    ),
    path(
        "users/<uuid:user_id>/custom-permissions/<str:resource>/revoke/",
        CustomGrantRevokeView.as_view(),
        name="user-custom-permission-revoke",
    ),
    path("authz/check/", PermissionCheckView.as_view(), name="authz-check"),
    path(
        "authz/check-resource/",
        PermissionCheckView.as_view(resource_only=True),
        name="authz-check-resource",
    ),
]

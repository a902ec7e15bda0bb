"""Views for role administration, custom grants, and permission checks."""

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.response import BaseAPIView, BaseViewSet, api_response
from .permissions import ResolverMixin, ResolverPermission, SuperAdminOnly
from .registry import as_catalog
from .serializers import (
    CustomGrantAssignSerializer,
    CustomGrantSerializer,
    EffectivePermissionsSerializer,
    PermissionCheckSerializer,
    RoleAssignmentSerializer,
    RoleSerializer,
    RoleWriteSerializer,
    SuperAdminSerializer,
)
from .services import CustomGrantService, RoleService


class RoleViewSet(ResolverMixin, BaseViewSet):
    """CRUD endpoints for the role catalog."""

    permission_classes = [ResolverPermission]
    permission_resource = "roles"
    permission_actions = {"stats": "read", "available_permissions": "read"}

    def list(self, request):
        return api_response(RoleSerializer(RoleService.list_roles(), many=True).data)

    def retrieve(self, request, pk=None):
        return api_response(RoleSerializer(RoleService.get_role(pk)).data)

    def create(self, request):
        serializer = RoleWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        role = RoleService.create_role(**serializer.validated_data)
        return api_response(RoleSerializer(role).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    def destroy(self, request, pk=None):
        RoleService.delete_role(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def stats(self, request):
        """Total roles and how many users hold each one."""
        return api_response(RoleService.role_stats())

    @action(detail=False, methods=["get"], url_path="available-permissions")
    def available_permissions(self, request):
        """The permission registry grouped by resource, for role editors."""
        return api_response(as_catalog())

    @staticmethod
    def _update(request, pk, partial):
        serializer = RoleWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        role = RoleService.update_role(pk, **serializer.validated_data)
        return api_response(RoleSerializer(role).data)


class UserPermissionsView(ResolverMixin, BaseAPIView):
    """Effective permissions of any user, for permission management screens."""

    permission_classes = [ResolverPermission]
    permission_resource = "users"

    def get(self, request, user_id):
        resolver = self.get_permission_resolver()
        permissions = resolver.get_user_all_permissions(user_id)
        serializer = EffectivePermissionsSerializer(permissions, context={"now": resolver.now()})
        return api_response(serializer.data)


class UserRoleView(ResolverMixin, BaseAPIView):
    permission_classes = [ResolverPermission]
    permission_resource = "users"
    permission_actions = {"PUT": "assign"}

    def put(self, request, user_id):
        """Assign a role to the user; ``role_id: null`` clears it."""
        serializer = RoleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = RoleService.assign_role(user_id, serializer.validated_data["role_id"])
        return api_response({"id": str(user.pk), "role": user.role_id})


class SuperAdminView(ResolverMixin, BaseAPIView):
    permission_classes = [SuperAdminOnly]

    def post(self, request, user_id):
        """Enable, disable, or toggle the user's super-admin flag."""
        serializer = SuperAdminSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = RoleService.set_super_admin(user_id, serializer.validated_data.get("enabled"))
        return api_response({"id": str(user.pk), "is_super_admin": user.is_super_admin})


class CustomGrantListView(ResolverMixin, BaseAPIView):
    permission_classes = [ResolverPermission]
    permission_resource = "permissions"
    permission_actions = {"GET": "read", "POST": "assign"}

    def get(self, request, user_id):
        """List the user's effective grants, or all of them with ``include_inactive=true``."""
        include_inactive = request.query_params.get("include_inactive", "").lower() in ("1", "true", "yes")
        now = self.get_permission_resolver().now()
        grants = CustomGrantService.list_custom_permissions(
            user_id, include_inactive=include_inactive, now=now
        )
        return api_response(CustomGrantSerializer(grants, many=True, context={"now": now}).data)

    def post(self, request, user_id):
        """Create or replace the user's grant for one resource."""
        serializer = CustomGrantAssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        grant = CustomGrantService.assign_custom_permissions(
            user_id, granted_by=request.user, **serializer.validated_data
        )
        return api_response(CustomGrantSerializer(grant).data, status=status.HTTP_201_CREATED)


class CustomGrantDetailView(ResolverMixin, BaseAPIView):
    permission_classes = [ResolverPermission]
    permission_resource = "permissions"

    def delete(self, request, user_id, resource):
        CustomGrantService.remove_custom_permissions(user_id, resource)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CustomGrantRevokeView(ResolverMixin, BaseAPIView):
    permission_classes = [ResolverPermission]
    permission_resource = "permissions"
    permission_actions = {"POST": "update"}

    def post(self, request, user_id, resource):
        """Deactivate the grant without deleting it."""
        grant = CustomGrantService.revoke_custom_permissions(user_id, resource)
        return api_response(CustomGrantSerializer(grant).data)


class PermissionCheckView(ResolverMixin, BaseAPIView):
    """Answer a single permission or resource-access question.

    Callers may always ask about themselves; asking about another user
    requires ``permissions:read``.
    """

    permission_classes = [IsAuthenticated]
    resource_only = False

    def get(self, request):
        serializer = PermissionCheckSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data
        if not self.resource_only and "action" not in params:
            raise ValidationError({"action": ["This field is required."]})

        resolver = self.get_permission_resolver()
        target = params.get("user_id") or request.user.pk
        if str(target) != str(request.user.pk) and not resolver.has_permission(
            request.user.pk, "permissions", "read"
        ):
            self.permission_denied(request)

        if self.resource_only:
            allowed = resolver.has_resource_access(target, params["resource"])
        else:
            allowed = resolver.has_permission(target, params["resource"], params["action"])
        return api_response({"allowed": allowed})


class MyPermissionsView(ResolverMixin, BaseAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        """Effective permissions of the caller, for rendering the UI."""
        resolver = self.get_permission_resolver()
        permissions = resolver.get_user_all_permissions(request.user.pk)
        serializer = EffectivePermissionsSerializer(permissions, context={"now": resolver.now()})
        return api_response(serializer.data)


__all__ = [
    "RoleViewSet",
    "UserPermissionsView",
    "UserRoleView",
    "SuperAdminView",
    "CustomGrantListView",
    "CustomGrantDetailView",
    "CustomGrantRevokeView",
    "PermissionCheckView",
    "MyPermissionsView",
]

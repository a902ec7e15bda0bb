"""Serializers for roles, custom grants, and permission read models."""

from django.utils import timezone
from rest_framework import serializers

from .models import CustomGrant, Role


class PermissionEntrySerializer(serializers.Serializer):
    resource = serializers.CharField(max_length=50)
    actions = serializers.ListField(child=serializers.CharField(max_length=50), allow_empty=False)


class RoleSerializer(serializers.ModelSerializer):
    """Role with its permission entries and the number of users holding it."""

    permissions = serializers.SerializerMethodField()
    user_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Role
        fields = [
            "id",
            "name",
            "description",
            "category",
            "level",
            "permissions",
            "is_system",
            "is_active",
            "user_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    @staticmethod
    def get_permissions(role):
        return role.permission_entries()


class RoleWriteSerializer(serializers.Serializer):
    """Validate role payloads before they reach RoleService.

    ``is_system`` is not writable through the API; system roles come from
    the seed command only.
    """

    name = serializers.CharField(max_length=100)
    description = serializers.CharField()
    category = serializers.ChoiceField(choices=Role.Category.choices, required=False)
    level = serializers.IntegerField(min_value=1, max_value=5, required=False)
    permissions = PermissionEntrySerializer(many=True)
    is_active = serializers.BooleanField(required=False)


class CustomGrantSerializer(serializers.ModelSerializer):
    """Custom grant with its derived state (active, expired, or revoked)."""

    user = serializers.UUIDField(source="user_id", read_only=True)
    granted_by = serializers.UUIDField(source="granted_by_id", read_only=True, allow_null=True)
    status = serializers.SerializerMethodField()

    class Meta:
        model = CustomGrant
        fields = [
            "id",
            "user",
            "resource",
            "actions",
            "granted_by",
            "is_active",
            "expires_at",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_status(self, grant) -> str:
        now = self.context.get("now") or timezone.now()
        return grant.state_at(now)


class CustomGrantAssignSerializer(serializers.Serializer):
    resource = serializers.CharField(max_length=50)
    actions = serializers.ListField(child=serializers.CharField(max_length=50), allow_empty=False)
    expires_at = serializers.DateTimeField(required=False, allow_null=True, default=None)


class RoleAssignmentSerializer(serializers.Serializer):
    role_id = serializers.IntegerField(allow_null=True)


class SuperAdminSerializer(serializers.Serializer):
    """Omit ``enabled`` to toggle the flag."""

    enabled = serializers.BooleanField(required=False, allow_null=True, default=None)


class EffectivePermissionsSerializer(serializers.Serializer):
    role_permissions = PermissionEntrySerializer(many=True)
    custom_permissions = CustomGrantSerializer(many=True)
    is_super_admin = serializers.BooleanField()


class PermissionCheckSerializer(serializers.Serializer):
    """Query parameters for the check endpoints; ``user_id`` defaults to the caller."""

    resource = serializers.CharField(max_length=50)
    action = serializers.CharField(max_length=50, required=False)
    user_id = serializers.UUIDField(required=False)


__all__ = [
    "PermissionEntrySerializer",
    "RoleSerializer",
    "RoleWriteSerializer",
    "CustomGrantSerializer",
    "CustomGrantAssignSerializer",
    "RoleAssignmentSerializer",
    "SuperAdminSerializer",
    "EffectivePermissionsSerializer",
    "PermissionCheckSerializer",
]

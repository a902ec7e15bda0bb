"""Serializers for login and the caller's profile."""

from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed

from .managers import password_matches

User = get_user_model()

INVALID_CREDENTIALS = "Invalid credentials"


class LoginSerializer(serializers.Serializer):
    """Check email and password; unknown, inactive and wrong-password logins look alike."""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        user = User.objects.active().filter(email__iexact=attrs["email"]).first()
        if user is None or not password_matches(user.password_hash, attrs["password"]):
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        return {"user": user}


class RoleSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    is_active = serializers.BooleanField()


class UserDetailSerializer(serializers.ModelSerializer):
    """The caller as the authorization engine sees it: role and super-admin flag."""

    role = RoleSummarySerializer(read_only=True, allow_null=True)
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "full_name", "role", "is_super_admin", "date_joined"]
        read_only_fields = fields


__all__ = ["LoginSerializer", "UserDetailSerializer"]

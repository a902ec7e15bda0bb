"""Login, logout, and the caller's profile."""

import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from core.response import BaseAPIView, api_response
from .serializers import LoginSerializer, UserDetailSerializer
from .services import TokenService, bearer_token

logger = logging.getLogger(__name__)


class LoginView(BaseAPIView):
    permission_classes = [AllowAny]

    def post(self, request):
        """Exchange email and password for a bearer access token."""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        logger.info("Issued access token for user=%s", user.pk)
        return api_response(
            {
                "access": TokenService.generate_access_token(user),
                "token_type": "Bearer",
                "expires_in": int(TokenService.access_ttl().total_seconds()),
            }
        )


class LogoutView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        """Blocklist the presented token until it would have expired."""
        payload = TokenService.decode_token(bearer_token(request.META), expected_type="access")
        TokenService.block_token(payload["jti"], payload["exp"])
        logger.info("User %s logged out", request.user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return api_response(UserDetailSerializer(request.user).data)

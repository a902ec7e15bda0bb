"""Identify the caller from a bearer access token."""

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed

from authentication.services import BlocklistUnavailable, TokenService, bearer_token

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = (
    "Authentication credentials were not provided or are invalid, token revoked, or user is inactive."
)
BLOCKLIST_UNAVAILABLE_MESSAGE = "Authentication service unavailable (blocklist)."


class JWTAuthMiddleware(MiddlewareMixin):
    """Attach the token's principal to ``request.user``, or reject the request.

    Requests without a bearer header continue anonymously so public
    endpoints work; a presented but bad, revoked or orphaned token is a 401.
    Permissions are not looked at here.
    """

    def process_request(self, request):  # type: ignore[override]
        token = bearer_token(request.META)
        if not token:
            request.user = AnonymousUser()
            return None

        try:
            claims = TokenService.decode_token(token, expected_type=TokenService.TOKEN_TYPE)
            if TokenService.is_token_blocked(claims["jti"]):
                logger.debug("Rejected blocklisted token jti=%s", claims["jti"])
                return _envelope_error(UNAUTHORIZED_MESSAGE, status.HTTP_401_UNAUTHORIZED)
        except AuthenticationFailed as exc:
            logger.debug("Rejected bearer token: %s", exc.detail)
            return _envelope_error(UNAUTHORIZED_MESSAGE, status.HTTP_401_UNAUTHORIZED)
        except BlocklistUnavailable:
            logger.error("Token blocklist unavailable; rejecting request", exc_info=True)
            return _envelope_error(BLOCKLIST_UNAVAILABLE_MESSAGE, status.HTTP_503_SERVICE_UNAVAILABLE)

        user = _active_principal(claims["sub"])
        if user is None:
            return _envelope_error(UNAUTHORIZED_MESSAGE, status.HTTP_401_UNAUTHORIZED)
        request.user = user
        return None


def _active_principal(user_id):
    User = get_user_model()
    try:
        return User.objects.active().select_related("role").get(pk=user_id)
    except (User.DoesNotExist, ValidationError, ValueError):
        return None


def _envelope_error(message: str, status_code: int) -> JsonResponse:
    return JsonResponse({"data": None, "errors": [message]}, status=status_code)


__all__ = ["JWTAuthMiddleware", "UNAUTHORIZED_MESSAGE", "BLOCKLIST_UNAVAILABLE_MESSAGE"]

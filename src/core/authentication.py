"""DRF authenticator for the principal ``JWTAuthMiddleware`` already resolved."""

from rest_framework.authentication import BaseAuthentication

from authentication.services import BEARER_PREFIX


class MiddlewareUserAuthentication(BaseAuthentication):
    """Token decoding happens once, in the middleware; this only hands DRF the result."""

    def authenticate(self, request):
        user = getattr(request._request, "user", None)
        if user is None or not user.is_authenticated:
            return None
        return user, None

    def authenticate_header(self, request) -> str:
        return BEARER_PREFIX.strip()


__all__ = ["MiddlewareUserAuthentication"]

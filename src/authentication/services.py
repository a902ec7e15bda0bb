"""Access tokens and the Redis blocklist that revokes them.

A token only says who the caller is. Role and super-admin state are read
from the database on every permission check, so they are never put in the
payload and a role change applies to the very next request.
"""

import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import jwt
from django.conf import settings
from redis.exceptions import RedisError
from rest_framework.exceptions import AuthenticationFailed

from core.redis_client import get_redis_client

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class BlocklistUnavailable(Exception):
    """Redis could not be reached; requests are rejected rather than trusted."""


def bearer_token(meta: Mapping[str, str]) -> str:
    """Extract the token from an ``Authorization: Bearer`` header, or ``""``."""
    header = meta.get("HTTP_AUTHORIZATION", "")
    if not header.startswith(BEARER_PREFIX):
        return ""
    return header[len(BEARER_PREFIX):].strip()


class TokenService:
    ALGORITHM = "HS256"
    TOKEN_TYPE = "access"
    BLOCKLIST_PREFIX = "blocklist:token:"

    @classmethod
    def access_ttl(cls) -> timedelta:
        return timedelta(minutes=settings.JWT_ACCESS_TTL_MINUTES)

    @classmethod
    def generate_access_token(cls, user) -> str:
        issued = datetime.now(timezone.utc)
        claims = {
            "sub": str(user.pk),
            "jti": uuid.uuid4().hex,
            "type": cls.TOKEN_TYPE,
            "iat": int(issued.timestamp()),
            "exp": int((issued + cls.access_ttl()).timestamp()),
        }
        return jwt.encode(claims, settings.SECRET_KEY, algorithm=cls.ALGORITHM)

    @classmethod
    def decode_token(cls, token: str, expected_type: str | None = None) -> dict[str, Any]:
        """Verify signature and expiry; raise AuthenticationFailed otherwise."""
        try:
            claims = jwt.decode(
                token,
                settings.SECRET_KEY,
                algorithms=[cls.ALGORITHM],
                options={"require": ["sub", "jti", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationFailed("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationFailed("Invalid token") from exc

        if expected_type is not None and claims.get("type") != expected_type:
            raise AuthenticationFailed("Invalid token type")
        return claims

    @classmethod
    def block_token(cls, jti: str, exp: int) -> None:
        """Blocklist ``jti`` until ``exp``; after that the token is dead anyway."""
        ttl_seconds = max(1, int(exp) - int(time.time()))
        try:
            get_redis_client().setex(cls._blocklist_key(jti), ttl_seconds, "1")
        except RedisError as exc:
            raise BlocklistUnavailable("Redis unavailable while blocklisting") from exc
        logger.info("Blocklisted token jti=%s for %ss", jti, ttl_seconds)

    @classmethod
    def is_token_blocked(cls, jti: str) -> bool:
        try:
            return get_redis_client().get(cls._blocklist_key(jti)) is not None
        except RedisError as exc:
            raise BlocklistUnavailable("Redis unavailable while checking blocklist") from exc

    @classmethod
    def _blocklist_key(cls, jti: str) -> str:
        return f"{cls.BLOCKLIST_PREFIX}{jti}"


__all__ = ["TokenService", "BlocklistUnavailable", "bearer_token"]

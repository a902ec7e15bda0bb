"""Shared Redis client for the access-token blocklist."""

import logging

import redis
from django.conf import settings

logger = logging.getLogger(__name__)

_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Return the process-wide Redis client, created on first use from REDIS_URL."""

    global _client
    if _client is None:
        logger.debug("Connecting token blocklist to %s", settings.REDIS_URL)
        _client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        )
    return _client


__all__ = ["get_redis_client"]

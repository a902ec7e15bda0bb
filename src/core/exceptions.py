"""Exception handler enforcing the `{ "data": null, "errors": [...] }` envelope."""

import logging
from typing import Any

from django.conf import settings
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from access_control.exceptions import StorageUnavailable
from authentication.services import BlocklistUnavailable

from .middleware import BLOCKLIST_UNAVAILABLE_MESSAGE, UNAUTHORIZED_MESSAGE

logger = logging.getLogger(__name__)

FORBIDDEN_MESSAGE = "You do not have permission to perform this action on this resource."


def _normalize_errors(payload: Any) -> list[Any]:
    """Convert DRF's response.data into a list for the envelope."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and "detail" in payload:
        return [payload["detail"]]
    return [payload]


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Wrap DRF errors in the envelope.

    - Blocklist and database outages become 503 so clients know to retry.
    - 401 and 403 carry generic messages; denials never say which rule failed.
    - Validation, not-found, and conflict errors keep DRF's details.
    """

    if isinstance(exc, BlocklistUnavailable):
        logger.error("Token blocklist unavailable", exc_info=exc)
        return Response(
            {"data": None, "errors": [BLOCKLIST_UNAVAILABLE_MESSAGE]},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    # Permission decisions swallow database errors themselves; anything that
    # reaches here comes from a management operation.
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.error("Database error in %s", type(view).__name__ if view else "request", exc_info=exc)
        exc = StorageUnavailable()

    response = drf_exception_handler(exc, context)

    if response is None:
        return response

    # DRF downgrades NotAuthenticated to 403 when no authenticator offers a
    # WWW-Authenticate header; callers must see 401.
    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    if response.status_code >= 400:
        base_errors = response.data

        if response.status_code == status.HTTP_401_UNAUTHORIZED:
            if getattr(settings, "DEBUG_AUTH_ERRORS", False):
                errors = _normalize_errors(base_errors)
            else:
                errors = [UNAUTHORIZED_MESSAGE]
        elif response.status_code == status.HTTP_403_FORBIDDEN:
            errors = [FORBIDDEN_MESSAGE]
        else:
            errors = _normalize_errors(base_errors)

        response.data = {"data": None, "errors": errors}

    return response

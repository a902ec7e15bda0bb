"""API exceptions raised by role and custom grant management."""

from rest_framework import status
from rest_framework.exceptions import APIException


class Conflict(APIException):
    """Mutation rejected because of the target's state (system role, role in use)."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state of the resource."
    default_code = "conflict"


class StorageUnavailable(APIException):
    """Persistence failed during a management operation; the caller may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable."
    default_code = "storage_unavailable"


__all__ = ["Conflict", "StorageUnavailable"]

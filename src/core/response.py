"""The ``{"data": ..., "errors": [...]}`` envelope every endpoint answers with."""

from typing import Any

from rest_framework import status as http_status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import ViewSet


def envelope(data: Any, errors: list | None = None) -> dict[str, Any]:
    return {"data": data, "errors": errors or []}


def api_response(data: Any, status: int = http_status.HTTP_200_OK) -> Response:
    return Response(envelope(data), status=status)


class EnvelopeMixin:
    """Wrap successful responses that a view returned bare.

    Errors are enveloped by ``core.exceptions.custom_exception_handler`` and
    204 responses carry no body.
    """

    def finalize_response(self, request, response, *args, **kwargs):  # type: ignore[override]
        if (
            http_status.is_success(response.status_code)
            and response.status_code != http_status.HTTP_204_NO_CONTENT
            and getattr(response, "data", None) is not None
            and not (isinstance(response.data, dict) and {"data", "errors"} <= response.data.keys())
        ):
            response.data = envelope(response.data)
        return super().finalize_response(request, response, *args, **kwargs)  # type: ignore[misc]


class BaseAPIView(EnvelopeMixin, APIView):
    pass


class BaseViewSet(EnvelopeMixin, ViewSet):
    pass

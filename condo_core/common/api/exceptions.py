# condo_core/common/api/exceptions.py
"""
Single error shape for the whole API:

    {"error": {"code": ..., "message": ..., "details": ..., "request_id": ...}}

Produced here for DRF views and by TenantScopeMiddleware for requests it
rejects before DRF runs.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Optional, Tuple

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

REQUEST_ID_META_KEY = "HTTP_X_REQUEST_ID"
GENERIC_MESSAGE = "Request failed."

# checked in order; subclasses before their bases
ERROR_CODES = (
    (ValidationError, "validation_error"),
    (NotAuthenticated, "not_authenticated"),
    (AuthenticationFailed, "authentication_failed"),
    (PermissionDenied, "permission_denied"),
    (Http404, "not_found"),
)


class ConflictError(APIException):
    """409: the action collides with existing state (duplicate slug, second vote...)."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"


def ensure_request_id(request) -> str:
    """Client X-Request-Id if sent, otherwise a fresh one; cached on the request."""
    if request is None:
        return uuid.uuid4().hex
    rid = getattr(request, "request_id", None)
    if not rid:
        rid = request.META.get(REQUEST_ID_META_KEY) or uuid.uuid4().hex
        request.request_id = rid
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": ensure_request_id(request),
        }
    }


def error_code(exc: Exception, http_status: int) -> str:
    for exc_class, code in ERROR_CODES:
        if isinstance(exc, exc_class):
            return code
    if isinstance(exc, APIException):
        return exc.default_code or "api_error"
    return "server_error" if http_status >= 500 else "error"


def split_message(data: Any) -> Tuple[str, Optional[Any]]:
    """
    DRF error payload -> (message, details).

    {"detail": msg}          -> (msg, None)
    {"detail": msg, **extra} -> (msg, extra)
    [msg]                    -> (msg, None)
    anything else            -> (GENERIC_MESSAGE, data)   e.g. field errors
    """
    if isinstance(data, dict) and "detail" in data:
        extra = {k: v for k, v in data.items() if k != "detail"}
        return str(data["detail"]), extra or None
    if isinstance(data, list) and len(data) == 1:
        return str(data[0]), None
    return GENERIC_MESSAGE, data


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s (%s %s)",
            type(view).__name__ if view is not None else "unknown view",
            getattr(request, "method", "?"),
            getattr(request, "path", "?"),
            exc_info=exc,
        )
        body = build_error_envelope(request=request, code="server_error", message="Unexpected server error.")
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    message, details = split_message(response.data)
    body = build_error_envelope(
        request=request,
        code=error_code(exc, response.status_code),
        message=message,
        details=details,
    )
    return Response(body, status=response.status_code, headers=response.headers)

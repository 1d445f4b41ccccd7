"""
DRF exception handler

Renders every API error as ``{"code", "message", "details"?}`` so clients
can branch on a stable code. Domain errors carry their own status and
code; DRF and Django errors are mapped onto the same shape.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from django.conf import settings  # type: ignore
from rest_framework import exceptions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore
from rest_framework.views import set_rollback  # type: ignore

from shared.domain.exceptions import DomainError, InternalError

logger = logging.getLogger(__name__)

STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_406_NOT_ACCEPTABLE: "not_acceptable",
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: "unsupported_media_type",
    status.HTTP_429_TOO_MANY_REQUESTS: "throttled",
}


def _view_name(context: Dict[str, Any]) -> str:
    view = context.get("view")
    return view.__class__.__name__ if view is not None else "unknown view"


def _message_from_detail(detail: Any, fallback: str) -> str:
    if isinstance(detail, str):
        return str(detail)
    if isinstance(detail, dict) and "detail" in detail:
        return str(detail["detail"])
    return fallback


def _domain_error_response(exc: DomainError, context: Dict[str, Any]) -> Response:
    if isinstance(exc, InternalError):
        logger.error(
            f"{_view_name(context)} failed with {exc.code}: {exc.message}",
            exc_info=exc.cause or exc,
        )
    set_rollback()
    return Response(exc.to_dict(), status=exc.status_code)


def exception_handler(exc: Exception, context: Dict[str, Any]):
    """Entry point configured as REST_FRAMEWORK['EXCEPTION_HANDLER']."""

    if isinstance(exc, DomainError):
        return _domain_error_response(exc, context)

    response = drf_exception_handler(exc, context)

    if response is None:
        logger.error(f"Unhandled error in {_view_name(context)}: {exc}", exc_info=exc)
        set_rollback()
        message = str(exc) if settings.DEBUG else "Internal server error"
        return Response(
            {"code": "internal_error", "message": message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        response.data = {
            "code": "validation_error",
            "message": "Invalid request data",
            "details": exc.detail,
        }
        return response

    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        code = (
            "not_authenticated"
            if isinstance(exc, exceptions.NotAuthenticated)
            else "authentication_failed"
        )
    else:
        code = STATUS_CODES.get(response.status_code, "error")

    response.data = {
        "code": code,
        "message": _message_from_detail(getattr(exc, "detail", None), response.status_text),
    }
    return response

"""Standardized error responses.

Every failed request answers with the same body::

    {
        "type": "validation_error" | "client_error" | "server_error",
        "detail": "<human readable message>",
        "errors": [{"code": "...", "detail": "...", "attr": "..."}]
    }

``standardized_exception_handler`` is plugged into DRF through
``REST_FRAMEWORK["EXCEPTION_HANDLER"]``; views building error responses
themselves use :func:`error_response` so both paths look alike.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


def _error_type(status_code: int, exc: Optional[Exception] = None) -> str:
    if isinstance(exc, exceptions.ValidationError):
        return "validation_error"
    if status_code >= 500:
        return "server_error"
    return "client_error"


def _flatten(detail: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    """Turn DRF's nested ``ErrorDetail`` structures into a flat list."""
    if isinstance(detail, dict):
        errors = []
        for key, value in detail.items():
            nested = key if attr is None else f"{attr}.{key}"
            if key in ("non_field_errors", "detail"):
                nested = attr
            errors.extend(_flatten(value, nested))
        return errors
    if isinstance(detail, list):
        errors = []
        for item in detail:
            errors.extend(_flatten(item, attr))
        return errors
    return [
        {
            "code": getattr(detail, "code", "error"),
            "detail": str(detail),
            "attr": attr,
        }
    ]


def error_response(
    message: str,
    status_code: int,
    code: str = "error",
    error_type: Optional[str] = None,
) -> Response:
    """Build a standardized error response for a single message."""
    return Response(
        {
            "type": error_type or _error_type(status_code),
            "detail": message,
            "errors": [{"code": code, "detail": message, "attr": None}],
        },
        status=status_code,
    )


def standardized_exception_handler(exc: Exception, context: Dict[str, Any]):
    response = exception_handler(exc, context)
    if response is None:
        return None

    errors = _flatten(response.data)
    if isinstance(exc, exceptions.ValidationError):
        message = "Invalid input."
    else:
        message = errors[0]["detail"] if errors else "Request failed."

    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("api.error", status_code=response.status_code, detail=message)

    response.data = {
        "type": _error_type(response.status_code, exc),
        "detail": message,
        "errors": errors,
    }
    return response

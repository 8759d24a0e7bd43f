"""DRF exception handler producing a uniform error body.

Every error response has the shape::

    {"type": "client_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}

``ServiceError`` kinds are mapped to status codes here and nowhere else.
Internal errors are logged with their cause chain and rendered with a
generic detail.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

import structlog
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler

from modules.core.exceptions import ErrorKind, ServiceError

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_DETAIL = "Internal server error."


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    if isinstance(exc, ServiceError):
        return _service_error_response(exc, context)

    response = exception_handler(exc, context)
    if response is None:
        return None

    error_type = (
        "validation_error"
        if isinstance(exc, exceptions.ValidationError)
        else _error_type(response.status_code)
    )
    response.data = {"type": error_type, "errors": list(_flatten(response.data))}
    return response


def _service_error_response(exc: ServiceError, context: Dict[str, Any]) -> Response:
    status_code = exc.kind.status_code
    view = context.get("view")
    log = logger.bind(
        kind=exc.kind.value,
        view=type(view).__name__ if view is not None else None,
    )

    if exc.kind is ErrorKind.INTERNAL:
        log.error("request.internal_error", error=str(exc), exc_info=True)
        detail = INTERNAL_ERROR_DETAIL
    else:
        log.info("request.rejected", error=str(exc), missing=list(exc.missing))
        detail = exc.message

    error: Dict[str, Any] = {"code": exc.kind.value, "detail": detail, "attr": None}
    if exc.missing:
        error["missing"] = list(exc.missing)
    return Response(
        {"type": _error_type(status_code), "errors": [error]},
        status=status_code,
    )


def _error_type(status_code: int) -> str:
    return "server_error" if status_code >= 500 else "client_error"


def _flatten(data: Any, attr: Optional[str] = None) -> Iterator[Dict[str, Any]]:
    """Flatten DRF's nested error structures into a list of error entries."""
    if isinstance(data, dict):
        for key, value in data.items():
            if attr is None and key == "detail":
                yield from _flatten(value, None)
            else:
                yield from _flatten(value, key if attr is None else f"{attr}.{key}")
    elif isinstance(data, list):
        for index, item in enumerate(data):
            if isinstance(item, (dict, list)):
                yield from _flatten(item, str(index) if attr is None else f"{attr}.{index}")
            else:
                yield from _flatten(item, attr)
    else:
        yield {"code": getattr(data, "code", "error"), "detail": str(data), "attr": attr}


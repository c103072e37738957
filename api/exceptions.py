"""
API exception handlers.

This module maps domain and framework errors to the JSON error shape
{"error": {"code": ..., "message": ...}}.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ParseError, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    BadRequestError,
    ConflictError,
    DeadlineExceededError,
    DomainException,
    ForbiddenError,
    NotFoundError,
    StorageError,
    UnauthorizedError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

# First match wins.
DOMAIN_STATUS_CODES = (
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (BadRequestError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (DeadlineExceededError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: DomainException) -> int:
    """HTTP status for a domain exception; unknown subclasses are client errors."""
    for exc_type, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)
    endpoint = _get_endpoint(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id, endpoint)
    elif isinstance(exc, (ParseError, ValidationError)):
        response = Response(
            {"error": {"code": "BAD_REQUEST", "message": _detail_message(exc)}},
            status=status.HTTP_400_BAD_REQUEST,
        )
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        response.data = {"error": {"code": code, "message": _detail_message(exc)}}
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, trace_id, endpoint)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _get_endpoint(context: Dict[str, Any]) -> str:
    view = context.get("view")
    return view.__class__.__name__ if view is not None else "unknown"


def _detail_message(exc: APIException) -> str:
    detail = exc.detail
    if isinstance(detail, dict):
        field, errors = next(iter(detail.items()), ("", ""))
        error = errors[0] if isinstance(errors, list) and errors else errors
        return f"{field}: {error}" if field != "non_field_errors" else str(error)
    if isinstance(detail, list):
        return str(detail[0]) if detail else "Invalid request body"
    return str(detail)


def _handle_domain_exception(
    exc: DomainException, trace_id: Optional[str], endpoint: str
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for(exc)
    errors_total.labels(error_type=exc.code, endpoint=endpoint).inc()

    if isinstance(exc, StorageError):
        # Driver details stay in the logs.
        logger.error("Storage failure: %s", exc.message, extra={"trace_id": trace_id})
        return Response(
            {"error": {"code": exc.code, "message": INTERNAL_ERROR_MESSAGE}},
            status=status_code,
        )

    logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    return Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)


def _handle_unexpected_exception(
    exc: Exception, trace_id: Optional[str], endpoint: str
) -> Response:
    """Handle unexpected or untracked exceptions."""
    errors_total.labels(error_type=type(exc).__name__, endpoint=endpoint).inc()
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": INTERNAL_ERROR_MESSAGE}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )

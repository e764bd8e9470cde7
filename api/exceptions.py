"""
API exception handlers.

This module provides custom exception handling for REST API responses.
Every error is rendered as ``{"error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    ConflictError,
    DomainException,
    DomainValidationError,
    FeatureSuspendedError,
    InvalidLicenseKeyError,
    LicenseAlreadyActiveError,
    LicenseNotActiveError,
    LicenseSuspendedError,
    NotFoundError,
    QuotaExceededError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

# Most specific classes first
DOMAIN_STATUS_CODES = (
    (DomainValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (LicenseAlreadyActiveError, status.HTTP_409_CONFLICT),
    (InvalidLicenseKeyError, status.HTTP_401_UNAUTHORIZED),
    (QuotaExceededError, status.HTTP_429_TOO_MANY_REQUESTS),
    (FeatureSuspendedError, status.HTTP_403_FORBIDDEN),
    (LicenseSuspendedError, status.HTTP_403_FORBIDDEN),
    (LicenseNotActiveError, status.HTTP_403_FORBIDDEN),
)


def status_code_for(exc: DomainException) -> int:
    """Map a domain exception to its HTTP status code."""
    for exc_type, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    correlation_id = _get_correlation_id(context)
    endpoint = _get_endpoint(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, correlation_id, endpoint)
    elif isinstance(exc, ValidationError):
        response = Response(
            {"error": {"code": "VALIDATION_ERROR", "message": exc.detail}},
            status=status.HTTP_400_BAD_REQUEST,
        )
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_") if exc.default_code else "API_ERROR"
        response.data = {
            "error": {"code": code, "message": response.data.get("detail", exc.default_detail)}
        }
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, correlation_id, endpoint)

    if correlation_id:
        response["X-Correlation-ID"] = correlation_id
    return response


def _get_correlation_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract correlation ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "correlation_id", None)


def _get_endpoint(context: Dict[str, Any]) -> str:
    view = context.get("view")
    return type(view).__name__ if view is not None else "unknown"


def _handle_domain_exception(
    exc: DomainException, correlation_id: Optional[str], endpoint: str
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_code_for(exc)
    errors_total.labels(error_type=exc.code, endpoint=endpoint).inc()

    logger.warning(
        "Domain exception: %s - %s",
        exc.code,
        exc.message,
        extra={"correlation_id": correlation_id, "status_code": status_code},
    )
    body = {"error": {"code": exc.code, "message": exc.message}}
    if isinstance(exc, LicenseNotActiveError) and exc.status:
        body["error"]["status"] = exc.status
    return Response(body, status=status_code)


def _handle_unexpected_exception(
    exc: Exception, correlation_id: Optional[str], endpoint: str
) -> Response:
    """Handle unexpected or untracked exceptions."""
    errors_total.labels(error_type=type(exc).__name__, endpoint=endpoint).inc()
    logger.error(
        "Unexpected error: %s", exc, extra={"correlation_id": correlation_id}, exc_info=True
    )
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )

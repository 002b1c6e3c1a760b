"""Shared error taxonomy and the API error envelope.

Every module raises subclasses of the base classes below.  Each class
carries a stable ``code`` (part of the public contract) and the HTTP
``status_code`` the API layer answers with.

``api_exception_handler`` is wired in ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``
and renders domain errors, DRF errors and Pydantic validation errors in a
single shape::

    {"type": "client_error", "errors": [{"code": "...", "detail": "...", "attr": null}]}
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Base class for business-rule violations raised by the service layer."""

    code = "DOMAIN_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(DomainError):
    """A referenced entity does not exist."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class Unauthorized(DomainError):
    """The caller lacks ownership of the entity or the required role."""

    code = "UNAUTHORIZED"
    status_code = status.HTTP_403_FORBIDDEN


class Conflict(DomainError):
    """A unique key would be duplicated."""

    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT


class ValidationFailed(DomainError):
    """Input is well-formed JSON but violates a domain rule."""

    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------


def _error(code: str, detail: str, attr: Optional[str] = None) -> Dict[str, Any]:
    return {"code": code, "detail": detail, "attr": attr}


def _flatten_drf_detail(detail: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    """Flatten DRF's nested ``detail`` (dict / list / ErrorDetail) into a list."""
    if isinstance(detail, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in detail.items():
            nested = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors":
                nested = attr
            errors.extend(_flatten_drf_detail(value, nested))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                nested = str(index) if attr is None else f"{attr}.{index}"
                errors.extend(_flatten_drf_detail(value, nested))
            else:
                errors.extend(_flatten_drf_detail(value, attr))
        return errors
    code = getattr(detail, "code", None) or "error"
    return [_error(code, str(detail), attr)]


def _flatten_pydantic(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    errors = []
    for err in exc.errors():
        attr = ".".join(str(part) for part in err.get("loc", ())) or None
        errors.append(_error(ValidationFailed.code, err.get("msg", ""), attr))
    return errors


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """DRF exception handler producing the standard error envelope."""
    if isinstance(exc, DomainError):
        logger.info(
            "api.domain_error",
            code=exc.code,
            error_class=type(exc).__name__,
            detail=str(exc),
        )
        return Response(
            {"type": "client_error", "errors": [_error(exc.code, str(exc))]},
            status=exc.status_code,
        )

    if isinstance(exc, PydanticValidationError):
        return Response(
            {"type": "validation_error", "errors": _flatten_pydantic(exc)},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    error_type = (
        "validation_error"
        if isinstance(exc, (drf_exceptions.ValidationError, drf_exceptions.ParseError))
        else "client_error"
    )
    detail = getattr(exc, "detail", response.data)
    response.data = {"type": error_type, "errors": _flatten_drf_detail(detail)}
    return response

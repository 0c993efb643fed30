"""Service exception taxonomy and the JSON error envelope.

Every error the API reports is a ``CandidateServiceError``.  The exception
handlers installed by :func:`register_exception_handlers` turn them, and
FastAPI's own ``RequestValidationError``, into::

    {"success": false, "error": "...", "message": "...", "messages": [...]}
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.core.constants import FIELD_LABELS, FIELD_UNITS
from app.models.enums import CandidateStatus

logger = logging.getLogger(__name__)

# Leading ``loc`` segments FastAPI adds for where a value came from.
_REQUEST_SOURCES = {"body", "query", "path", "header", "cookie"}


class CandidateServiceError(Exception):
    """Base class for errors that map onto an HTTP status and envelope."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(
        self,
        error: str | None = None,
        *,
        message: str | None = None,
        messages: list[str] | None = None,
    ) -> None:
        if error is not None:
            self.error = error
        self.message = message
        self.messages = messages
        super().__init__(message or self.error)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "error": self.error}
        if self.message is not None:
            payload["message"] = self.message
        if self.messages is not None:
            payload["messages"] = self.messages
        return payload


class CandidateValidationError(CandidateServiceError):
    """One or more fields violate the candidate schema."""

    status_code = 400
    error = "Validation Error"

    def __init__(self, messages: list[str]) -> None:
        super().__init__(messages=messages)

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> CandidateValidationError:
        return cls(describe_errors(exc.errors()))


class CandidateNotFoundError(CandidateServiceError):
    status_code = 404
    error = "Candidate not found"


class InvalidStatusError(CandidateServiceError):
    """A status value outside :class:`CandidateStatus`."""

    status_code = 400
    error = "Invalid status. Must be one of: " + ", ".join(CandidateStatus.values())


class InvalidQueryError(CandidateServiceError):
    status_code = 400
    error = "Invalid query"


class UnexpectedServiceError(CandidateServiceError):
    """Store or transport failure; ``message`` carries the original text."""

    status_code = 500


# ---------------------------------------------------------------------------
# Pydantic error -> human message
# ---------------------------------------------------------------------------


def _field_of(loc: tuple[Any, ...]) -> str:
    parts = [p for p in loc if not (isinstance(p, str) and p in _REQUEST_SOURCES)]
    for part in parts:
        if isinstance(part, str):
            return part
    return ""


def describe_error(error: Mapping[str, Any]) -> str:
    """Render one pydantic error dict as a sentence naming its field."""
    field = _field_of(tuple(error.get("loc", ())))
    label = FIELD_LABELS.get(field, field or "Request body")
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f"{label} is required"
    if kind == "string_too_short":
        return f"{label} is required"
    if kind == "string_too_long":
        return f"{label} cannot be more than {ctx.get('max_length')} characters"
    if kind == "greater_than_equal":
        if ctx.get("ge") == 0:
            return f"{label} cannot be negative"
        return f"{label} must be at least {ctx.get('ge')}"
    if kind == "less_than_equal":
        return f"{label} cannot be more than {ctx.get('le')}{FIELD_UNITS.get(field, '')}"
    if kind in ("int_parsing", "int_type", "int_from_float"):
        return f"{label} must be a whole number"
    if kind in ("float_parsing", "float_type", "finite_number"):
        return f"{label} must be a number"
    if kind in ("string_type",):
        return f"{label} must be text"
    if kind == "list_type":
        return f"{field.capitalize()} must be a list"
    if kind.startswith("datetime") or kind.startswith("date_"):
        return f"{label} must be a valid date"
    if kind in ("enum", "literal_error"):
        if field == "status":
            return InvalidStatusError.error
        return f"{label} has an unsupported value"
    if kind in ("dict_type", "model_type", "model_attributes_type"):
        return "Request body must be a JSON object"
    if kind == "json_invalid":
        return "Request body is not valid JSON"
    if kind == "value_error":
        # Raised by our own field validators; the text is already final.
        return str(ctx.get("error", error.get("msg", "")))
    return f"{label}: {error.get('msg', 'invalid value')}"


def describe_errors(errors: Iterable[Mapping[str, Any]]) -> list[str]:
    """One message per violated field, in the order pydantic reported them."""
    seen: set[str] = set()
    messages: list[str] = []
    for error in errors:
        field = _field_of(tuple(error.get("loc", ())))
        if field in seen:
            continue
        seen.add(field)
        messages.append(describe_error(error))
    return messages


# ---------------------------------------------------------------------------
# FastAPI wiring
# ---------------------------------------------------------------------------


async def _service_error_handler(request: Request, exc: CandidateServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            extra={
                "path": request.url.path,
                "error": exc.error,
                "error_message": exc.message,
            },
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = CandidateValidationError(describe_errors(exc.errors()))
    logger.info(
        "request_rejected",
        extra={"path": request.url.path, "messages": error.messages},
    )
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing handlers on ``app``."""
    app.add_exception_handler(CandidateServiceError, _service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]

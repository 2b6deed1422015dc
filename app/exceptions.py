# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error raised by a service ends up here and is translated into a JSON
# body with the best matching status code:
#   400 validation / bad reference / bad query
#   404 unknown id
#   409 uniqueness violation
#   500 storage or unexpected failure (no internals leaked)
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from lib.supabase_client import DuplicateKeyError, SupabaseClientError

logger = logging.getLogger(__name__)


class AssessmentException(Exception):
    """
    Base exception for the questionnaire API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ASSESSMENT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Document Exceptions
# =============================================================================

class RecordNotFoundError(AssessmentException):
    """Raised when a document id doesn't exist."""

    def __init__(self, resource: str, record_id: str):
        super().__init__(
            message=f"{resource} not found: {record_id}",
            code="NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource.lower()} id is correct",
            details={"resource": resource, "id": record_id}
        )


class DocumentValidationError(AssessmentException):
    """Raised when a document fails schema validation."""

    def __init__(self, resource: str, errors: list[dict[str, Any]]):
        super().__init__(
            message=f"{resource} validation failed",
            code="VALIDATION_ERROR",
            status_code=400,
            suggestion="Fix the listed fields and try again",
            details={"resource": resource, "errors": errors}
        )

    @classmethod
    def from_pydantic(cls, resource: str, exc: ValidationError) -> "DocumentValidationError":
        """Build from a pydantic ValidationError, keeping only safe parts."""
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]) or "__root__",
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        return cls(resource, errors)


class InvalidReferenceError(AssessmentException):
    """Raised when a document references ids that don't exist."""

    def __init__(self, resource: str, field: str, missing: list[str]):
        super().__init__(
            message=f"{resource}.{field} references unknown ids: {', '.join(missing)}",
            code="INVALID_REFERENCE",
            status_code=400,
            suggestion=f"Create the referenced documents before saving this {resource.lower()}",
            details={"resource": resource, "field": field, "missing": missing}
        )


class InvalidQueryError(AssessmentException):
    """Raised when list query options are malformed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="INVALID_QUERY",
            status_code=400,
            suggestion="Check filter, sort, select and pagination parameters",
            details=details
        )


class DuplicateRecordError(AssessmentException):
    """Raised when a write collides with an existing unique document."""

    def __init__(self, resource: str, fields: list[str]):
        super().__init__(
            message=f"{resource} already exists with the same {', '.join(fields)}",
            code="DUPLICATE_RECORD",
            status_code=409,
            suggestion=f"Update the existing {resource.lower()} instead of creating a new one",
            details={"resource": resource, "fields": fields}
        )


# =============================================================================
# Seeding Exceptions
# =============================================================================

class InvalidSeedFileError(AssessmentException):
    """Raised when a seed file exists but can't be parsed."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Invalid seed file {path}: {error}",
            code="INVALID_SEED_FILE",
            status_code=500,
            suggestion="Seed files must contain a JSON object or an array of objects",
            details={"path": path}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def assessment_exception_handler(
    request: Request,
    exc: AssessmentException
) -> JSONResponse:
    """
    Convert AssessmentException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def storage_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """
    Handle storage errors without leaking query details.
    """
    if isinstance(exc, DuplicateKeyError):
        return JSONResponse(
            status_code=409,
            content={
                "detail": exc.message,
                "code": "DUPLICATE_RECORD",
                "suggestion": exc.suggestion,
            }
        )

    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "A storage error occurred",
            "code": "STORAGE_ERROR",
        }
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request validation errors (malformed ids, bodies, query values).
    """
    errors = exc.errors() if hasattr(exc, "errors") else []
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "details": {
                "errors": [
                    {
                        "field": ".".join(str(part) for part in error.get("loc", ())),
                        "message": error.get("msg"),
                        "type": error.get("type"),
                    }
                    for error in errors
                ]
            },
        }
    )

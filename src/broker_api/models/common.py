"""Shared API response models.

Error responses follow the ToolError shape from broker.models.errors; this
module adds the request-validation and route-not-found variants.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Re-export ToolError for convenience - this is the standard error format
from broker.models.errors import ErrorCode, ToolError

__all__ = [
    "ErrorCode",
    "NotFoundResponse",
    "ToolError",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
    "format_validation_errors",
]


class ValidationErrorDetail(BaseModel):
    """Detail of a single validation error."""

    model_config = ConfigDict(strict=True)

    loc: list[str] = Field(
        ...,
        description="Path to the field that failed validation",
        examples=[["body", "currency"]],
    )
    msg: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Error type identifier", examples=["string_type"])


class ValidationErrorResponse(BaseModel):
    """Response for malformed request bodies (HTTP 400)."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: str = "ERR_VALIDATION"
    message: str = "Request validation failed"
    recovery: str = "Check the request body and try again"
    details: list[ValidationErrorDetail] = Field(default_factory=list)


class NotFoundResponse(BaseModel):
    """Response for unknown routes."""

    success: bool = False
    message: str


def format_validation_errors(errors: Any) -> ValidationErrorResponse:
    """Convert Pydantic validation errors to a ValidationErrorResponse.

    Args:
        errors: Sequence of error dicts from ``ValidationError.errors()``

    Returns:
        ValidationErrorResponse ready for JSON serialization.
    """
    details = [
        ValidationErrorDetail(
            loc=[str(loc) for loc in error.get("loc", [])],
            msg=str(error.get("msg", "")),
            type=str(error.get("type", "")),
        )
        for error in errors
    ]
    return ValidationErrorResponse(details=details)

"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["TRANSACTION_SOURCE_ERROR"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Unable to fetch transaction history. Please try again later."],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )

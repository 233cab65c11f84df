"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from payfi_credit.domain.exceptions import (
    DomainException,
    InvalidAssessmentRequestException,
    InvalidAdjustmentRequestException,
    TransactionSourceException,
    TransactionSourceTimeoutException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(InvalidAssessmentRequestException)
    async def invalid_assessment_handler(
        request: Request,
        exc: InvalidAssessmentRequestException,
    ) -> JSONResponse:
        """Handle invalid assessment requests."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(InvalidAdjustmentRequestException)
    async def invalid_adjustment_handler(
        request: Request,
        exc: InvalidAdjustmentRequestException,
    ) -> JSONResponse:
        """Handle invalid adjustment requests."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(TransactionSourceTimeoutException)
    async def transaction_source_timeout_handler(
        request: Request,
        exc: TransactionSourceTimeoutException,
    ) -> JSONResponse:
        """Handle transaction source timeouts."""
        logger.error(
            "transaction_source_timeout",
            request_id=get_request_id(),
        )
        return _error_response(
            503,
            exc.code,
            "Service temporarily unavailable. Please try again.",
        )

    @app.exception_handler(TransactionSourceException)
    async def transaction_source_error_handler(
        request: Request,
        exc: TransactionSourceException,
    ) -> JSONResponse:
        """Handle transaction source errors."""
        logger.error(
            "transaction_source_error",
            request_id=get_request_id(),
            message=exc.message,
            status_code=exc.status_code,
        )
        return _error_response(
            503,
            exc.code,
            "Unable to fetch transaction history. Please try again later.",
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")

"""Health check endpoint for service monitoring."""

from fastapi import APIRouter
from pydantic import BaseModel

from payfi_credit import __version__
from payfi_credit.core.config import settings

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    transaction_source: str


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the service and the active transaction source.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        transaction_source=settings.transaction_source,
    )

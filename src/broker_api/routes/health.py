"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from broker import __version__
from broker.services.razorpay_service import RazorpayService
from broker_api.dependencies import get_gateway

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service health status."""

    status: str
    version: str
    timestamp: datetime
    gateway_configured: bool


@router.get(
    "/health",
    summary="Health check",
    response_model=HealthResponse,
)
async def health(gateway: RazorpayService = Depends(get_gateway)) -> HealthResponse:
    """Report service health and whether the gateway is configured."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(UTC),
        gateway_configured=gateway.is_configured,
    )

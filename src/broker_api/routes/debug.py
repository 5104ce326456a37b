"""Gateway configuration diagnostics.

Reports whether credentials are present without revealing them: the key id
is cut to its first 8 characters and the key secret is never shown.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from broker.services.ledger import OrderLedger
from broker.services.razorpay_service import RazorpayService
from broker.utils.logging import mask_value
from broker_api.dependencies import get_gateway, get_ledger

router = APIRouter(tags=["debug"])


class GatewayDiagnostics(BaseModel):
    """Gateway configuration summary."""

    success: bool = True
    gateway_configured: bool
    key_id_present: bool
    key_secret_present: bool
    key_id_prefix: str
    orders_in_ledger: int
    server_time: datetime


@router.get(
    "/debug/gateway",
    summary="Gateway configuration diagnostics",
    response_model=GatewayDiagnostics,
)
async def gateway_diagnostics(
    gateway: RazorpayService = Depends(get_gateway),
    ledger: OrderLedger = Depends(get_ledger),
) -> GatewayDiagnostics:
    """Check gateway credentials and ledger size."""
    key_id = gateway.key_id
    return GatewayDiagnostics(
        gateway_configured=gateway.is_configured,
        key_id_present=bool(key_id),
        key_secret_present=bool(gateway.key_secret),
        key_id_prefix=mask_value(key_id),
        orders_in_ledger=len(ledger),
        server_time=datetime.now(UTC),
    )

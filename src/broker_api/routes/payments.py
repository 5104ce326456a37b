"""Payment verification endpoint.

The client posts the identifiers and signature it received from the
checkout. A valid signature marks the ledger order as verified.
"""

from fastapi import APIRouter, Depends

from broker.services.verification_service import VerificationService
from broker_api.dependencies import get_verification_service
from broker_api.models.orders import VerifyPaymentRequest, VerifyPaymentResponse

router = APIRouter(tags=["payments"])


@router.post(
    "/verify-payment",
    summary="Verify payment signature",
    description="""
Verify that a completed payment was signed by the gateway.

The signature must equal HMAC-SHA256(key_secret, "order_id|payment_id")
as lowercase hex.

**Notes:**
- Missing or blank fields are rejected before any signature check
- A mismatch marks the order `verification_failed`; a later correct
  signature still verifies it
""",
    response_model=VerifyPaymentResponse,
    responses={
        400: {"description": "Missing parameter or invalid signature"},
        404: {"description": "Order not found"},
        500: {"description": "Key secret not configured"},
    },
)
async def verify_payment(
    body: VerifyPaymentRequest,
    verification_service: VerificationService = Depends(get_verification_service),
) -> VerifyPaymentResponse:
    """Verify a payment claim."""
    result = verification_service.verify_payment(
        body.order_id, body.payment_id, body.signature
    )
    return VerifyPaymentResponse(
        order_id=result.order_id,
        payment_id=result.payment_id,
        verified_at=result.verified_at,
    )

"""Payment signature computation.

The gateway signs ``<order_id>|<payment_id>`` with HMAC-SHA256 using the
account's key secret. Recomputing that digest with the same secret is the
only proof that a payment claim came from the genuine checkout flow.
"""

import hashlib
import hmac

SIGNATURE_SEPARATOR = "|"


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Compute the expected payment signature.

    Args:
        order_id: Gateway order ID
        payment_id: Gateway payment ID
        secret: Shared key secret

    Returns:
        Lowercase hex HMAC-SHA256 digest of ``order_id|payment_id``.
    """
    message = f"{order_id}{SIGNATURE_SEPARATOR}{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def signatures_match(expected: str, claimed: str) -> bool:
    """Compare two signatures in constant time."""
    return hmac.compare_digest(expected.encode("utf-8"), claimed.encode("utf-8"))

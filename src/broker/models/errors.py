"""Standard error codes for the payment broker.

Every failure the broker reports is one of these codes. Each code carries a
human-readable default message and a recovery hint; the HTTP layer maps codes
to status classes (caller, server, upstream).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Closed set of broker error codes."""

    # Caller errors (ERR_001-ERR_006)
    INVALID_AMOUNT = "ERR_001"
    AMOUNT_TOO_SMALL = "ERR_002"
    AMOUNT_TOO_LARGE = "ERR_003"
    MISSING_PARAMETER = "ERR_004"
    SIGNATURE_MISMATCH = "ERR_005"
    ORDER_NOT_FOUND = "ERR_006"

    # Server/configuration errors (ERR_SRV_001-ERR_SRV_002)
    SERVER_MISCONFIGURED = "ERR_SRV_001"
    SERVICE_UNAVAILABLE = "ERR_SRV_002"

    # Upstream gateway errors (ERR_GW_001)
    GATEWAY_ERROR = "ERR_GW_001"


class ErrorClass(str, Enum):
    """Who is responsible for an error."""

    CALLER = "caller"
    SERVER = "server"
    UPSTREAM = "upstream"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_AMOUNT: "Invalid amount. Amount must be a whole number in the smallest currency unit",
    ErrorCode.AMOUNT_TOO_SMALL: "Amount is below the minimum allowed",
    ErrorCode.AMOUNT_TOO_LARGE: "Amount exceeds the maximum allowed",
    ErrorCode.MISSING_PARAMETER: "A required parameter is missing",
    ErrorCode.SIGNATURE_MISMATCH: "Payment verification failed. Invalid signature.",
    ErrorCode.ORDER_NOT_FOUND: "Order not found",
    ErrorCode.SERVER_MISCONFIGURED: "Server configuration error. Please contact support.",
    ErrorCode.SERVICE_UNAVAILABLE: "Payment gateway is not configured",
    ErrorCode.GATEWAY_ERROR: "Failed to create order",
}

# Recovery suggestions for clients
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_AMOUNT: "Send the amount as an integer number of paise",
    ErrorCode.AMOUNT_TOO_SMALL: "Increase the amount to at least the minimum",
    ErrorCode.AMOUNT_TOO_LARGE: "Reduce the amount or split the payment",
    ErrorCode.MISSING_PARAMETER: "Include all of order_id, payment_id and signature",
    ErrorCode.SIGNATURE_MISMATCH: "Submit the identifiers and signature returned by the checkout",
    ErrorCode.ORDER_NOT_FOUND: "Verify the order ID or create a new order",
    ErrorCode.SERVER_MISCONFIGURED: "Contact support",
    ErrorCode.SERVICE_UNAVAILABLE: "Try again later or contact support",
    ErrorCode.GATEWAY_ERROR: "Try again or contact support",
}

ERROR_CLASSES: dict[ErrorCode, ErrorClass] = {
    ErrorCode.INVALID_AMOUNT: ErrorClass.CALLER,
    ErrorCode.AMOUNT_TOO_SMALL: ErrorClass.CALLER,
    ErrorCode.AMOUNT_TOO_LARGE: ErrorClass.CALLER,
    ErrorCode.MISSING_PARAMETER: ErrorClass.CALLER,
    ErrorCode.SIGNATURE_MISMATCH: ErrorClass.CALLER,
    ErrorCode.ORDER_NOT_FOUND: ErrorClass.CALLER,
    ErrorCode.SERVER_MISCONFIGURED: ErrorClass.SERVER,
    ErrorCode.SERVICE_UNAVAILABLE: ErrorClass.SERVER,
    ErrorCode.GATEWAY_ERROR: ErrorClass.UPSTREAM,
}


class ToolError(BaseModel):
    """Standard error response format for broker failures."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
        message: Optional[str] = None,
    ) -> "ToolError":
        """Create a ToolError from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error
            message: Optional message replacing the default for the code

        Returns:
            A ToolError with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=message or ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BrokerError(Exception):
    """Exception raised by order and verification operations.

    Caught by the API exception handler and converted to a ToolError.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
        message: Optional[str] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    @property
    def error_class(self) -> ErrorClass:
        """Responsibility class of this error."""
        return ERROR_CLASSES[self.code]

    def to_tool_error(self) -> ToolError:
        """Convert this exception to a ToolError for API responses."""
        return ToolError.from_code(self.code, self.details, self.message)

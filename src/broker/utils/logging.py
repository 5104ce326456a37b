"""Structured logging utilities with correlation ID support.

Provides:
- Correlation ID context management for request tracing
- Structured logging formatter for consistent log output
- Helpers for order and verification logging that never emit secrets

Usage:
    from broker.utils.logging import get_logger, set_correlation_id

    # In middleware/request handler:
    set_correlation_id(request.headers.get("X-Correlation-ID"))

    # In service code:
    logger = get_logger(__name__)
    logger.info("Order created", extra={"order_id": "order_ABC"})
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

# Context variable for correlation ID - thread-safe and async-safe
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def generate_correlation_id() -> str:
    """Generate a new UUID-based correlation ID."""
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the correlation ID for the current request context.

    Args:
        correlation_id: Optional existing correlation ID. If None, generates new one.

    Returns:
        The correlation ID that was set
    """
    cid = correlation_id or generate_correlation_id()
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    """Get the current correlation ID, or None if not set."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID context."""
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds correlation_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "no-correlation-id"
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter for structured log output with correlation ID."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or "no-correlation-id"

        base = super().format(record)

        # Correlation ID prefix for easy grep/filtering
        return f"[{record.correlation_id}] {base}"


def configure_logging(level: int = logging.INFO) -> None:
    """Install a structured stream handler on the root logger.

    Safe to call more than once; an existing structured handler is reused.

    Args:
        level: Root log level
    """
    root = logging.getLogger()
    root.setLevel(level)

    if any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with correlation ID support.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())

    return logger


def mask_value(value: str | None, visible: int = 8) -> str:
    """Show only the first characters of a sensitive value.

    Args:
        value: Value to mask (key id, signature)
        visible: Number of leading characters to keep

    Returns:
        Masked representation, or "not set" for empty values.
    """
    if not value:
        return "not set"
    return f"{value[:visible]}..."


def log_payment_operation(
    logger: logging.Logger,
    operation: str,
    *,
    order_id: str | None = None,
    payment_id: str | None = None,
    amount: int | None = None,
    currency: str | None = None,
    status: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log an order or payment operation with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "create_order", "verify_payment")
        order_id: Gateway order ID if available
        payment_id: Gateway payment ID if available
        amount: Amount in smallest currency unit if relevant
        currency: Currency code if relevant
        status: Order status after the operation
        error: Error message if operation failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"operation": operation}

    if order_id:
        context["order_id"] = order_id
    if payment_id:
        context["payment_id"] = payment_id
    if amount is not None:
        context["amount"] = amount
    if currency:
        context["currency"] = currency
    if status:
        context["status"] = status
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Payment operation: {operation}"]
    for key, value in context.items():
        if key != "operation":
            msg_parts.append(f"{key}={value}")

    message = " | ".join(msg_parts)

    if error:
        logger.error(message, extra=context)
    else:
        logger.info(message, extra=context)


def log_verification_attempt(
    logger: logging.Logger,
    order_id: str,
    payment_id: str,
    signature: str,
    *,
    result: str,
    attempts: int | None = None,
    **extra: Any,
) -> None:
    """Log a signature verification attempt.

    Only the signature length and its first 10 characters are logged.

    Args:
        logger: Logger instance
        order_id: Claimed order ID
        payment_id: Claimed payment ID
        signature: Claimed signature
        result: "verified", "mismatch" or "unknown_order"
        attempts: Failed attempts recorded for the order so far
        **extra: Additional context fields
    """
    context: dict[str, Any] = {
        "order_id": order_id,
        "payment_id": payment_id,
        "signature_length": len(signature),
        "signature_prefix": mask_value(signature, visible=10),
        "result": result,
    }
    if attempts is not None:
        context["verification_attempts"] = attempts
    context.update(extra)

    message = (
        f"Verification: order={order_id} payment={payment_id} result={result} "
        f"signature={context['signature_prefix']} (len {context['signature_length']})"
    )
    if attempts:
        message += f" attempts={attempts}"

    if result == "verified":
        logger.info(message, extra=context)
    else:
        logger.warning(message, extra=context)

"""HTTP middleware for the broker API."""

from broker_api.middleware.correlation import CORRELATION_ID_HEADER, CorrelationIdMiddleware
from broker_api.middleware.request_logging import RequestLoggingMiddleware

__all__ = ["CORRELATION_ID_HEADER", "CorrelationIdMiddleware", "RequestLoggingMiddleware"]

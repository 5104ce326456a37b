"""FastAPI application for the payment broker REST API.

This package provides REST endpoints for:
- Health checks
- Order creation and ledger introspection
- Payment signature verification
- Gateway configuration diagnostics
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from broker import __version__
from broker.config import BrokerSettings
from broker.utils.logging import configure_logging, mask_value
from broker_api.dependencies import get_gateway, get_ledger, get_settings
from broker_api.exceptions import register_exception_handlers
from broker_api.middleware import CorrelationIdMiddleware, RequestLoggingMiddleware
from broker_api.routes import debug_router, health_router, orders_router, payments_router

logger = logging.getLogger(__name__)
configure_logging(logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log gateway configuration at startup and ledger size at shutdown."""
    gateway = get_gateway()
    if gateway.is_configured:
        logger.info("Razorpay configured with key: %s", mask_value(gateway.key_id))
    else:
        logger.error("Razorpay keys missing: order creation will be unavailable")
    if not gateway.key_secret:
        logger.error("RAZORPAY_KEY_SECRET missing: payment verification will fail")

    yield

    logger.info("Shutting down with %d orders in ledger (discarded)", len(get_ledger()))


def create_app(settings: BrokerSettings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings for CORS; defaults to the cached environment settings.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Payment Broker API",
        description="Creates gateway payment orders and verifies completed payments",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Correlation-ID"],
    )

    register_exception_handlers(app)

    app.include_router(health_router, prefix="/api")
    app.include_router(orders_router, prefix="/api")
    app.include_router(payments_router, prefix="/api")
    app.include_router(debug_router, prefix="/api")

    @app.get("/api/ping")
    async def ping() -> dict[str, Any]:
        """Liveness check."""
        return {
            "status": "ok",
            "timestamp": datetime.now(UTC).isoformat(),
            "service": "payment-broker",
        }

    return app


app = create_app()

# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int | None = None, reload: bool = False) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: PORT setting, 3000)
        reload: Enable hot reload for development
    """
    import uvicorn

    port = port or get_settings().port
    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run("broker_api.main:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()

"""API routes package.

Routers are organized by concern:

- health: Health check endpoints
- orders: Order creation and ledger introspection
- payments: Payment signature verification
- debug: Gateway configuration diagnostics

All routers are registered in main.py with /api prefix.
"""

from broker_api.routes.debug import router as debug_router
from broker_api.routes.health import router as health_router
from broker_api.routes.orders import router as orders_router
from broker_api.routes.payments import router as payments_router

__all__ = [
    "debug_router",
    "health_router",
    "orders_router",
    "payments_router",
]

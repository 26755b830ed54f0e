"""API route modules."""

from stockroom.api.routes.health import router as health_router
from stockroom.api.routes.inventory import router as inventory_router

__all__ = [
    "health_router",
    "inventory_router",
]

"""API routers package."""

from papertrade.api.routers.portfolio import router as portfolio_router
from papertrade.api.routers.transactions import router as transactions_router
from papertrade.api.routers.sync import router as sync_router

__all__ = [
    "portfolio_router",
    "transactions_router",
    "sync_router",
]

"""Domain layer - pure business models with no external dependencies."""

from papertrade.domain.models import (
    Holding,
    Portfolio,
    Transaction,
    LocalQueueEntry,
    TradeSide,
    SyncState,
)

__all__ = [
    "Holding",
    "Portfolio",
    "Transaction",
    "LocalQueueEntry",
    "TradeSide",
    "SyncState",
]

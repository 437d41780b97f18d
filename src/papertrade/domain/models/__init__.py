"""Domain models package."""

from papertrade.domain.models.enums import TradeSide, SyncState
from papertrade.domain.models.portfolio import Holding, Portfolio
from papertrade.domain.models.transaction import (
    LOCAL_ID_PREFIX,
    LocalQueueEntry,
    Transaction,
    new_local_id,
)

__all__ = [
    "TradeSide",
    "SyncState",
    "Holding",
    "Portfolio",
    "LOCAL_ID_PREFIX",
    "LocalQueueEntry",
    "Transaction",
    "new_local_id",
]

"""Enumerations for domain models."""

from enum import Enum


class TradeSide(str, Enum):
    """Side of a simulated market-fill trade."""

    BUY = "buy"
    SELL = "sell"


class SyncState(str, Enum):
    """Sync state of a locally queued transaction."""

    PENDING = "PENDING"
    SYNCING = "SYNCING"
    SYNCED = "SYNCED"  # removed from the queue once reached

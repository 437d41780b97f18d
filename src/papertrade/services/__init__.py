"""Business logic services."""

from papertrade.services.ledger_engine import (
    LedgerResult,
    apply_trade,
    max_affordable_shares,
    sell_all_shares,
    validate_buy,
    validate_sell,
)
from papertrade.services.local_queue import LocalQueue
from papertrade.services.portfolio_session import PersistOutcome, PortfolioSession
from papertrade.services.sync_coordinator import SyncCoordinator, SyncReport
from papertrade.services.valuation_service import ValuationService

__all__ = [
    "LedgerResult",
    "apply_trade",
    "max_affordable_shares",
    "sell_all_shares",
    "validate_buy",
    "validate_sell",
    "LocalQueue",
    "PersistOutcome",
    "PortfolioSession",
    "SyncCoordinator",
    "SyncReport",
    "ValuationService",
]

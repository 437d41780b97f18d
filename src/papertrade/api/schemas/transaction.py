"""Pydantic schemas for trade and transaction endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from papertrade.domain.models import TradeSide, Transaction


class TradeRequest(BaseModel):
    """
    Request schema for executing a trade.

    Only the shape is checked here; quantity, symbol and funds rules are
    enforced by the ledger.
    """

    symbol: str = Field(..., max_length=20, description="Ticker symbol")
    side: TradeSide = Field(..., description="buy or sell")
    shares: int = Field(..., description="Whole number of shares")
    price: Decimal = Field(..., description="Fill price per share")


class TransactionResponse(BaseModel):
    """Response schema for a single transaction."""

    id: str
    user_id: str
    symbol: str
    side: TradeSide
    shares: int
    price: Decimal
    total: Decimal
    timestamp: datetime
    sync_pending: bool

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionResponse":
        return cls(
            id=transaction.id,
            user_id=transaction.user_id,
            symbol=transaction.symbol,
            side=transaction.side,
            shares=transaction.shares,
            price=transaction.price,
            total=transaction.total,
            timestamp=transaction.timestamp,
            sync_pending=transaction.sync_pending,
        )


class TransactionListResponse(BaseModel):
    """Transaction history, newest first."""

    items: list[TransactionResponse]
    pending: int

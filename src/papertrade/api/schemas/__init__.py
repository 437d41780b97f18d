"""Pydantic schemas for API request/response."""

from papertrade.api.schemas.portfolio import (
    HoldingResponse,
    PortfolioResponse,
    HoldingValuationResponse,
    PortfolioSummaryResponse,
)
from papertrade.api.schemas.transaction import (
    TradeRequest,
    TransactionResponse,
    TransactionListResponse,
)
from papertrade.api.schemas.sync import SyncReportResponse

__all__ = [
    "HoldingResponse",
    "PortfolioResponse",
    "HoldingValuationResponse",
    "PortfolioSummaryResponse",
    "TradeRequest",
    "TransactionResponse",
    "TransactionListResponse",
    "SyncReportResponse",
]

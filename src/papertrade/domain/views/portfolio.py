"""View models for quotes and portfolio valuation outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Quote:
    """Market quote data for a symbol."""

    symbol: str
    price: Decimal
    change_abs: Decimal
    change_pct: Decimal
    as_of: Optional[datetime] = None


@dataclass
class HoldingValuation:
    """Valuation of a single holding against its latest quote."""

    symbol: str
    shares: int
    average_price: Decimal
    invested: Decimal
    last_price: Optional[Decimal] = None
    current_value: Decimal = field(default_factory=lambda: Decimal("0"))
    profit_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    profit_loss_pct: Optional[Decimal] = None
    quote_available: bool = True


@dataclass
class PortfolioSummary:
    """Portfolio totals: cash, invested, market value and unrealized P/L."""

    user_id: str
    cash: Decimal
    invested: Decimal
    current_value: Decimal
    net_worth: Decimal
    profit_loss: Decimal
    profit_loss_pct: Optional[Decimal] = None
    holdings: list[HoldingValuation] = field(default_factory=list)
    as_of: Optional[datetime] = None

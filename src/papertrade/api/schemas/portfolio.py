"""Pydantic schemas for portfolio endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from papertrade.domain.models import Portfolio
from papertrade.domain.views import HoldingValuation, PortfolioSummary

_CENTS = Decimal("0.01")


def money(value: Optional[Decimal]) -> Optional[Decimal]:
    """Round to two decimals for display."""
    return value.quantize(_CENTS) if value is not None else None


class HoldingResponse(BaseModel):
    """A held symbol with its cost basis."""

    symbol: str
    shares: int
    average_price: Decimal


class PortfolioResponse(BaseModel):
    """Cash balance and holdings of a user."""

    user_id: str
    balance: Decimal
    holdings: list[HoldingResponse]
    last_updated: Optional[datetime] = None

    @classmethod
    def from_domain(cls, portfolio: Portfolio) -> "PortfolioResponse":
        return cls(
            user_id=portfolio.user_id,
            balance=money(portfolio.balance),
            holdings=[
                HoldingResponse(
                    symbol=h.symbol,
                    shares=h.shares,
                    average_price=money(h.average_price),
                )
                for h in sorted(portfolio.holdings.values(), key=lambda h: h.symbol)
            ],
            last_updated=portfolio.last_updated,
        )


class HoldingValuationResponse(BaseModel):
    """A holding marked to market."""

    symbol: str
    shares: int
    average_price: Decimal
    invested: Decimal
    last_price: Optional[Decimal] = None
    current_value: Decimal
    profit_loss: Decimal
    profit_loss_pct: Optional[Decimal] = None
    quote_available: bool

    @classmethod
    def from_view(cls, view: HoldingValuation) -> "HoldingValuationResponse":
        return cls(
            symbol=view.symbol,
            shares=view.shares,
            average_price=money(view.average_price),
            invested=money(view.invested),
            last_price=money(view.last_price),
            current_value=money(view.current_value),
            profit_loss=money(view.profit_loss),
            profit_loss_pct=money(view.profit_loss_pct),
            quote_available=view.quote_available,
        )


class PortfolioSummaryResponse(BaseModel):
    """Portfolio totals and per-holding valuation."""

    user_id: str
    cash: Decimal
    invested: Decimal
    current_value: Decimal
    net_worth: Decimal
    profit_loss: Decimal
    profit_loss_pct: Optional[Decimal] = None
    holdings: list[HoldingValuationResponse]
    as_of: Optional[datetime] = None

    @classmethod
    def from_view(cls, view: PortfolioSummary) -> "PortfolioSummaryResponse":
        return cls(
            user_id=view.user_id,
            cash=money(view.cash),
            invested=money(view.invested),
            current_value=money(view.current_value),
            net_worth=money(view.net_worth),
            profit_loss=money(view.profit_loss),
            profit_loss_pct=money(view.profit_loss_pct),
            holdings=[HoldingValuationResponse.from_view(h) for h in view.holdings],
            as_of=view.as_of,
        )

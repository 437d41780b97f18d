"""Valuation service: mark a portfolio to market."""

import logging
from decimal import Decimal
from typing import Optional

from papertrade.core.exceptions import AppError
from papertrade.core.timezone import now_utc
from papertrade.domain.models import Holding, Portfolio
from papertrade.domain.views import HoldingValuation, PortfolioSummary
from papertrade.providers.market_data_provider import MarketDataProvider

logger = logging.getLogger(__name__)


def _pct(numerator: Decimal, denominator: Decimal) -> Optional[Decimal]:
    if denominator == Decimal("0"):
        return None
    return numerator / denominator * 100


class ValuationService:
    """
    Values holdings against live quotes.

    Values are exact Decimals; rounding is left to presentation. A holding
    whose quote cannot be fetched is valued at cost (zero P/L) and flagged.
    """

    def __init__(self, market_data_provider: MarketDataProvider):
        self._market = market_data_provider

    def value_holding(self, holding: Holding) -> HoldingValuation:
        """Value one holding; falls back to cost when no quote is available."""
        symbol, shares, average_price = holding.symbol, holding.shares, holding.average_price
        invested = holding.cost_basis
        try:
            quote = self._market.get_quote(symbol)
        except AppError as exc:
            logger.warning("Valuing %s at cost: %s", symbol, exc.message)
            return HoldingValuation(
                symbol=symbol,
                shares=shares,
                average_price=average_price,
                invested=invested,
                current_value=invested,
                profit_loss=Decimal("0"),
                profit_loss_pct=Decimal("0") if invested else None,
                quote_available=False,
            )

        current_value = shares * quote.price
        profit_loss = current_value - invested
        return HoldingValuation(
            symbol=symbol,
            shares=shares,
            average_price=average_price,
            invested=invested,
            last_price=quote.price,
            current_value=current_value,
            profit_loss=profit_loss,
            profit_loss_pct=_pct(profit_loss, invested),
        )

    def summarize(self, portfolio: Portfolio) -> PortfolioSummary:
        """Totals over all holdings plus cash; holdings sorted by symbol."""
        holdings = [
            self.value_holding(holding)
            for holding in sorted(portfolio.holdings.values(), key=lambda h: h.symbol)
        ]

        invested = sum((h.invested for h in holdings), Decimal("0"))
        current_value = sum((h.current_value for h in holdings), Decimal("0"))
        profit_loss = current_value - invested

        return PortfolioSummary(
            user_id=portfolio.user_id,
            cash=portfolio.balance,
            invested=invested,
            current_value=current_value,
            net_worth=portfolio.balance + current_value,
            profit_loss=profit_loss,
            profit_loss_pct=_pct(profit_loss, invested),
            holdings=holdings,
            as_of=now_utc(),
        )

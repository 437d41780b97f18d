"""
Unit tests for ValuationService.

Tests cover:
- Mark-to-market totals and per-holding P/L
- Holdings without a quote valued at cost
- Stub provider quotes
"""

from decimal import Decimal

import pytest

from papertrade.core.exceptions import QuoteUnavailableError
from papertrade.domain.models import Holding, Portfolio
from papertrade.providers import StubMarketDataProvider
from papertrade.services import ValuationService
from tests.conftest import assert_decimal_equal


class TestSummarize:
    """Tests for summarize."""

    def test_summary_totals(self, valuation_service: ValuationService):
        """
        GIVEN 500 cash, 10 AAPL at 100 (quoted 120) and 2 TCS at 3000 (quoted 3500.50)
        WHEN the portfolio is summarized
        THEN invested, current value, net worth and P/L add up exactly
        """
        portfolio = Portfolio(
            user_id="user-1",
            balance=Decimal("500"),
            holdings={
                "AAPL": Holding("AAPL", 10, Decimal("100")),
                "TCS": Holding("TCS", 2, Decimal("3000")),
            },
        )

        summary = valuation_service.summarize(portfolio)

        assert summary.invested == Decimal("7000")
        assert summary.current_value == Decimal("8201.00")
        assert summary.net_worth == Decimal("8701.00")
        assert summary.profit_loss == Decimal("1201.00")
        assert_decimal_equal(summary.profit_loss_pct, Decimal("17.16"))
        assert [h.symbol for h in summary.holdings] == ["AAPL", "TCS"]
        aapl = summary.holdings[0]
        assert aapl.last_price == Decimal("120")
        assert aapl.profit_loss == Decimal("200")
        assert aapl.profit_loss_pct == Decimal("20")

    def test_missing_quote_valued_at_cost(self, valuation_service: ValuationService):
        """
        GIVEN a holding with no available quote
        WHEN the portfolio is summarized
        THEN it counts at cost with zero P/L and is flagged
        """
        portfolio = Portfolio(
            user_id="user-1",
            balance=Decimal("0"),
            holdings={"ZZZ": Holding("ZZZ", 4, Decimal("25"))},
        )

        summary = valuation_service.summarize(portfolio)
        holding = summary.holdings[0]

        assert holding.quote_available is False
        assert holding.last_price is None
        assert holding.current_value == Decimal("100")
        assert summary.profit_loss == Decimal("0")
        assert summary.net_worth == Decimal("100")

    def test_empty_portfolio(self, valuation_service: ValuationService):
        summary = valuation_service.summarize(Portfolio.default("user-1", Decimal("1000")))

        assert summary.net_worth == Decimal("1000")
        assert summary.invested == Decimal("0")
        assert summary.profit_loss_pct is None
        assert summary.holdings == []

    def test_value_holding_uses_cost_basis(self, valuation_service: ValuationService):
        holding = Holding("AAPL", 3, Decimal("110.50"))

        valued = valuation_service.value_holding(holding)

        assert valued.invested == holding.cost_basis == Decimal("331.50")
        assert valued.current_value == Decimal("360")
        assert valued.profit_loss == Decimal("28.50")


class TestStubProvider:
    """Tests for StubMarketDataProvider."""

    def test_known_symbol(self):
        quote = StubMarketDataProvider().get_quote("reliance")

        assert quote.symbol == "RELIANCE"
        assert quote.price == Decimal("2945.60")
        assert quote.change_abs == Decimal("24.45")

    def test_unknown_symbol_is_deterministic(self):
        first = StubMarketDataProvider().get_quote("XYZ")
        second = StubMarketDataProvider().get_quote("XYZ")

        assert first.price == second.price
        assert Decimal("50") <= first.price <= Decimal("250")

    def test_unknown_symbol_can_be_unavailable(self):
        with pytest.raises(QuoteUnavailableError):
            StubMarketDataProvider(unknown_symbols=False).get_quote("XYZ")

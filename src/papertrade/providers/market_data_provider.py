"""Market data provider protocol."""

from typing import Protocol

from papertrade.domain.views import Quote


class MarketDataProvider(Protocol):
    """
    Protocol for market data providers.

    Implementations raise QuoteUnavailableError when a symbol cannot be
    quoted; callers decide how to degrade.
    """

    def get_quote(self, symbol: str) -> Quote:
        """Fetch the latest quote (price, absolute and percent change) for a symbol."""
        ...

"""Stub market data provider for offline/testing use."""

import random
from decimal import Decimal
from typing import Optional

from papertrade.core.exceptions import QuoteUnavailableError
from papertrade.core.timezone import now_utc
from papertrade.domain.views import Quote


# Deterministic fake prices (last price, previous close) for common symbols
_STUB_PRICES: dict[str, tuple[Decimal, Decimal]] = {
    "RELIANCE": (Decimal("2945.60"), Decimal("2921.15")),
    "TCS": (Decimal("3890.25"), Decimal("3912.40")),
    "HDFCBANK": (Decimal("1532.80"), Decimal("1528.05")),
    "INFY": (Decimal("1467.35"), Decimal("1455.90")),
    "ICICIBANK": (Decimal("1089.70"), Decimal("1094.20")),
    "AAPL": (Decimal("185.50"), Decimal("184.25")),
    "GOOGL": (Decimal("142.75"), Decimal("141.50")),
    "MSFT": (Decimal("378.25"), Decimal("376.80")),
    "TSLA": (Decimal("248.75"), Decimal("250.10")),
}


class StubMarketDataProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Known symbols use predefined prices. Unknown symbols get a price derived
    from a generator seeded by the symbol, so repeated calls agree, unless
    ``unknown_symbols`` is False, in which case they are unavailable.
    """

    def __init__(self, seed: int = 42, unknown_symbols: bool = True):
        self._seed = seed
        self._unknown_symbols = unknown_symbols

    def get_quote(self, symbol: str) -> Quote:
        """Return a stub quote for the symbol."""
        upper_symbol = (symbol or "").strip().upper()
        prices = self._lookup(upper_symbol)
        if prices is None:
            raise QuoteUnavailableError(upper_symbol)

        last_price, prev_close = prices
        change_abs = last_price - prev_close
        change_pct = (change_abs / prev_close * 100).quantize(Decimal("0.01"))
        return Quote(
            symbol=upper_symbol,
            price=last_price,
            change_abs=change_abs,
            change_pct=change_pct,
            as_of=now_utc(),
        )

    def _lookup(self, symbol: str) -> Optional[tuple[Decimal, Decimal]]:
        if symbol in _STUB_PRICES:
            return _STUB_PRICES[symbol]
        if not symbol or not self._unknown_symbols:
            return None
        rng = random.Random(f"{self._seed}:{symbol}")
        last_price = Decimal(str(50 + rng.random() * 200)).quantize(Decimal("0.01"))
        change_pct = Decimal(str((rng.random() - 0.5) * 0.04))
        prev_close = (last_price / (1 + change_pct)).quantize(Decimal("0.01"))
        return last_price, prev_close

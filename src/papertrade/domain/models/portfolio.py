"""Portfolio and Holding domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Holding:
    """
    A user's position in one symbol.

    ``average_price`` is the cost basis per currently-held share. Holdings with
    zero shares are never stored; the ledger removes them.
    """

    symbol: str
    shares: int
    average_price: Decimal

    @property
    def cost_basis(self) -> Decimal:
        """Total cost of the currently held shares."""
        return self.shares * self.average_price


@dataclass(frozen=True)
class Portfolio:
    """
    Virtual cash balance plus holdings for one user.

    Snapshots are immutable: the ledger engine produces a new Portfolio for
    every committed trade.
    """

    user_id: str
    balance: Decimal
    holdings: dict[str, Holding] = field(default_factory=dict)
    last_updated: Optional[datetime] = None

    @classmethod
    def default(
        cls,
        user_id: str,
        starting_balance: Decimal,
        last_updated: Optional[datetime] = None,
    ) -> "Portfolio":
        """Fresh portfolio for a user seen for the first time."""
        return cls(
            user_id=user_id,
            balance=starting_balance,
            holdings={},
            last_updated=last_updated,
        )

    def get_holding(self, symbol: str) -> Optional[Holding]:
        """Return the holding for a symbol, if any."""
        return self.holdings.get(symbol)

    def shares_of(self, symbol: str) -> int:
        """Shares held in a symbol (0 when not held)."""
        holding = self.holdings.get(symbol)
        return holding.shares if holding else 0

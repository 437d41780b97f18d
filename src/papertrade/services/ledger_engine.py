"""Ledger engine: validate trades and compute new portfolio snapshots.

Pure functions over an immutable Portfolio; no I/O and no clock. A failed
validation raises a LedgerError before anything is built, so callers either
get a complete new snapshot or nothing.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from papertrade.core.exceptions import (
    InvalidQuantityError,
    InvalidSymbolError,
    InvalidTradeSideError,
    InsufficientFundsError,
    NoPositionError,
    InsufficientSharesError,
)
from papertrade.domain.models import Holding, Portfolio, TradeSide


@dataclass(frozen=True)
class LedgerResult:
    """Outcome of a validated trade."""

    portfolio: Portfolio
    symbol: str
    side: TradeSide
    shares: int
    price: Decimal
    total: Decimal
    holding: Optional[Holding]  # None when a sell closed the position

    @property
    def balance(self) -> Decimal:
        return self.portfolio.balance

    @property
    def position_closed(self) -> bool:
        return self.holding is None


def normalize_symbol(symbol: Optional[str]) -> str:
    """Strip and uppercase a symbol; empty or missing symbols are rejected."""
    normalized = (symbol or "").strip().upper()
    if not normalized:
        raise InvalidSymbolError(symbol)
    return normalized


def validate_shares(shares: Any) -> int:
    """Shares must be a positive integer (bools are not quantities)."""
    if isinstance(shares, bool) or not isinstance(shares, int):
        raise InvalidQuantityError(f"Shares must be a whole number, got {shares!r}")
    if shares <= 0:
        raise InvalidQuantityError(f"Shares must be greater than 0, got {shares}")
    return shares


def validate_price(price: Any) -> Decimal:
    """Price must be a finite number greater than zero."""
    if isinstance(price, bool):
        raise InvalidQuantityError(f"Price must be a number, got {price!r}")
    try:
        value = price if isinstance(price, Decimal) else Decimal(str(price))
    except (InvalidOperation, ValueError):
        raise InvalidQuantityError(f"Price must be a number, got {price!r}")
    if not value.is_finite() or value <= 0:
        raise InvalidQuantityError(f"Price must be greater than 0, got {price}")
    return value


def max_affordable_shares(balance: Decimal, price: Decimal) -> int:
    """Largest whole number of shares the balance can pay for at price."""
    price = validate_price(price)
    if balance <= 0:
        return 0
    return int(balance // price)


def sell_all_shares(portfolio: Portfolio, symbol: str) -> int:
    """Shares a "sell all" order would sell (0 when the symbol is not held)."""
    return portfolio.shares_of(normalize_symbol(symbol))


def blend_average_price(
    held_shares: int,
    held_average: Decimal,
    bought_shares: int,
    bought_price: Decimal,
) -> Decimal:
    """
    Weighted-average cost basis after a buy.

    Recomputed from total cost over total shares; no intermediate rounding.
    """
    if held_shares == 0:
        return bought_price
    total_shares = held_shares + bought_shares
    total_cost = held_shares * held_average + bought_shares * bought_price
    return total_cost / total_shares


def validate_buy(
    portfolio: Portfolio,
    symbol: str,
    shares: int,
    price: Decimal,
    as_of: Optional[datetime] = None,
) -> LedgerResult:
    """
    Validate a buy and compute the resulting snapshot.

    Raises:
        InvalidSymbolError / InvalidQuantityError: malformed request
        InsufficientFundsError: shares * price exceeds the balance
    """
    symbol = normalize_symbol(symbol)
    shares = validate_shares(shares)
    price = validate_price(price)

    total_cost = shares * price
    if total_cost > portfolio.balance:
        raise InsufficientFundsError(
            required=total_cost,
            available=portfolio.balance,
            max_affordable=max_affordable_shares(portfolio.balance, price),
        )

    current = portfolio.get_holding(symbol)
    held_shares = current.shares if current else 0
    held_average = current.average_price if current else Decimal("0")

    holding = Holding(
        symbol=symbol,
        shares=held_shares + shares,
        average_price=blend_average_price(held_shares, held_average, shares, price),
    )
    holdings = dict(portfolio.holdings)
    holdings[symbol] = holding

    new_portfolio = Portfolio(
        user_id=portfolio.user_id,
        balance=portfolio.balance - total_cost,
        holdings=holdings,
        last_updated=as_of or portfolio.last_updated,
    )
    return LedgerResult(
        portfolio=new_portfolio,
        symbol=symbol,
        side=TradeSide.BUY,
        shares=shares,
        price=price,
        total=total_cost,
        holding=holding,
    )


def validate_sell(
    portfolio: Portfolio,
    symbol: str,
    shares: int,
    price: Decimal,
    as_of: Optional[datetime] = None,
) -> LedgerResult:
    """
    Validate a sell and compute the resulting snapshot.

    Selling every held share removes the holding; a partial sell keeps the
    average price unchanged.

    Raises:
        InvalidSymbolError / InvalidQuantityError: malformed request
        NoPositionError: symbol not held
        InsufficientSharesError: more shares requested than held
    """
    symbol = normalize_symbol(symbol)
    shares = validate_shares(shares)
    price = validate_price(price)

    current = portfolio.get_holding(symbol)
    if current is None or current.shares == 0:
        raise NoPositionError(symbol)
    if shares > current.shares:
        raise InsufficientSharesError(symbol, requested=shares, available=current.shares)

    proceeds = shares * price
    remaining = current.shares - shares
    holdings = dict(portfolio.holdings)
    holding: Optional[Holding]
    if remaining == 0:
        del holdings[symbol]
        holding = None
    else:
        holding = Holding(symbol=symbol, shares=remaining, average_price=current.average_price)
        holdings[symbol] = holding

    new_portfolio = Portfolio(
        user_id=portfolio.user_id,
        balance=portfolio.balance + proceeds,
        holdings=holdings,
        last_updated=as_of or portfolio.last_updated,
    )
    return LedgerResult(
        portfolio=new_portfolio,
        symbol=symbol,
        side=TradeSide.SELL,
        shares=shares,
        price=price,
        total=proceeds,
        holding=holding,
    )


def apply_trade(
    portfolio: Portfolio,
    side: TradeSide,
    symbol: str,
    shares: int,
    price: Decimal,
    as_of: Optional[datetime] = None,
) -> LedgerResult:
    """Dispatch a trade to validate_buy or validate_sell."""
    try:
        side = TradeSide(side.strip().lower() if isinstance(side, str) else side)
    except ValueError:
        raise InvalidTradeSideError(side)
    if side == TradeSide.BUY:
        return validate_buy(portfolio, symbol, shares, price, as_of=as_of)
    return validate_sell(portfolio, symbol, shares, price, as_of=as_of)

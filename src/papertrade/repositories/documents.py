"""Conversion between domain models and stored documents.

Documents are the plain dicts written to the remote store and, as JSON, to
the local durable cache. Money is written as decimal strings; legacy float
values are accepted on read. Field names use the camelCase
document shape.
"""

from decimal import Decimal
from typing import Any, Optional

from papertrade.core.timezone import parse_timestamp
from papertrade.domain.models import Holding, LocalQueueEntry, Portfolio, Transaction, TradeSide

# Float artifacts in legacy documents (e.g. 0.30000000000000004) stay below this
_LEGACY_TOTAL_TOLERANCE = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Parse a stored numeric value without going through binary float."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _to_shares(value: Any) -> int:
    shares = to_decimal(value)
    if shares != shares.to_integral_value():
        raise ValueError(f"Fractional share count in document: {value!r}")
    return int(shares)


# =============================================================================
# PORTFOLIO
# =============================================================================


def portfolio_to_document(portfolio: Portfolio) -> dict[str, Any]:
    """Serialize a portfolio (balance + holdings + lastUpdated)."""
    return {
        "balance": str(portfolio.balance),
        "holdings": {
            symbol: {"shares": holding.shares, "averagePrice": str(holding.average_price)}
            for symbol, holding in portfolio.holdings.items()
        },
        "lastUpdated": portfolio.last_updated.isoformat() if portfolio.last_updated else None,
    }


def portfolio_from_document(user_id: str, data: dict[str, Any]) -> Portfolio:
    """Deserialize a portfolio document; zero-share holdings are dropped."""
    holdings: dict[str, Holding] = {}
    for symbol, raw in (data.get("holdings") or {}).items():
        shares = _to_shares(raw.get("shares", 0))
        if shares <= 0:
            continue
        holdings[symbol] = Holding(
            symbol=symbol,
            shares=shares,
            average_price=to_decimal(raw.get("averagePrice", 0)),
        )

    last_updated = data.get("lastUpdated")
    return Portfolio(
        user_id=user_id,
        balance=to_decimal(data.get("balance", 0)),
        holdings=holdings,
        last_updated=parse_timestamp(last_updated) if last_updated else None,
    )


# =============================================================================
# TRANSACTION
# =============================================================================


def transaction_to_document(transaction: Transaction) -> dict[str, Any]:
    """Serialize a transaction without its id (the store owns ids)."""
    return {
        "userId": transaction.user_id,
        "symbol": transaction.symbol,
        "type": transaction.side.value,
        "shares": transaction.shares,
        "price": str(transaction.price),
        "total": str(transaction.total),
        "timestamp": transaction.timestamp.isoformat(),
        "clientId": transaction.client_id,
    }


def transaction_from_document(
    doc_id: str,
    data: dict[str, Any],
    sync_pending: bool = False,
) -> Transaction:
    """Deserialize a transaction document stored under ``doc_id``."""
    shares = _to_shares(data["shares"])
    price = to_decimal(data["price"])
    total = to_decimal(data["total"])
    expected = shares * price
    if total != expected and abs(total - expected) < _LEGACY_TOTAL_TOLERANCE:
        total = expected

    return Transaction(
        id=doc_id,
        user_id=data["userId"],
        symbol=data["symbol"],
        side=TradeSide(data["type"]),
        shares=shares,
        price=price,
        total=total,
        timestamp=parse_timestamp(data["timestamp"]),
        sync_pending=sync_pending,
        client_id=data.get("clientId") or doc_id,
    )


# =============================================================================
# LOCAL QUEUE ENTRY
# =============================================================================


def queue_entry_to_document(entry: LocalQueueEntry) -> dict[str, Any]:
    """Serialize a queue entry: the transaction plus its local flags."""
    data = transaction_to_document(entry.transaction)
    data.update(
        {
            "id": entry.transaction.id,
            "createdAt": entry.enqueued_at.isoformat(),
            "savedLocally": entry.saved_locally,
            "syncPending": entry.sync_pending,
        }
    )
    return data


def queue_entry_from_document(data: dict[str, Any]) -> LocalQueueEntry:
    """Deserialize a queue entry; the in-memory sync state restarts as PENDING."""
    transaction = transaction_from_document(data["id"], data, sync_pending=True)
    created_at: Optional[str] = data.get("createdAt")
    return LocalQueueEntry(
        transaction=transaction,
        enqueued_at=parse_timestamp(created_at) if created_at else transaction.timestamp,
        saved_locally=bool(data.get("savedLocally", True)),
        sync_pending=bool(data.get("syncPending", True)),
    )

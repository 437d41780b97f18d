"""Core utilities and shared functionality."""

from papertrade.core.timezone import (
    now_utc,
    to_utc,
    parse_timestamp,
    UTC,
)
from papertrade.core.exceptions import (
    AppError,
    LedgerError,
    InvalidQuantityError,
    InvalidSymbolError,
    InvalidTradeSideError,
    InsufficientFundsError,
    NoPositionError,
    InsufficientSharesError,
    RemoteStoreError,
    UnreachableError,
    PermissionDeniedError,
    UnknownRemoteError,
    RemoteConflictError,
    SessionNotInitializedError,
    QuoteUnavailableError,
)

__all__ = [
    "now_utc",
    "to_utc",
    "parse_timestamp",
    "UTC",
    "AppError",
    "LedgerError",
    "InvalidQuantityError",
    "InvalidSymbolError",
    "InvalidTradeSideError",
    "InsufficientFundsError",
    "NoPositionError",
    "InsufficientSharesError",
    "RemoteStoreError",
    "UnreachableError",
    "PermissionDeniedError",
    "UnknownRemoteError",
    "RemoteConflictError",
    "SessionNotInitializedError",
    "QuoteUnavailableError",
]

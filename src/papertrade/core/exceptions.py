"""Application-level exceptions.

``LedgerError`` subclasses are caller input problems: the trade is rejected.
``RemoteStoreError`` subclasses are infrastructure failures: the write is
queued locally and retried.
"""

from decimal import Decimal
from typing import Any, Optional


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# LEDGER (VALIDATION) ERRORS
# =============================================================================


class LedgerError(AppError):
    """Raised when a trade request fails ledger validation."""


class InvalidQuantityError(LedgerError):
    """Raised when shares is not a positive integer or price is not positive."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_QUANTITY")


class InvalidSymbolError(LedgerError):
    """Raised when a trade names no symbol."""

    def __init__(self, symbol: Optional[str]):
        super().__init__(f"Invalid symbol: {symbol!r}", code="INVALID_SYMBOL")


class InvalidTradeSideError(LedgerError):
    """Raised when a trade side is neither buy nor sell."""

    def __init__(self, side: object):
        super().__init__(f"Invalid trade side: {side!r}", code="INVALID_SIDE")


class InsufficientFundsError(LedgerError):
    """Raised when a buy costs more than the available balance."""

    def __init__(self, required: Decimal, available: Decimal, max_affordable: int):
        super().__init__(
            f"Insufficient funds: need {required}, available {available}",
            code="INSUFFICIENT_FUNDS",
            details={
                "required": str(required),
                "available": str(available),
                "max_affordable": max_affordable,
            },
        )
        self.required = required
        self.available = available
        self.max_affordable = max_affordable


class NoPositionError(LedgerError):
    """Raised when selling a symbol that is not held."""

    def __init__(self, symbol: str):
        super().__init__(f"No position in {symbol}", code="NO_POSITION", details={"symbol": symbol})
        self.symbol = symbol


class InsufficientSharesError(LedgerError):
    """Raised when attempting to sell more shares than owned."""

    def __init__(self, symbol: str, requested: int, available: int):
        super().__init__(
            f"Insufficient shares of {symbol}: requested {requested}, available {available}",
            code="INSUFFICIENT_SHARES",
            details={"symbol": symbol, "requested": requested, "available": available},
        )
        self.symbol = symbol
        self.requested = requested
        self.available = available


# =============================================================================
# REMOTE STORE (INFRASTRUCTURE) ERRORS
# =============================================================================


class RemoteStoreError(AppError):
    """Raised when the remote store could not complete a request."""


class UnreachableError(RemoteStoreError):
    """Network failure or timeout talking to the remote store."""

    def __init__(self, message: str = "Remote store unreachable"):
        super().__init__(message, code="REMOTE_UNREACHABLE")


class PermissionDeniedError(RemoteStoreError):
    """The remote store rejected the request (auth or security rules)."""

    def __init__(self, message: str = "Remote store permission denied"):
        super().__init__(message, code="REMOTE_PERMISSION_DENIED")


class UnknownRemoteError(RemoteStoreError):
    """Any other remote store failure."""

    def __init__(self, message: str = "Remote store error", code: str = "REMOTE_UNKNOWN"):
        super().__init__(message, code=code)


class RemoteConflictError(UnknownRemoteError):
    """Raised when creating a document that already exists."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} already exists: {identifier}", code="REMOTE_CONFLICT")


# =============================================================================
# SESSION ERRORS
# =============================================================================


class SessionNotInitializedError(AppError):
    """Raised when a user has no in-memory portfolio in this session."""

    def __init__(self, user_id: str):
        super().__init__(f"No active portfolio session for user: {user_id}", code="NO_SESSION")


# =============================================================================
# MARKET DATA ERRORS
# =============================================================================


class QuoteUnavailableError(AppError):
    """Raised when no quote can be obtained for a symbol."""

    def __init__(self, symbol: str):
        super().__init__(f"No quote available for {symbol}", code="QUOTE_UNAVAILABLE", details={"symbol": symbol})
        self.symbol = symbol

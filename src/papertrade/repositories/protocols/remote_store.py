"""Remote portfolio store protocol."""

from typing import Protocol, Optional

from papertrade.domain.models import Portfolio, Transaction


class RemoteStore(Protocol):
    """
    Interface for the remote document store holding portfolios and transactions.

    Implementations raise RemoteStoreError subclasses only:
    UnreachableError, PermissionDeniedError or UnknownRemoteError.
    """

    async def get_portfolio(self, user_id: str) -> Optional[Portfolio]:
        """Retrieve a user's portfolio; None when no document exists."""
        ...

    async def create_portfolio(self, user_id: str, initial: Portfolio) -> None:
        """Create a portfolio document; never overwrites an existing one."""
        ...

    async def update_portfolio(self, user_id: str, portfolio: Portfolio) -> None:
        """Replace balance, holdings and lastUpdated of a portfolio document."""
        ...

    async def append_transaction(self, transaction: Transaction) -> str:
        """Create a transaction record and return its remote-assigned id."""
        ...

    async def query_transactions(self, user_id: str) -> list[Transaction]:
        """List all remote transaction records for a user (unordered)."""
        ...

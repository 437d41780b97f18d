"""In-memory implementation of RemoteStore.

Keeps documents (not domain objects) so that reads and writes go through the
same document codec as the Firestore store. Used for offline development and
as the test double for the remote side.
"""

import uuid
from typing import Any, Optional

from papertrade.core.exceptions import RemoteConflictError
from papertrade.domain.models import Portfolio, Transaction
from papertrade.repositories.documents import (
    portfolio_from_document,
    portfolio_to_document,
    transaction_from_document,
    transaction_to_document,
)


class InMemoryRemoteStore:
    """Dict-backed portfolio and transaction collections."""

    def __init__(self) -> None:
        self.portfolios: dict[str, dict[str, Any]] = {}
        self.transactions: dict[str, dict[str, Any]] = {}

    async def get_portfolio(self, user_id: str) -> Optional[Portfolio]:
        data = self.portfolios.get(user_id)
        return portfolio_from_document(user_id, data) if data is not None else None

    async def create_portfolio(self, user_id: str, initial: Portfolio) -> None:
        if user_id in self.portfolios:
            raise RemoteConflictError("Portfolio", user_id)
        self.portfolios[user_id] = portfolio_to_document(initial)

    async def update_portfolio(self, user_id: str, portfolio: Portfolio) -> None:
        document = self.portfolios.setdefault(user_id, {})
        document.update(portfolio_to_document(portfolio))

    async def append_transaction(self, transaction: Transaction) -> str:
        remote_id = uuid.uuid4().hex[:20]
        self.transactions[remote_id] = transaction_to_document(transaction)
        return remote_id

    async def query_transactions(self, user_id: str) -> list[Transaction]:
        return [
            transaction_from_document(doc_id, data)
            for doc_id, data in self.transactions.items()
            if data.get("userId") == user_id
        ]

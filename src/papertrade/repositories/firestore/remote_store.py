"""Firestore implementation of RemoteStore.

Collections:
- ``portfolios/{userId}``: balance, holdings, lastUpdated
- ``transactions/{autoId}``: one record per executed trade
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from google.api_core import exceptions as gexc
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from papertrade.core.exceptions import (
    PermissionDeniedError,
    RemoteConflictError,
    RemoteStoreError,
    UnknownRemoteError,
    UnreachableError,
)
from papertrade.domain.models import Portfolio, Transaction
from papertrade.repositories.documents import (
    portfolio_from_document,
    portfolio_to_document,
    transaction_from_document,
    transaction_to_document,
)

logger = logging.getLogger(__name__)

_UNREACHABLE_EXCEPTIONS: tuple[type[BaseException], ...] = (
    gexc.ServiceUnavailable,
    gexc.DeadlineExceeded,
    gexc.GatewayTimeout,
    gexc.RetryError,
    asyncio.TimeoutError,
    ConnectionError,
    OSError,
)

_PERMISSION_EXCEPTIONS: tuple[type[BaseException], ...] = (
    gexc.PermissionDenied,
    gexc.Unauthenticated,
)

# Fields replaced wholesale by update_portfolio (nested holdings are not merged)
_PORTFOLIO_FIELDS = ["balance", "holdings", "lastUpdated"]


@contextmanager
def translate_errors(operation: str, identifier: str) -> Iterator[None]:
    """Map google-api-core and transport exceptions onto the RemoteStoreError taxonomy."""
    try:
        yield
    except RemoteStoreError:
        raise
    except gexc.AlreadyExists as exc:
        raise RemoteConflictError("Document", identifier) from exc
    except _PERMISSION_EXCEPTIONS as exc:
        logger.warning("firestore %s denied for %s: %s", operation, identifier, exc)
        raise PermissionDeniedError(f"{operation} denied: {exc}") from exc
    except _UNREACHABLE_EXCEPTIONS as exc:
        raise UnreachableError(f"{operation} failed: {exc}") from exc
    except Exception as exc:
        raise UnknownRemoteError(f"{operation} failed: {exc}") from exc


class FirestoreRemoteStore:
    """Firestore-backed portfolios and transactions using the async client."""

    def __init__(
        self,
        client: firestore.AsyncClient,
        portfolios_collection: str = "portfolios",
        transactions_collection: str = "transactions",
    ):
        self._client = client
        self._portfolios = portfolios_collection
        self._transactions = transactions_collection

    @classmethod
    def from_settings(
        cls,
        project: Optional[str],
        database: Optional[str] = None,
        portfolios_collection: str = "portfolios",
        transactions_collection: str = "transactions",
    ) -> "FirestoreRemoteStore":
        """Build a store with a fresh AsyncClient (honours FIRESTORE_EMULATOR_HOST)."""
        kwargs = {"project": project}
        if database:
            kwargs["database"] = database
        return cls(
            client=firestore.AsyncClient(**kwargs),
            portfolios_collection=portfolios_collection,
            transactions_collection=transactions_collection,
        )

    def _portfolio_ref(self, user_id: str):
        return self._client.collection(self._portfolios).document(user_id)

    async def get_portfolio(self, user_id: str) -> Optional[Portfolio]:
        with translate_errors("get_portfolio", user_id):
            snapshot = await self._portfolio_ref(user_id).get()
            if not snapshot.exists:
                return None
            return portfolio_from_document(user_id, snapshot.to_dict() or {})

    async def create_portfolio(self, user_id: str, initial: Portfolio) -> None:
        with translate_errors("create_portfolio", user_id):
            await self._portfolio_ref(user_id).create(portfolio_to_document(initial))

    async def update_portfolio(self, user_id: str, portfolio: Portfolio) -> None:
        with translate_errors("update_portfolio", user_id):
            await self._portfolio_ref(user_id).set(
                portfolio_to_document(portfolio),
                merge=_PORTFOLIO_FIELDS,
            )

    async def append_transaction(self, transaction: Transaction) -> str:
        with translate_errors("append_transaction", transaction.client_id or transaction.id):
            data = transaction_to_document(transaction)
            data["createdAt"] = firestore.SERVER_TIMESTAMP
            _, doc_ref = await self._client.collection(self._transactions).add(data)
            logger.info("firestore transaction saved: %s", doc_ref.id)
            return doc_ref.id

    async def query_transactions(self, user_id: str) -> list[Transaction]:
        with translate_errors("query_transactions", user_id):
            query = self._client.collection(self._transactions).where(
                filter=FieldFilter("userId", "==", user_id)
            )
            transactions: list[Transaction] = []
            async for snapshot in query.stream():
                try:
                    transactions.append(transaction_from_document(snapshot.id, snapshot.to_dict() or {}))
                except (KeyError, ValueError, ArithmeticError) as exc:
                    logger.warning("skipping malformed transaction %s: %s", snapshot.id, exc)
            return transactions

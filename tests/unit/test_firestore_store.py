"""
Unit tests for FirestoreRemoteStore with a mocked AsyncClient.

Tests cover:
- Document reads, creates, merges, appends and queries
- Mapping of google-api-core exceptions onto RemoteStoreError
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.api_core import exceptions as gexc
from google.cloud import firestore

from papertrade.core.exceptions import (
    PermissionDeniedError,
    RemoteConflictError,
    UnknownRemoteError,
    UnreachableError,
)
from papertrade.domain.models import Portfolio
from papertrade.repositories.documents import transaction_to_document
from papertrade.repositories.firestore import FirestoreRemoteStore
from papertrade.repositories.firestore.remote_store import translate_errors
from tests.conftest import make_transaction


def snapshot(doc_id: str, data, exists: bool = True) -> MagicMock:
    snap = MagicMock()
    snap.id = doc_id
    snap.exists = exists
    snap.to_dict.return_value = data
    return snap


@pytest.fixture
def firestore_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def doc_ref(firestore_client) -> MagicMock:
    ref = MagicMock()
    ref.get = AsyncMock()
    ref.create = AsyncMock()
    ref.set = AsyncMock()
    firestore_client.collection.return_value.document.return_value = ref
    return ref


@pytest.fixture
def store(firestore_client) -> FirestoreRemoteStore:
    return FirestoreRemoteStore(firestore_client)


class TestPortfolioDocuments:
    """Tests for portfolio reads and writes."""

    async def test_missing_document_returns_none(self, store, doc_ref):
        doc_ref.get.return_value = snapshot("user-1", None, exists=False)
        assert await store.get_portfolio("user-1") is None

    async def test_existing_document_is_parsed(self, store, firestore_client, doc_ref):
        doc_ref.get.return_value = snapshot(
            "user-1",
            {"balance": 990.5, "holdings": {"ACME": {"shares": 1, "averagePrice": 9.5}}},
        )

        portfolio = await store.get_portfolio("user-1")

        firestore_client.collection.assert_called_with("portfolios")
        assert portfolio.balance == Decimal("990.5")
        assert portfolio.shares_of("ACME") == 1

    async def test_create_uses_create_not_set(self, store, doc_ref):
        await store.create_portfolio("user-1", Portfolio.default("user-1", Decimal("1000")))

        doc_ref.create.assert_awaited_once()
        doc_ref.set.assert_not_called()

    async def test_create_existing_document_is_conflict(self, store, doc_ref):
        doc_ref.create.side_effect = gexc.AlreadyExists("exists")

        with pytest.raises(RemoteConflictError):
            await store.create_portfolio("user-1", Portfolio.default("user-1", Decimal("1000")))

    async def test_update_merges_portfolio_fields(self, store, doc_ref):
        await store.update_portfolio("user-1", Portfolio.default("user-1", Decimal("10")))

        _, kwargs = doc_ref.set.call_args
        assert kwargs["merge"] == ["balance", "holdings", "lastUpdated"]


class TestTransactionDocuments:
    """Tests for transaction appends and queries."""

    async def test_append_returns_document_id(self, store, firestore_client):
        added = MagicMock()
        added.id = "remote-1"
        firestore_client.collection.return_value.add = AsyncMock(return_value=(None, added))
        transaction = make_transaction()

        remote_id = await store.append_transaction(transaction)

        assert remote_id == "remote-1"
        (data,), _ = firestore_client.collection.return_value.add.call_args
        assert data["clientId"] == transaction.id
        assert data["createdAt"] is firestore.SERVER_TIMESTAMP

    async def test_query_skips_malformed_records(self, store, firestore_client):
        good = make_transaction()

        async def stream():
            yield snapshot("remote-1", transaction_to_document(good))
            yield snapshot("remote-2", {"userId": "user-1"})

        firestore_client.collection.return_value.where.return_value.stream = stream

        transactions = await store.query_transactions("user-1")

        assert [t.id for t in transactions] == ["remote-1"]
        assert transactions[0].client_id == good.id


class TestErrorTranslation:
    """Tests for translate_errors."""

    @pytest.mark.parametrize(
        "raised, expected",
        [
            (gexc.ServiceUnavailable("down"), UnreachableError),
            (gexc.DeadlineExceeded("slow"), UnreachableError),
            (ConnectionError("reset"), UnreachableError),
            (gexc.PermissionDenied("rules"), PermissionDeniedError),
            (gexc.Unauthenticated("token"), PermissionDeniedError),
            (gexc.AlreadyExists("dup"), RemoteConflictError),
            (gexc.InvalidArgument("bad"), UnknownRemoteError),
            (RuntimeError("other"), UnknownRemoteError),
        ],
    )
    def test_mapping(self, raised, expected):
        with pytest.raises(expected):
            with translate_errors("op", "id"):
                raise raised

    async def test_store_errors_surface_translated(self, store, doc_ref):
        doc_ref.get.side_effect = gexc.PermissionDenied("rules")

        with pytest.raises(PermissionDeniedError):
            await store.get_portfolio("user-1")

"""Local durable queue for transactions that could not be written remotely.

The whole entry list lives under one key of the DurableKeyValueStore and is
rewritten on every change. The in-memory list and its durable copy are one
critical section guarded by a single asyncio.Lock. The store is shared by all
users of an install; callers filter by user id.

The queue also keeps the last known portfolio snapshot per user
(``portfolio_<user_id>``), used when the remote store cannot be read.
"""

import asyncio
import json
import logging
from dataclasses import replace
from typing import Optional

from papertrade.core.timezone import now_utc
from papertrade.domain.models import LocalQueueEntry, Portfolio, SyncState, Transaction
from papertrade.repositories.documents import (
    portfolio_from_document,
    portfolio_to_document,
    queue_entry_from_document,
    queue_entry_to_document,
)
from papertrade.repositories.protocols import DurableKeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_KEY = "localTransactions"
PORTFOLIO_KEY_PREFIX = "portfolio_"


class LocalQueue:
    """FIFO of sync-pending transactions persisted as one JSON blob."""

    def __init__(self, store: DurableKeyValueStore, key: str = DEFAULT_QUEUE_KEY):
        self._store = store
        self._key = key
        self._entries: list[LocalQueueEntry] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def load_from_durable_storage(self) -> None:
        """
        Repopulate the in-memory list from durable storage.

        A missing or unreadable blob is an empty queue; unreadable entries
        inside a readable blob are skipped.
        """
        async with self._lock:
            loaded = await self._read_entries()
            loaded_ids = {entry.id for entry in loaded}
            self._entries = loaded + [entry for entry in self._entries if entry.id not in loaded_ids]
        logger.info("Loaded %d cached transactions", len(self._entries))

    async def enqueue(self, transaction: Transaction) -> LocalQueueEntry:
        """
        Append a sync-pending entry and persist the full list.

        The entry stays in memory even if the durable write raises; the next
        successful persist writes it out.
        """
        entry = LocalQueueEntry(
            transaction=replace(transaction, sync_pending=True),
            enqueued_at=now_utc(),
        )
        async with self._lock:
            self._entries.append(entry)
            await self._persist()
        logger.info("Transaction saved locally: %s", entry.id)
        return entry

    async def remove(self, transaction_id: str) -> bool:
        """Remove one entry by id and persist; returns False if it was not queued."""
        async with self._lock:
            index = next(
                (i for i, entry in enumerate(self._entries) if entry.id == transaction_id),
                None,
            )
            if index is None:
                return False
            del self._entries[index]
            await self._persist()
        return True

    async def remove_synced(self) -> int:
        """Drop every entry that reached SYNCED and persist; returns how many."""
        async with self._lock:
            kept = [entry for entry in self._entries if entry.state != SyncState.SYNCED]
            removed = len(self._entries) - len(kept)
            if removed:
                self._entries = kept
                await self._persist()
        return removed

    def list_pending(self, user_id: str) -> list[Transaction]:
        """Pending transactions of one user, in enqueue order."""
        return [entry.transaction for entry in self._entries if entry.user_id == user_id]

    def pending_entries(self, user_id: Optional[str] = None) -> list[LocalQueueEntry]:
        """FIFO snapshot of entries, optionally for one user."""
        return [
            entry
            for entry in self._entries
            if entry.state == SyncState.PENDING and (user_id is None or entry.user_id == user_id)
        ]

    # Portfolio snapshots

    async def save_portfolio_snapshot(self, portfolio: Portfolio) -> None:
        """Persist the latest portfolio snapshot for its user."""
        document = portfolio_to_document(portfolio)
        await self._store.set(self._portfolio_key(portfolio.user_id), json.dumps(document))

    async def get_portfolio_snapshot(self, user_id: str) -> Optional[Portfolio]:
        """Return the cached snapshot for a user; unreadable snapshots count as missing."""
        raw = await self._store.get(self._portfolio_key(user_id))
        if not raw:
            return None
        try:
            return portfolio_from_document(user_id, json.loads(raw))
        except (ValueError, TypeError, AttributeError, ArithmeticError) as exc:
            logger.warning("Ignoring unreadable portfolio snapshot for %s: %s", user_id, exc)
            return None

    # Internals

    @staticmethod
    def _portfolio_key(user_id: str) -> str:
        return f"{PORTFOLIO_KEY_PREFIX}{user_id}"

    async def _persist(self) -> None:
        payload = json.dumps([queue_entry_to_document(entry) for entry in self._entries])
        await self._store.set(self._key, payload)

    async def _read_entries(self) -> list[LocalQueueEntry]:
        try:
            raw = await self._store.get(self._key)
        except Exception as exc:
            logger.error("Failed to load cached transactions: %s", exc)
            return []
        if not raw:
            return []
        try:
            documents = json.loads(raw)
        except ValueError as exc:
            logger.error("Discarding corrupt transaction cache: %s", exc)
            return []
        if not isinstance(documents, list):
            logger.error("Discarding transaction cache with unexpected shape: %s", type(documents).__name__)
            return []

        entries: list[LocalQueueEntry] = []
        for document in documents:
            try:
                entries.append(queue_entry_from_document(document))
            except (KeyError, ValueError, TypeError, AttributeError, ArithmeticError) as exc:
                logger.warning("Skipping unreadable cached transaction: %s", exc)
        return entries

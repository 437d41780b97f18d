"""Reconciliation of locally queued transactions with the remote store."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from papertrade.core.exceptions import RemoteStoreError
from papertrade.domain.models import SyncState
from papertrade.repositories.protocols import RemoteStore
from papertrade.services.local_queue import LocalQueue
from papertrade.services.remote_calls import call_remote

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Result of one drain pass."""

    attempted: int = 0
    synced: list[str] = field(default_factory=list)
    failed: Optional[str] = None
    remaining: int = 0

    @property
    def stopped_early(self) -> bool:
        return self.failed is not None


class SyncCoordinator:
    """
    Drains the local queue into the remote store.

    Entries are replayed oldest-first in enqueue order, one at a time. The
    first failure ends the pass and leaves that entry and everything behind it
    pending for the next trigger. Replay does not re-run ledger validation;
    portfolio effects were applied when the trade executed.

    Triggers: login, offline→online edges, and a periodic timer.
    """

    def __init__(
        self,
        remote_store: RemoteStore,
        local_queue: LocalQueue,
        remote_timeout_seconds: float = 10.0,
        interval_seconds: float = 60.0,
    ):
        self._remote = remote_store
        self._queue = local_queue
        self._timeout = remote_timeout_seconds
        self._interval = interval_seconds
        self._drain_lock = asyncio.Lock()
        self._online: Optional[bool] = None
        self._periodic_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        """Return True while the periodic timer is active."""
        return self._periodic_task is not None and not self._periodic_task.done()

    async def drain(self) -> SyncReport:
        """Run one drain pass; a pass on an empty queue is a no-op."""
        async with self._drain_lock:
            report = SyncReport()
            entries = self._queue.pending_entries()
            if not entries:
                return report

            logger.info("Attempting to sync %d local transactions", len(entries))
            for entry in entries:
                report.attempted += 1
                entry.state = SyncState.SYNCING
                try:
                    remote_id = await call_remote(
                        self._remote.append_transaction(entry.transaction),
                        self._timeout,
                        "append_transaction",
                    )
                except RemoteStoreError as exc:
                    entry.state = SyncState.PENDING
                    report.failed = entry.id
                    logger.warning("Failed to sync transaction %s: %s", entry.id, exc.message)
                    break
                except asyncio.CancelledError:
                    # Outcome unknown; a replay is deduplicated by clientId
                    entry.state = SyncState.PENDING
                    logger.info("Sync cancelled; transaction %s stays queued", entry.id)
                    raise

                entry.state = SyncState.SYNCED
                try:
                    await asyncio.shield(self._queue.remove_synced())
                except Exception:
                    logger.exception("Synced transaction %s but could not update local queue", entry.id)
                report.synced.append(entry.id)
                logger.info("Synced transaction %s as %s", entry.id, remote_id)

            report.remaining = len(self._queue.pending_entries())
            return report

    # =========================================================================
    # TRIGGERS
    # =========================================================================

    async def handle_login(self, user_id: str) -> SyncReport:
        """Drain after a successful authentication."""
        logger.info("Login observed for %s; draining local queue", user_id)
        return await self.drain()

    async def handle_connectivity_change(self, online: bool) -> Optional[SyncReport]:
        """
        Record connectivity and drain on an offline→online edge only.

        The first observation establishes the level without triggering.
        """
        previous, self._online = self._online, online
        if online and previous is False:
            logger.info("Connectivity restored; draining local queue")
            return await self.drain()
        return None

    def start(self) -> None:
        """Start the periodic drain timer (no-op if running or disabled)."""
        if self._interval <= 0 or self.is_running:
            return
        self._periodic_task = asyncio.create_task(self._run_periodic(), name="papertrade-sync")

    async def stop(self) -> None:
        """Cancel the periodic drain timer and wait for it to finish."""
        task, self._periodic_task = self._periodic_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run_periodic(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.drain()
            except Exception:
                logger.exception("Periodic sync failed")

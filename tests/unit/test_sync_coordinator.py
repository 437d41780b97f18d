"""
Unit tests for SyncCoordinator.

Tests cover:
- Drain passes (empty, full success, stop at first failure)
- FIFO replay by enqueue order
- Login and connectivity triggers
- Periodic timer start/stop
"""

import asyncio

import pytest

from papertrade.core.exceptions import PermissionDeniedError, UnreachableError
from papertrade.domain.models import SyncState
from papertrade.services import LocalQueue, SyncCoordinator
from tests.conftest import make_transaction, utc_datetime


def remote_client_ids(remote_store) -> list[str]:
    return [doc["clientId"] for doc in remote_store.transactions.values()]


class TestDrain:
    """Tests for a single drain pass."""

    async def test_empty_queue_is_noop(self, coordinator: SyncCoordinator, remote_store):
        """
        GIVEN an empty queue
        WHEN drain runs twice
        THEN nothing is attempted and the remote store is not called
        """
        first = await coordinator.drain()
        second = await coordinator.drain()

        assert first.attempted == second.attempted == 0
        assert remote_store.calls == []

    async def test_drain_syncs_all_entries_in_enqueue_order(
        self,
        coordinator: SyncCoordinator,
        local_queue: LocalQueue,
        remote_store,
    ):
        """
        GIVEN three queued transactions whose timestamps are not in enqueue order
        WHEN drain runs
        THEN all are written remotely in enqueue order and the queue is empty
        """
        transactions = [
            make_transaction(symbol="A", timestamp=utc_datetime(2024, 6, 15, 12)),
            make_transaction(symbol="B", timestamp=utc_datetime(2024, 6, 15, 9)),
            make_transaction(symbol="C", timestamp=utc_datetime(2024, 6, 15, 10)),
        ]
        for transaction in transactions:
            await local_queue.enqueue(transaction)

        report = await coordinator.drain()

        assert report.synced == [t.id for t in transactions]
        assert report.remaining == 0
        assert not report.stopped_early
        assert remote_client_ids(remote_store) == [t.id for t in transactions]
        assert len(local_queue) == 0

    async def test_failure_stops_pass_and_keeps_order(
        self,
        coordinator: SyncCoordinator,
        local_queue: LocalQueue,
        remote_store,
    ):
        """
        GIVEN two queued transactions and an unreachable remote store
        WHEN drain runs
        THEN the first entry fails, nothing after it is attempted, and both stay pending
        """
        first, second = make_transaction(symbol="A"), make_transaction(symbol="B")
        await local_queue.enqueue(first)
        await local_queue.enqueue(second)
        remote_store.fail(UnreachableError(), "append_transaction")

        report = await coordinator.drain()

        assert report.attempted == 1
        assert report.failed == first.id
        assert report.remaining == 2
        assert remote_store.calls == ["append_transaction"]
        assert [e.state for e in local_queue.pending_entries()] == [SyncState.PENDING] * 2

    async def test_next_pass_retries_from_front(
        self,
        coordinator: SyncCoordinator,
        local_queue: LocalQueue,
        remote_store,
    ):
        first, second = make_transaction(symbol="A"), make_transaction(symbol="B")
        await local_queue.enqueue(first)
        await local_queue.enqueue(second)
        remote_store.fail(PermissionDeniedError(), "append_transaction")
        await coordinator.drain()

        remote_store.recover()
        report = await coordinator.drain()

        assert report.synced == [first.id, second.id]
        assert remote_client_ids(remote_store) == [first.id, second.id]

    async def test_timeout_leaves_entry_pending(
        self,
        coordinator: SyncCoordinator,
        local_queue: LocalQueue,
        remote_store,
    ):
        """
        GIVEN a remote store slower than the timeout
        WHEN drain runs
        THEN the entry is treated as unreachable and stays queued
        """
        await local_queue.enqueue(make_transaction())
        remote_store.delay = 5

        report = await coordinator.drain()

        assert report.failed is not None
        assert len(local_queue) == 1

    async def test_cancelled_drain_leaves_entry_retryable(
        self,
        coordinator: SyncCoordinator,
        local_queue: LocalQueue,
        remote_store,
    ):
        """
        GIVEN a queued transaction and a slow remote store
        WHEN a drain is cancelled mid-write and another drain runs later
        THEN the entry is pending again and the later drain syncs it
        """
        transaction = make_transaction()
        await local_queue.enqueue(transaction)
        remote_store.delay = 0.5
        task = asyncio.create_task(coordinator.drain())
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert [e.state for e in local_queue.pending_entries()] == [SyncState.PENDING]

        remote_store.recover()
        report = await coordinator.drain()

        assert report.synced == [transaction.id]
        assert len(local_queue) == 0

    async def test_concurrent_drains_do_not_duplicate(
        self,
        coordinator: SyncCoordinator,
        local_queue: LocalQueue,
        remote_store,
    ):
        """
        GIVEN one queued transaction and a slow remote store
        WHEN two drains are started together
        THEN the transaction is written remotely once
        """
        transaction = make_transaction()
        await local_queue.enqueue(transaction)
        remote_store.delay = 0.05

        await asyncio.gather(coordinator.drain(), coordinator.drain())

        assert remote_client_ids(remote_store) == [transaction.id]


class TestTriggers:
    """Tests for login, connectivity and periodic triggers."""

    async def test_login_drains(self, coordinator: SyncCoordinator, local_queue: LocalQueue):
        await local_queue.enqueue(make_transaction())

        report = await coordinator.handle_login("user-1")

        assert len(report.synced) == 1
        assert len(local_queue) == 0

    async def test_connectivity_triggers_only_on_offline_to_online_edge(
        self,
        coordinator: SyncCoordinator,
        local_queue: LocalQueue,
    ):
        """
        GIVEN a queued transaction
        WHEN connectivity reports online, offline, online, online
        THEN only the offline→online change drains
        """
        await local_queue.enqueue(make_transaction())

        assert await coordinator.handle_connectivity_change(True) is None
        assert await coordinator.handle_connectivity_change(False) is None
        report = await coordinator.handle_connectivity_change(True)
        assert report is not None and len(report.synced) == 1
        assert await coordinator.handle_connectivity_change(True) is None

    async def test_periodic_timer_drains_and_stops(self, remote_store, local_queue: LocalQueue):
        """
        GIVEN a coordinator with a short interval
        WHEN the timer is started with a queued transaction
        THEN the queue empties and stop() cancels the timer
        """
        coordinator = SyncCoordinator(remote_store, local_queue, interval_seconds=0.01)
        await local_queue.enqueue(make_transaction())

        coordinator.start()
        assert coordinator.is_running
        for _ in range(100):
            if len(local_queue) == 0:
                break
            await asyncio.sleep(0.01)
        await coordinator.stop()

        assert len(local_queue) == 0
        assert not coordinator.is_running

    async def test_zero_interval_disables_timer(self, coordinator: SyncCoordinator):
        coordinator.start()
        assert not coordinator.is_running
        await coordinator.stop()

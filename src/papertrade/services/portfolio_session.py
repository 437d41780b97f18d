"""Portfolio session facade: the boundary the UI/state layer calls."""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from papertrade.core.exceptions import (
    PermissionDeniedError,
    RemoteConflictError,
    RemoteStoreError,
    SessionNotInitializedError,
)
from papertrade.core.timezone import now_utc
from papertrade.domain.models import Portfolio, TradeSide, Transaction
from papertrade.repositories.protocols import RemoteStore
from papertrade.services.ledger_engine import LedgerResult, apply_trade
from papertrade.services.local_queue import LocalQueue
from papertrade.services.remote_calls import call_remote

logger = logging.getLogger(__name__)

PERMISSION_ADVISORY = (
    "The remote store rejected a request (permission denied). Check the store's "
    "access rules; trades are kept locally and will be retried."
)


@dataclass(frozen=True)
class PersistOutcome:
    """What the persistence phase of a trade achieved."""

    transaction: Transaction
    remote_saved: bool
    queued: bool
    portfolio_saved: bool


class PortfolioSession:
    """
    Per-process owner of in-memory portfolios, one per logged-in user.

    Trades run in two phases:
    1. ``apply_locally``: ledger validation and an in-memory swap (synchronous)
    2. ``persist``: remote write of the transaction and portfolio, local
       snapshot, and a queue entry when the transaction could not be written

    ``execute_trade`` runs both under a per-user lock. Remote failures never
    surface from ``execute_trade``; ledger failures always do, before any
    mutation.
    """

    def __init__(
        self,
        remote_store: RemoteStore,
        local_queue: LocalQueue,
        starting_balance: Decimal = Decimal("1000000"),
        remote_timeout_seconds: float = 10.0,
        on_advisory: Optional[Callable[[str], None]] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._remote = remote_store
        self._queue = local_queue
        self._starting_balance = starting_balance
        self._timeout = remote_timeout_seconds
        self._on_advisory = on_advisory
        self._clock = clock

        self._portfolios: dict[str, Portfolio] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._advisory: Optional[str] = None

    @property
    def permission_advisory(self) -> Optional[str]:
        """Advisory issued after the first PermissionDenied, if any."""
        return self._advisory

    def get_portfolio(self, user_id: str) -> Optional[Portfolio]:
        """Current in-memory portfolio for a user, if a session is active."""
        return self._portfolios.get(user_id)

    def active_users(self) -> list[str]:
        """User ids with an in-memory portfolio."""
        return list(self._portfolios)

    def end_session(self, user_id: str) -> None:
        """Drop in-memory state for a user (logout)."""
        self._portfolios.pop(user_id, None)
        self._locks.pop(user_id, None)

    # =========================================================================
    # INITIALIZE
    # =========================================================================

    async def initialize_portfolio(self, user_id: str) -> Portfolio:
        """
        Fetch-or-create the user's portfolio and make it the in-memory state.

        Fallback order: remote document, local snapshot, fresh default.
        Never raises for infrastructure failures. Runs under the user's trade
        lock, so it never interleaves with a trade in flight.
        """
        async with self._lock_for(user_id):
            return await self._initialize_unlocked(user_id)

    async def _initialize_unlocked(self, user_id: str) -> Portfolio:
        try:
            portfolio = await call_remote(
                self._remote.get_portfolio(user_id), self._timeout, "get_portfolio"
            )
        except RemoteStoreError as exc:
            self._note_remote_failure(exc, "get_portfolio")
            portfolio = await self._load_snapshot(user_id)
            if portfolio is None:
                logger.info("Using default portfolio for %s", user_id)
                portfolio = self._default_portfolio(user_id)
        else:
            if portfolio is None:
                portfolio = await self._load_snapshot(user_id) or self._default_portfolio(user_id)
                await self._create_remote(portfolio)

        self._portfolios[user_id] = portfolio
        return portfolio

    # =========================================================================
    # TRADE
    # =========================================================================

    async def execute_trade(
        self,
        user_id: str,
        symbol: str,
        side: TradeSide,
        shares: int,
        price: Decimal,
    ) -> Transaction:
        """
        Execute a simulated market-fill trade.

        Returns the remote copy of the transaction when the remote write
        succeeded, else the sync-pending local copy.

        Raises:
            LedgerError: InvalidQuantity, InvalidSymbol, InsufficientFunds,
                NoPosition or InsufficientShares; nothing is mutated
        """
        async with self._lock_for(user_id):
            if user_id not in self._portfolios:
                await self._initialize_unlocked(user_id)
            result, transaction = self.apply_locally(user_id, symbol, side, shares, price)
            outcome = await self.persist(result.portfolio, transaction)
            return outcome.transaction

    def apply_locally(
        self,
        user_id: str,
        symbol: str,
        side: TradeSide,
        shares: int,
        price: Decimal,
    ) -> tuple[LedgerResult, Transaction]:
        """Validate against the in-memory portfolio and swap in the new snapshot."""
        current = self._portfolios.get(user_id)
        if current is None:
            raise SessionNotInitializedError(user_id)

        executed_at = self._clock()
        result = apply_trade(current, side, symbol, shares, price, as_of=executed_at)
        transaction = Transaction.new(
            user_id=user_id,
            symbol=result.symbol,
            side=result.side,
            shares=result.shares,
            price=result.price,
            timestamp=executed_at,
        )
        self._portfolios[user_id] = result.portfolio
        logger.info(
            "Applied %s %d %s @ %s for %s (balance %s)",
            result.side.value, result.shares, result.symbol, result.price, user_id, result.balance,
        )
        return result, transaction

    async def persist(self, portfolio: Portfolio, transaction: Transaction) -> PersistOutcome:
        """
        Persist a locally applied trade.

        Exactly one queue entry is recorded when the remote transaction write
        fails; none when it succeeds. The portfolio snapshot is always written
        locally as well as remotely.

        If the caller is cancelled mid-way, the local records are still written
        before the cancellation propagates: the transaction is queued when its
        remote write had not completed, and the snapshot is always saved.
        """
        remote_saved = False
        queued = False
        try:
            remote_id = await call_remote(
                self._remote.append_transaction(transaction), self._timeout, "append_transaction"
            )
            saved = replace(transaction, id=remote_id, sync_pending=False)
            remote_saved = True
        except RemoteStoreError as exc:
            self._note_remote_failure(exc, "append_transaction")
            saved = await self._enqueue(transaction)
            queued = True
        except asyncio.CancelledError:
            logger.warning("Persist cancelled; queueing transaction %s locally", transaction.id)
            await asyncio.shield(self._save_locally(portfolio, transaction))
            raise

        portfolio_saved = False
        try:
            await call_remote(
                self._remote.update_portfolio(portfolio.user_id, portfolio),
                self._timeout,
                "update_portfolio",
            )
            portfolio_saved = True
        except RemoteStoreError as exc:
            self._note_remote_failure(exc, "update_portfolio")
        except asyncio.CancelledError:
            await asyncio.shield(self._save_snapshot(portfolio))
            raise

        await self._save_snapshot(portfolio)
        return PersistOutcome(
            transaction=saved,
            remote_saved=remote_saved,
            queued=queued,
            portfolio_saved=portfolio_saved,
        )

    # =========================================================================
    # HISTORY
    # =========================================================================

    async def get_transaction_history(self, user_id: str) -> list[Transaction]:
        """
        Remote records merged with still-pending local entries, newest first.

        Duplicates are dropped by id; a local entry whose id is the client id
        of a remote record is already synced and is dropped too. On remote
        failure only local entries are returned.
        """
        pending = self._queue.list_pending(user_id)
        try:
            remote = await call_remote(
                self._remote.query_transactions(user_id), self._timeout, "query_transactions"
            )
        except RemoteStoreError as exc:
            self._note_remote_failure(exc, "query_transactions")
            remote = []

        merged: dict[str, Transaction] = {}
        for transaction in remote:
            merged.setdefault(transaction.id, transaction)
        synced_client_ids = {transaction.client_id for transaction in remote}
        for transaction in pending:
            if transaction.id in merged or transaction.id in synced_client_ids:
                continue
            merged[transaction.id] = transaction

        return sorted(merged.values(), key=lambda t: t.timestamp, reverse=True)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        return self._locks.setdefault(user_id, asyncio.Lock())

    def _default_portfolio(self, user_id: str) -> Portfolio:
        return Portfolio.default(user_id, self._starting_balance, last_updated=self._clock())

    async def _create_remote(self, portfolio: Portfolio) -> None:
        try:
            await call_remote(
                self._remote.create_portfolio(portfolio.user_id, portfolio),
                self._timeout,
                "create_portfolio",
            )
        except RemoteConflictError:
            logger.info("Portfolio for %s was created concurrently", portfolio.user_id)
        except RemoteStoreError as exc:
            self._note_remote_failure(exc, "create_portfolio")
            await self._save_snapshot(portfolio)

    async def _enqueue(self, transaction: Transaction) -> Transaction:
        try:
            entry = await self._queue.enqueue(transaction)
        except Exception:
            # Entry is still held in memory by the queue; only the durable write failed
            logger.exception("Failed to write local queue for transaction %s", transaction.id)
            return replace(transaction, sync_pending=True)
        return entry.transaction

    async def _save_locally(self, portfolio: Portfolio, transaction: Transaction) -> None:
        await self._enqueue(transaction)
        await self._save_snapshot(portfolio)

    async def _load_snapshot(self, user_id: str) -> Optional[Portfolio]:
        try:
            return await self._queue.get_portfolio_snapshot(user_id)
        except Exception:
            logger.exception("Failed to read local portfolio snapshot for %s", user_id)
            return None

    async def _save_snapshot(self, portfolio: Portfolio) -> None:
        try:
            await self._queue.save_portfolio_snapshot(portfolio)
        except Exception:
            logger.exception("Failed to save local portfolio snapshot for %s", portfolio.user_id)

    def _note_remote_failure(self, exc: RemoteStoreError, operation: str) -> None:
        logger.warning("Remote %s failed (%s): %s", operation, exc.code, exc.message)
        if isinstance(exc, PermissionDeniedError) and self._advisory is None:
            self._advisory = PERMISSION_ADVISORY
            if self._on_advisory is not None:
                self._on_advisory(PERMISSION_ADVISORY)

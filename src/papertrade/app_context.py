"""Application context: wires stores, services and collaborator events.

Used by the FastAPI app and usable directly in-process.
"""

import asyncio
import logging
from typing import Callable, Optional

from papertrade.config.settings import Settings, get_settings, set_settings
from papertrade.providers import (
    AuthProvider,
    ConnectivityObserver,
    MarketDataProvider,
    StubMarketDataProvider,
)
from papertrade.repositories.protocols import DurableKeyValueStore, RemoteStore
from papertrade.repositories.firestore import FirestoreRemoteStore
from papertrade.repositories.memory import InMemoryRemoteStore
from papertrade.repositories.sqlalchemy import SqlAlchemyKeyValueStore
from papertrade.repositories.sqlalchemy.database import (
    get_session_factory,
    init_db,
    reset_database,
)
from papertrade.services import (
    LocalQueue,
    PortfolioSession,
    SyncCoordinator,
    ValuationService,
)

logger = logging.getLogger(__name__)


def build_remote_store(settings: Settings) -> RemoteStore:
    """Create the configured remote store backend."""
    if settings.remote_backend == "firestore":
        return FirestoreRemoteStore.from_settings(
            project=settings.firestore_project,
            database=settings.firestore_database,
            portfolios_collection=settings.portfolios_collection,
            transactions_collection=settings.transactions_collection,
        )
    return InMemoryRemoteStore()


def build_kv_store(settings: Settings) -> DurableKeyValueStore:
    """Create the SQLite-backed durable key-value store."""
    set_settings(settings)
    reset_database()
    init_db()
    return SqlAlchemyKeyValueStore(get_session_factory())


class AppContext:
    """
    Application context providing access to all services.

    Collaborator callbacks (auth, connectivity) may fire from any thread;
    their async work is scheduled onto the loop captured by ``startup()``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        kv_store: Optional[DurableKeyValueStore] = None,
        remote_store: Optional[RemoteStore] = None,
        market_data: Optional[MarketDataProvider] = None,
    ):
        self.settings = settings or get_settings()
        self.kv_store = kv_store or build_kv_store(self.settings)
        self.remote_store = remote_store or build_remote_store(self.settings)
        self.market_data = market_data or StubMarketDataProvider()

        self.queue = LocalQueue(self.kv_store, key=self.settings.local_queue_key)
        self.session = PortfolioSession(
            remote_store=self.remote_store,
            local_queue=self.queue,
            starting_balance=self.settings.starting_balance,
            remote_timeout_seconds=self.settings.remote_timeout_seconds,
            on_advisory=self._log_advisory,
        )
        self.sync = SyncCoordinator(
            remote_store=self.remote_store,
            local_queue=self.queue,
            remote_timeout_seconds=self.settings.remote_timeout_seconds,
            interval_seconds=self.settings.sync_interval_seconds,
        )
        self.valuation = ValuationService(self.market_data)

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribers: list[Callable[[], None]] = []
        self._started = False

    @property
    def is_started(self) -> bool:
        return self._started

    async def startup(self) -> None:
        """Load the local queue, start the periodic sync."""
        self._loop = asyncio.get_running_loop()
        await self.queue.load_from_durable_storage()
        self.sync.start()
        self._started = True
        logger.info("%s started (%d transactions pending)", self.settings.app_name, len(self.queue))

    async def shutdown(self) -> None:
        """Stop periodic sync and drop collaborator subscriptions."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        await self.sync.stop()
        self._started = False
        logger.info("%s stopped", self.settings.app_name)

    # =========================================================================
    # COLLABORATOR EVENTS
    # =========================================================================

    def bind_auth(self, provider: AuthProvider) -> None:
        """Follow sign-in/sign-out changes of an auth provider."""
        self._unsubscribers.append(
            provider.subscribe(lambda user_id: self._schedule(self.on_auth_changed(user_id)))
        )

    def bind_connectivity(self, observer: ConnectivityObserver) -> None:
        """Drain the queue whenever connectivity comes back."""
        self._unsubscribers.append(
            observer.subscribe(lambda online: self._schedule(self.sync.handle_connectivity_change(online)))
        )

    async def on_auth_changed(self, user_id: Optional[str]) -> None:
        """
        React to a sign-in or sign-out.

        Sign-in initializes the portfolio, drains the queue and (re)starts the
        periodic sync. Sign-out ends all sessions and stops the periodic sync.
        """
        if user_id is None:
            for active in self.session.active_users():
                self.session.end_session(active)
            await self.sync.stop()
            logger.info("Signed out; in-memory portfolios cleared")
            return

        await self.session.initialize_portfolio(user_id)
        await self.sync.handle_login(user_id)
        self.sync.start()

    def _schedule(self, coro) -> None:
        if self._loop is None or self._loop.is_closed():
            coro.close()
            logger.warning("Event ignored: application context is not started")
            return
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        future.add_done_callback(self._log_event_failure)

    @staticmethod
    def _log_event_failure(future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Auth/connectivity event handler failed", exc_info=exc)

    @staticmethod
    def _log_advisory(message: str) -> None:
        logger.warning(message)

"""
Pytest configuration and fixtures for the paper-trading ledger tests.

This module provides:
- In-memory and SQLite-backed key-value stores
- A remote store double with switchable failures and latency
- Deterministic quote providers and clocks
- Queue, session, coordinator and API client fixtures
"""

import asyncio
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from papertrade.app_context import AppContext
from papertrade.config.settings import Settings, reset_settings
from papertrade.core.exceptions import QuoteUnavailableError
from papertrade.core.timezone import UTC
from papertrade.domain.models import Portfolio, TradeSide, Transaction
from papertrade.domain.views import Quote
from papertrade.main import create_app
from papertrade.repositories.memory import InMemoryKeyValueStore, InMemoryRemoteStore
from papertrade.repositories.sqlalchemy import (
    Base,
    SqlAlchemyKeyValueStore,
    create_sqlite_engine,
    reset_database,
)
from papertrade.repositories.sqlalchemy import orm_models  # noqa: F401
from papertrade.services import LocalQueue, PortfolioSession, SyncCoordinator, ValuationService


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a tz-aware UTC datetime."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


class TickingClock:
    """Clock that advances one second per call, for ordered timestamps."""

    def __init__(self, start: datetime):
        self._current = start

    def __call__(self) -> datetime:
        now = self._current
        self._current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2024, 6, 15, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> TickingClock:
    return TickingClock(fixed_now)


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset module-level settings and database state around each test."""
    reset_settings()
    reset_database()
    yield
    reset_settings()
    reset_database()


# =============================================================================
# FACTORIES
# =============================================================================


def make_transaction(
    user_id: str = "user-1",
    symbol: str = "AAPL",
    side: TradeSide = TradeSide.BUY,
    shares: int = 1,
    price: Decimal = Decimal("100"),
    timestamp: Optional[datetime] = None,
) -> Transaction:
    """Create a locally-identified transaction."""
    return Transaction.new(
        user_id=user_id,
        symbol=symbol,
        side=side,
        shares=shares,
        price=price,
        timestamp=timestamp or utc_datetime(2024, 6, 15),
    )


def assert_decimal_equal(actual: Decimal, expected: Decimal, places: int = 2) -> None:
    """Compare Decimals after rounding to the given places."""
    quantum = Decimal(10) ** -places
    assert actual.quantize(quantum) == expected.quantize(quantum), f"{actual} != {expected}"


@pytest.fixture
def portfolio_factory() -> Callable[..., Portfolio]:
    def _create(user_id: str = "user-1", balance: Decimal = Decimal("1000")) -> Portfolio:
        return Portfolio.default(user_id, balance)

    return _create


# =============================================================================
# STORE DOUBLES
# =============================================================================


class FlakyRemoteStore(InMemoryRemoteStore):
    """
    InMemoryRemoteStore with switchable failures.

    - ``failures``: operation name -> exception raised on every call
    - ``delay``: seconds slept before each call (for timeout tests)
    """

    def __init__(self) -> None:
        super().__init__()
        self.failures: dict[str, BaseException] = {}
        self.delay: float = 0
        self.calls: list[str] = []

    def fail(self, exc: BaseException, *operations: str) -> None:
        for operation in operations or (
            "get_portfolio",
            "create_portfolio",
            "update_portfolio",
            "append_transaction",
            "query_transactions",
        ):
            self.failures[operation] = exc

    def recover(self) -> None:
        self.failures.clear()
        self.delay = 0

    async def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.delay:
            await asyncio.sleep(self.delay)
        exc = self.failures.get(operation)
        if exc is not None:
            raise exc

    async def get_portfolio(self, user_id):
        await self._enter("get_portfolio")
        return await super().get_portfolio(user_id)

    async def create_portfolio(self, user_id, initial):
        await self._enter("create_portfolio")
        return await super().create_portfolio(user_id, initial)

    async def update_portfolio(self, user_id, portfolio):
        await self._enter("update_portfolio")
        return await super().update_portfolio(user_id, portfolio)

    async def append_transaction(self, transaction):
        await self._enter("append_transaction")
        return await super().append_transaction(transaction)

    async def query_transactions(self, user_id):
        await self._enter("query_transactions")
        return await super().query_transactions(user_id)


class FailingKeyValueStore(InMemoryKeyValueStore):
    """Key-value store whose writes fail while ``fail_writes`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        await super().set(key, value)


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def failing_kv_store() -> FailingKeyValueStore:
    return FailingKeyValueStore()


@pytest.fixture
def remote_store() -> FlakyRemoteStore:
    return FlakyRemoteStore()


@pytest.fixture
def sqlite_session_factory(tmp_path) -> sessionmaker:
    """Session factory over a file-backed SQLite database in tmp_path."""
    engine = create_sqlite_engine(f"sqlite:///{tmp_path / 'cache.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def sqlite_kv_store(sqlite_session_factory) -> SqlAlchemyKeyValueStore:
    return SqlAlchemyKeyValueStore(sqlite_session_factory)


# =============================================================================
# MARKET DATA
# =============================================================================


class DeterministicQuoteProvider:
    """Quote provider with fixed prices; unknown symbols are unavailable."""

    def __init__(self, prices: dict[str, Decimal]):
        self.prices = prices

    def get_quote(self, symbol: str) -> Quote:
        if symbol not in self.prices:
            raise QuoteUnavailableError(symbol)
        return Quote(
            symbol=symbol,
            price=self.prices[symbol],
            change_abs=Decimal("0"),
            change_pct=Decimal("0"),
        )


@pytest.fixture
def quote_provider() -> DeterministicQuoteProvider:
    return DeterministicQuoteProvider({"AAPL": Decimal("120"), "TCS": Decimal("3500.50")})


@pytest.fixture
def valuation_service(quote_provider) -> ValuationService:
    return ValuationService(quote_provider)


# =============================================================================
# SERVICES
# =============================================================================


@pytest.fixture
def local_queue(kv_store) -> LocalQueue:
    return LocalQueue(kv_store)


@pytest.fixture
def advisories() -> list[str]:
    return []


@pytest.fixture
def session(remote_store, local_queue, clock, advisories) -> PortfolioSession:
    return PortfolioSession(
        remote_store=remote_store,
        local_queue=local_queue,
        starting_balance=Decimal("1000"),
        remote_timeout_seconds=0.2,
        on_advisory=advisories.append,
        clock=clock,
    )


@pytest.fixture
def coordinator(remote_store, local_queue) -> SyncCoordinator:
    return SyncCoordinator(
        remote_store=remote_store,
        local_queue=local_queue,
        remote_timeout_seconds=0.2,
        interval_seconds=0,
    )


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def api_context(tmp_path, remote_store, quote_provider) -> AppContext:
    settings = Settings(
        data_dir=tmp_path,
        starting_balance=Decimal("1000"),
        sync_interval_seconds=0,
        remote_timeout_seconds=0.5,
    )
    return AppContext(
        settings=settings,
        kv_store=InMemoryKeyValueStore(),
        remote_store=remote_store,
        market_data=quote_provider,
    )


@pytest.fixture
def client(api_context) -> TestClient:
    """TestClient running the app lifespan around each test."""
    with TestClient(create_app(api_context)) as test_client:
        yield test_client

"""SQLAlchemy repository implementations."""

from papertrade.repositories.sqlalchemy.database import (
    create_sqlite_engine,
    get_engine,
    get_session_factory,
    init_db,
    reset_database,
    Base,
)
from papertrade.repositories.sqlalchemy.kv_store import SqlAlchemyKeyValueStore

__all__ = [
    "create_sqlite_engine",
    "get_engine",
    "get_session_factory",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyKeyValueStore",
]

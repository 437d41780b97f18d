"""SQLAlchemy implementation of DurableKeyValueStore."""

import asyncio
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from papertrade.core.timezone import now_utc
from papertrade.repositories.sqlalchemy.orm_models import KeyValueORM


class SqlAlchemyKeyValueStore:
    """
    SQLite-backed key-value store.

    Each call opens its own short-lived session in a worker thread so the
    event loop never blocks on disk I/O.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    async def get(self, key: str) -> Optional[str]:
        """Return the blob stored under key, or None."""
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        """Store (overwrite) the blob under key."""
        await asyncio.to_thread(self._set, key, value)

    def _get(self, key: str) -> Optional[str]:
        with self._session_factory() as db:
            orm_entry = self._find(db, key)
            return orm_entry.value if orm_entry else None

    def _set(self, key: str, value: str) -> None:
        with self._session_factory() as db:
            orm_entry = self._find(db, key)
            if orm_entry:
                orm_entry.value = value
                orm_entry.updated_at = now_utc().replace(tzinfo=None)
            else:
                db.add(
                    KeyValueORM(
                        key=key,
                        value=value,
                        updated_at=now_utc().replace(tzinfo=None),
                    )
                )
            db.commit()

    @staticmethod
    def _find(db: Session, key: str) -> Optional[KeyValueORM]:
        return db.query(KeyValueORM).filter(KeyValueORM.key == key).first()

"""SQLAlchemy ORM model definitions."""

from sqlalchemy import Column, String, DateTime, Text

from papertrade.core.timezone import now_utc
from papertrade.repositories.sqlalchemy.database import Base


class KeyValueORM(Base):
    """SQLAlchemy model for one durable key-value blob."""

    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=lambda: now_utc().replace(tzinfo=None))

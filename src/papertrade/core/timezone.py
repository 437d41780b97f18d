"""Timezone utilities. All ledger timestamps are tz-aware UTC."""

from datetime import datetime
from typing import Union

import pytz
from dateutil import parser as date_parser

UTC = pytz.UTC


def now_utc() -> datetime:
    """Return current time in UTC."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC."""
    if dt.tzinfo is None:
        # Assume naive datetime is already UTC
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse a stored timestamp and return it in UTC.

    Accepts ISO-8601 strings (``Z`` suffix included) and datetimes, which is
    what both the remote documents and the local blobs contain.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    return to_utc(date_parser.parse(value))

"""Durable key-value store protocol."""

from typing import Protocol, Optional


class DurableKeyValueStore(Protocol):
    """Interface for string blobs that survive process restarts."""

    async def get(self, key: str) -> Optional[str]:
        """Return the blob stored under key, or None."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store (overwrite) the blob under key."""
        ...

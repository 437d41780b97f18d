"""In-memory implementation of DurableKeyValueStore."""

from typing import Optional


class InMemoryKeyValueStore:
    """Dict-backed key-value store (durable only for the process lifetime)."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

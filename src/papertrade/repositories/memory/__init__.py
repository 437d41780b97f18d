"""In-memory repository implementations."""

from papertrade.repositories.memory.remote_store import InMemoryRemoteStore
from papertrade.repositories.memory.kv_store import InMemoryKeyValueStore

__all__ = [
    "InMemoryRemoteStore",
    "InMemoryKeyValueStore",
]

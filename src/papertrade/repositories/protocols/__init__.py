"""Repository protocol definitions (interfaces)."""

from papertrade.repositories.protocols.remote_store import RemoteStore
from papertrade.repositories.protocols.kv_store import DurableKeyValueStore

__all__ = [
    "RemoteStore",
    "DurableKeyValueStore",
]

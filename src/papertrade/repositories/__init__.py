"""Repository layer - data access abstractions and implementations."""

from papertrade.repositories.protocols import (
    RemoteStore,
    DurableKeyValueStore,
)

__all__ = [
    "RemoteStore",
    "DurableKeyValueStore",
]

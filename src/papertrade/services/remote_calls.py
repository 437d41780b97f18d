"""Bounded remote store calls."""

import asyncio
from typing import Awaitable, TypeVar

from papertrade.core.exceptions import RemoteStoreError, UnknownRemoteError, UnreachableError

T = TypeVar("T")


async def call_remote(awaitable: Awaitable[T], timeout: float, operation: str) -> T:
    """
    Await a remote store call with a deadline.

    Raises only RemoteStoreError subclasses: a timeout becomes UnreachableError
    and any exception outside the taxonomy becomes UnknownRemoteError.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except RemoteStoreError:
        raise
    except asyncio.TimeoutError as exc:
        raise UnreachableError(f"{operation} timed out after {timeout}s") from exc
    except Exception as exc:
        raise UnknownRemoteError(f"{operation} failed: {exc}") from exc

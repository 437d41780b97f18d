"""Connectivity observer protocol."""

from typing import Callable, Protocol

ConnectivityCallback = Callable[[bool], None]


class ConnectivityObserver(Protocol):
    """Reports network reachability changes."""

    def subscribe(self, callback: ConnectivityCallback) -> Callable[[], None]:
        """Register for online/offline changes; returns an unsubscribe function."""
        ...

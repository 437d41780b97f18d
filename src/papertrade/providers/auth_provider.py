"""Authentication provider protocol."""

from typing import Callable, Optional, Protocol

AuthCallback = Callable[[Optional[str]], None]


class AuthProvider(Protocol):
    """Source of the signed-in user id; None means signed out."""

    def current_user_id(self) -> Optional[str]:
        ...

    def subscribe(self, callback: AuthCallback) -> Callable[[], None]:
        """Register for sign-in/sign-out changes; returns an unsubscribe function."""
        ...

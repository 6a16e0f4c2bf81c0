"""
Identity provider - establishes the user the dashboard works on behalf of.
"""
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from fitdash.core.logging import get_logger

logger = get_logger(__name__)


class IdentityError(Exception):
    """Sign-in could not be completed."""


@dataclass(frozen=True)
class Identity:
    uid: str
    is_anonymous: bool = True


AuthCallback = Callable[[Optional[Identity]], None]


class IdentityProvider(ABC):
    """Abstract base class for identity providers."""

    def __init__(self):
        self._current: Optional[Identity] = None
        self._callbacks: List[AuthCallback] = []

    @property
    def current(self) -> Optional[Identity]:
        return self._current

    @abstractmethod
    async def sign_in_anonymous(self) -> Identity:
        """Sign in without credentials. Raises IdentityError on failure."""

    def on_auth_change(self, callback: AuthCallback) -> Callable[[], None]:
        """
        Register for identity changes.

        The callback is invoked immediately with the current identity
        (possibly None), then on every change.
        """
        self._callbacks.append(callback)
        callback(self._current)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def _set_current(self, identity: Optional[Identity]) -> None:
        self._current = identity
        for callback in list(self._callbacks):
            callback(identity)


class AnonymousIdentityProvider(IdentityProvider):
    """
    Local anonymous identity.

    Reuses `user_id` when configured, so a single-user deployment keeps
    addressing the same document across restarts.
    """

    def __init__(self, user_id: Optional[str] = None):
        super().__init__()
        self._user_id = user_id

    async def sign_in_anonymous(self) -> Identity:
        if self._current is not None:
            return self._current

        identity = Identity(uid=self._user_id or uuid.uuid4().hex)
        logger.info("Signed in anonymously", uid=identity.uid)
        self._set_current(identity)
        return identity

"""
Record Store - document store interface keyed by user identity.

A store supports read-once fetch, merge writes and push subscriptions.
Subscribers receive the full document (or None when it does not exist)
once on subscribe and again after every successful write to their key.
"""
import copy
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

from fitdash.core.logging import get_logger

logger = get_logger(__name__)

Document = Dict[str, Any]
ChangeCallback = Callable[[Optional[Document]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


def document_key(namespace: str, app_id: str, user_id: str) -> str:
    """Store key for one user's state document."""
    return f"{namespace}/{app_id}/users/{user_id}"


def merge_documents(existing: Optional[Document], incoming: Document) -> Document:
    """
    Merge `incoming` into `existing`.

    Mappings are merged recursively; every other value, lists included,
    replaces what was there.
    """
    merged = copy.deepcopy(existing) if existing else {}
    for key, value in incoming.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class DocumentStore(ABC):
    """Abstract base class for record store backends."""

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[ChangeCallback, ErrorCallback]]] = {}

    async def init(self) -> None:
        """Prepare the backend. Called once at startup."""

    async def dispose(self) -> None:
        """Release backend resources. Called once at shutdown."""
        self._listeners.clear()

    @abstractmethod
    async def get(self, key: str) -> Optional[Document]:
        """Read a document once; None if it does not exist."""

    @abstractmethod
    async def _write(self, key: str, data: Document, merge: bool) -> None:
        """Persist a document. Raises on failure."""

    async def set(self, key: str, data: Document, merge: bool = True) -> bool:
        """
        Write a document, merging into the stored one when `merge` is set.

        Returns:
            True on success, False if the write failed
        """
        try:
            await self._write(key, data, merge)
        except Exception as e:
            logger.error("Document write failed", key=key, error=str(e))
            return False

        logger.debug("Document written", key=key, merge=merge)
        await self._notify(key)
        return True

    async def subscribe(
        self,
        key: str,
        on_change: ChangeCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        """
        Subscribe to changes of one document.

        The current snapshot is delivered before this returns.

        Returns:
            Callable that removes the subscription
        """
        entry = (on_change, on_error)
        self._listeners.setdefault(key, []).append(entry)
        await self._deliver(key, [entry])

        def unsubscribe() -> None:
            listeners = self._listeners.get(key, [])
            if entry in listeners:
                listeners.remove(entry)

        return unsubscribe

    async def _notify(self, key: str) -> None:
        listeners = list(self._listeners.get(key, []))
        if listeners:
            await self._deliver(key, listeners)

    async def _deliver(
        self,
        key: str,
        listeners: List[Tuple[ChangeCallback, ErrorCallback]],
    ) -> None:
        try:
            snapshot = await self.get(key)
        except Exception as e:
            logger.error("Snapshot read failed", key=key, error=str(e))
            for _, on_error in listeners:
                on_error(e)
            return

        for on_change, _ in listeners:
            # Each listener gets its own copy
            on_change(copy.deepcopy(snapshot))

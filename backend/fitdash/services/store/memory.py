"""
In-process document store.
"""
import copy
from typing import Dict, Optional

from fitdash.services.store.base import Document, DocumentStore, merge_documents


class MemoryDocumentStore(DocumentStore):
    """Dictionary-backed store for local runs and tests."""

    def __init__(self, documents: Optional[Dict[str, Document]] = None):
        super().__init__()
        self._documents: Dict[str, Document] = copy.deepcopy(documents or {})

    async def get(self, key: str) -> Optional[Document]:
        document = self._documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    async def _write(self, key: str, data: Document, merge: bool) -> None:
        if merge:
            self._documents[key] = merge_documents(self._documents.get(key), data)
        else:
            self._documents[key] = copy.deepcopy(data)

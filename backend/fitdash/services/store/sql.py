"""
SQL document store - user documents as JSON rows via SQLAlchemy.
"""
from typing import Optional

from sqlalchemy import select

from fitdash.core.database import Database
from fitdash.core.logging import get_logger
from fitdash.models.document import UserDocument
from fitdash.services.store.base import Document, DocumentStore, merge_documents

logger = get_logger(__name__)


class SqlDocumentStore(DocumentStore):
    """
    Database-backed record store.

    Usage:
        store = SqlDocumentStore(Database(settings.DATABASE_URL))
        await store.init()
        await store.set(key, state.to_document())
    """

    def __init__(self, database: Database):
        super().__init__()
        self.database = database

    async def init(self) -> None:
        await self.database.init()
        logger.info("SQL document store initialized")

    async def dispose(self) -> None:
        await super().dispose()
        await self.database.dispose()

    async def get(self, key: str) -> Optional[Document]:
        async with self.database.session_factory() as session:
            result = await session.execute(
                select(UserDocument).where(UserDocument.key == key)
            )
            row = result.scalar_one_or_none()
            return dict(row.data) if row else None

    async def _write(self, key: str, data: Document, merge: bool) -> None:
        async with self.database.session_factory() as session:
            result = await session.execute(
                select(UserDocument).where(UserDocument.key == key)
            )
            row = result.scalar_one_or_none()

            if row is None:
                session.add(UserDocument(key=key, data=data))
            else:
                # Assign a new dict so the JSON column is flagged dirty
                row.data = merge_documents(row.data, data) if merge else dict(data)

            await session.commit()

"""
User document database model.
One row per record-store key, holding the whole user state as JSON.
"""
from datetime import datetime
from sqlalchemy import JSON, String, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from fitdash.core.database import Base


class UserDocument(Base):
    """Stored user state document."""

    __tablename__ = "user_documents"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    data: Mapped[dict] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

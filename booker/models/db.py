"""
SQLAlchemy ORM models for persistent storage.

Booker persists through a plain string-keyed store, so the schema is a
single key/value table.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class KeyValueEntryDB(Base):
    """
    One entry of the byte store.

    The collection and the credential each live under their own key.
    """

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntryDB(key={self.key}, size={len(self.value)})>"

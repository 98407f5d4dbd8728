"""SQLAlchemy models for the persisted draft slot."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class DraftSlot(Base):
    """One key/value slot holding a serialized in-progress expense record."""

    __tablename__ = "draft_slots"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    # Stored as raw JSON text so unreadable content can be detected on load.
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

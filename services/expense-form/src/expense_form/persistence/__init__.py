"""Persistence primitives for the draft store."""

from .database import build_session_factory, create_engine_for_url, init_db
from .models import Base, DraftSlot
from .repository import DraftSlotRepository

__all__ = [
    "Base",
    "DraftSlot",
    "DraftSlotRepository",
    "build_session_factory",
    "create_engine_for_url",
    "init_db",
]

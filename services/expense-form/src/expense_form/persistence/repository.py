"""Draft slot data access helpers."""

from __future__ import annotations

from sqlalchemy.orm import Session

from .models import DraftSlot


class DraftSlotRepository:
    """Thin repository that encapsulates persistence operations on draft slots."""

    def __init__(self, db: Session):
        self._db = db

    def get_payload(self, key: str) -> str | None:
        slot = self._db.get(DraftSlot, key)
        return None if slot is None else slot.payload

    def put_payload(self, key: str, payload: str) -> DraftSlot:
        slot = self._db.get(DraftSlot, key)
        if slot is None:
            slot = DraftSlot(key=key, payload=payload)
        else:
            slot.payload = payload
        self._db.add(slot)
        self._db.commit()
        self._db.refresh(slot)
        return slot

    def delete(self, key: str) -> bool:
        slot = self._db.get(DraftSlot, key)
        if slot is None:
            return False
        self._db.delete(slot)
        self._db.commit()
        return True

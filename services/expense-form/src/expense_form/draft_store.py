from __future__ import annotations

"""
Single-slot local draft persistence.

The store is handed an explicit storage handle (a SQLAlchemy session
factory) and the key of the slot it owns, so several forms, or several
tests, never collide on one implicit global. Loading never fails from the
caller's point of view: a missing, unreadable or corrupt slot yields the
empty template and a warning in the logs.
"""

import json
import logging
from typing import Any, Callable, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.form_settings import DEFAULT_DRAFT_KEY
from shared.observability.privacy import record_fingerprint

from .errors import DraftLoadError, DraftStorageError
from .expense_record import ExpenseRecord
from .persistence.repository import DraftSlotRepository

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


class DraftStore:
    def __init__(self, session_factory: SessionFactory, key: str = DEFAULT_DRAFT_KEY) -> None:
        if not key:
            raise ValueError("Draft store key must be a non-empty string")
        self._session_factory = session_factory
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> ExpenseRecord:
        """Return the stored draft, or the empty template when none can be read."""
        try:
            payload = self._read_payload()
        except DraftLoadError as exc:
            logger.warning({"event": "draft_load_failed", "key": self._key, "error": str(exc)})
            return ExpenseRecord.empty()

        if payload is None:
            logger.info({"event": "draft_load", "key": self._key, "outcome": "empty"})
            return ExpenseRecord.empty()

        record = ExpenseRecord.from_payload(payload)
        logger.info(
            {
                "event": "draft_load",
                "key": self._key,
                "outcome": "restored",
                "record_fingerprint": record_fingerprint(record.to_payload()),
            }
        )
        return record

    def save(self, record: ExpenseRecord) -> None:
        """Overwrite the slot with all eight fields of `record` (attachment excluded)."""
        payload = record.to_payload()
        serialized = json.dumps(payload)
        try:
            with self._session_factory() as session:
                DraftSlotRepository(session).put_payload(self._key, serialized)
        except SQLAlchemyError as exc:
            raise DraftStorageError(f"Draft could not be saved: {exc}") from exc
        logger.info({"event": "draft_saved", "key": self._key, "record_fingerprint": record_fingerprint(payload)})

    def clear(self) -> None:
        try:
            with self._session_factory() as session:
                removed = DraftSlotRepository(session).delete(self._key)
        except SQLAlchemyError as exc:
            raise DraftStorageError(f"Draft could not be cleared: {exc}") from exc
        logger.info({"event": "draft_cleared", "key": self._key, "removed": removed})

    def exists(self) -> bool:
        try:
            with self._session_factory() as session:
                return DraftSlotRepository(session).get_payload(self._key) is not None
        except SQLAlchemyError as exc:
            raise DraftLoadError(f"Draft storage is unreadable: {exc}") from exc

    def _read_payload(self) -> Dict[str, Any] | None:
        try:
            with self._session_factory() as session:
                raw = DraftSlotRepository(session).get_payload(self._key)
        except SQLAlchemyError as exc:
            raise DraftLoadError(f"Draft storage is unreadable: {exc}") from exc

        if raw is None:
            return None

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DraftLoadError(f"Draft payload is not valid JSON: {exc.msg}") from exc

        if not isinstance(payload, dict):
            raise DraftLoadError(f"Draft payload must be a JSON object, got {type(payload).__name__}")
        return payload

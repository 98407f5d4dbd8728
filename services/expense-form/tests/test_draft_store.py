from __future__ import annotations

import json
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from expense_form.draft_store import DraftStore
from expense_form.errors import DraftLoadError, DraftStorageError
from expense_form.expense_record import Attachment, ExpenseRecord
from expense_form.persistence.database import build_session_factory
from expense_form.persistence.repository import DraftSlotRepository


def _filled_record() -> ExpenseRecord:
    return ExpenseRecord(
        vendor="ACME",
        date="2024-01-01",
        bill_ref="INV-1",
        description="Supplies",
        account_code="6001",
        quantity="007",
        amount="10.50",
        taxes="",
    )


def test_load_without_draft_returns_empty_template(draft_store: DraftStore) -> None:
    record = draft_store.load()

    assert record == ExpenseRecord.empty()
    assert draft_store.exists() is False


def test_save_then_load_round_trips_all_fields(draft_store: DraftStore) -> None:
    original = _filled_record()

    draft_store.save(original)
    restored = draft_store.load()

    assert restored == original
    assert restored.quantity == "007"
    assert restored.taxes == ""


def test_draft_survives_new_engine(tmp_path: Path) -> None:
    """Draft data persists even after a new engine/session factory is created."""
    url = f"sqlite:///{tmp_path / 'persist.db'}"

    DraftStore(build_session_factory(url)).save(_filled_record())
    restored = DraftStore(build_session_factory(url)).load()

    assert restored.vendor == "ACME"


def test_last_write_wins(draft_store: DraftStore) -> None:
    draft_store.save(ExpenseRecord(vendor="First"))
    draft_store.save(ExpenseRecord(vendor="Second", amount="3"))

    restored = draft_store.load()

    assert restored.vendor == "Second"
    assert restored.amount == "3"
    assert restored.quantity == ""


def test_attachment_is_never_persisted(draft_store: DraftStore, session_factory) -> None:
    record = _filled_record()
    record.attachment = Attachment(name="receipt.png", size_bytes=2048)

    draft_store.save(record)

    with session_factory() as session:
        raw = DraftSlotRepository(session).get_payload(draft_store.key)
    stored = json.loads(raw)
    assert set(stored) == {
        "vendor",
        "date",
        "billRef",
        "description",
        "accountCode",
        "quantity",
        "amount",
        "taxes",
    }
    assert draft_store.load().attachment is None


def test_clear_removes_slot_and_is_idempotent(draft_store: DraftStore) -> None:
    draft_store.save(_filled_record())

    draft_store.clear()
    draft_store.clear()

    assert draft_store.exists() is False
    assert draft_store.load() == ExpenseRecord.empty()


def test_keys_do_not_collide(session_factory) -> None:
    first = DraftStore(session_factory, key="form:a")
    second = DraftStore(session_factory, key="form:b")

    first.save(ExpenseRecord(vendor="A"))
    second.save(ExpenseRecord(vendor="B"))
    first.clear()

    assert first.load().vendor == ""
    assert second.load().vendor == "B"


@pytest.mark.parametrize("raw_payload", ["{not json", "[1, 2, 3]", "\"just a string\"", "null"])
def test_corrupt_payload_falls_back_to_empty_template(
    draft_store: DraftStore, session_factory, raw_payload: str
) -> None:
    with session_factory() as session:
        DraftSlotRepository(session).put_payload(draft_store.key, raw_payload)

    assert draft_store.load() == ExpenseRecord.empty()


def test_partial_payload_is_completed_with_empty_strings(draft_store: DraftStore, session_factory) -> None:
    payload = {"vendor": "ACME", "quantity": 3, "unexpected": "x", "accountCode": None}
    with session_factory() as session:
        DraftSlotRepository(session).put_payload(draft_store.key, json.dumps(payload))

    record = draft_store.load()

    assert record.vendor == "ACME"
    assert record.quantity == ""
    assert record.account_code == ""
    assert record.to_payload()["billRef"] == ""


def _factory_without_tables(tmp_path: Path):
    engine = create_engine(f"sqlite:///{tmp_path / 'bare.db'}", future=True)
    return sessionmaker(bind=engine, future=True)


def test_unreadable_storage_falls_back_to_empty_template(tmp_path: Path) -> None:
    store = DraftStore(_factory_without_tables(tmp_path))

    assert store.load() == ExpenseRecord.empty()


def test_unwritable_storage_raises_storage_error(tmp_path: Path) -> None:
    store = DraftStore(_factory_without_tables(tmp_path))

    with pytest.raises(DraftStorageError):
        store.save(_filled_record())

    with pytest.raises(DraftStorageError):
        store.clear()


def test_exists_wraps_unreadable_storage(tmp_path: Path) -> None:
    store = DraftStore(_factory_without_tables(tmp_path))

    with pytest.raises(DraftLoadError) as excinfo:
        store.exists()

    assert isinstance(excinfo.value, DraftStorageError)
    assert "unreadable" in str(excinfo.value)


def test_empty_key_is_rejected(session_factory) -> None:
    with pytest.raises(ValueError):
        DraftStore(session_factory, key="")

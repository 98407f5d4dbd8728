"""Pytest configuration for expense-form tests.

Ensures the service's own src directory and the shared package are importable,
and provides storage fixtures backed by a throwaway SQLite file.
"""

import sys
from pathlib import Path

import pytest

SERVICES_ROOT = Path(__file__).resolve().parents[2]
SERVICE_SRC = Path(__file__).resolve().parents[1] / "src"

for path in (SERVICE_SRC, SERVICES_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from expense_form.draft_store import DraftStore  # noqa: E402
from expense_form.persistence.database import build_session_factory  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def session_factory(tmp_path: Path):
    return build_session_factory(f"sqlite:///{tmp_path / 'drafts.db'}")


@pytest.fixture
def draft_store(session_factory) -> DraftStore:
    return DraftStore(session_factory, key="test:draft")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()

"""Exception taxonomy for the expense form core."""

from __future__ import annotations

from typing import Iterable, Tuple


class ExpenseFormError(Exception):
    """Base class for every error raised by the form core."""


class DraftStorageError(ExpenseFormError):
    """The draft slot could not be written or removed."""


class DraftLoadError(DraftStorageError):
    """Persisted draft is unreadable or corrupt."""


class ValidationError(ExpenseFormError):
    """One or more required fields are blank."""

    def __init__(self, missing_fields: Iterable[str], *, user_message: str) -> None:
        self.missing_fields: Tuple[str, ...] = tuple(missing_fields)
        self.user_message = user_message
        super().__init__(f"Missing required fields: {', '.join(self.missing_fields)}")


class SubmissionError(ExpenseFormError):
    """The submission collaborator could not deliver the record."""

    def __init__(self, message: str, *, provider: str | None = None, retryable: bool = False) -> None:
        super().__init__(message)
        self.provider = provider
        self.retryable = retryable

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from .errors import ValidationError
from .expense_record import REQUIRED_FIELDS, ExpenseRecord

GENERIC_VALIDATION_MESSAGE = "Please fill all required fields."


@dataclass(frozen=True)
class ValidationResult:
    missing_fields: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.missing_fields

    def __bool__(self) -> bool:
        return self.ok

    @property
    def message(self) -> str | None:
        """User-facing message, identical whichever fields are missing."""
        return None if self.ok else GENERIC_VALIDATION_MESSAGE


def validate_record(
    record: ExpenseRecord,
    required_fields: Iterable[str] = REQUIRED_FIELDS,
) -> ValidationResult:
    """
    Check that every required field is non-blank after trimming.

    Args:
        record: Record to inspect; it is never mutated.
        required_fields: Attribute names to check, in reporting order.
    Returns:
        ValidationResult whose `missing_fields` keeps the order of `required_fields`.
    """
    missing = tuple(name for name in required_fields if not str(getattr(record, name)).strip())
    return ValidationResult(missing_fields=missing)


def require_complete(record: ExpenseRecord) -> None:
    """Raise ValidationError naming the blank fields, if any."""
    result = validate_record(record)
    if not result.ok:
        raise ValidationError(result.missing_fields, user_message=result.message)

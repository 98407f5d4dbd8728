from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from .numeric import round_half_up

# Attribute name -> persisted/wire key.
FIELD_KEYS: Dict[str, str] = {
    "vendor": "vendor",
    "date": "date",
    "bill_ref": "billRef",
    "description": "description",
    "account_code": "accountCode",
    "quantity": "quantity",
    "amount": "amount",
    "taxes": "taxes",
}
REQUIRED_FIELDS: Tuple[str, ...] = tuple(FIELD_KEYS)
NUMERIC_FIELDS: Tuple[str, ...] = ("quantity", "amount", "taxes")
FIELD_LABELS: Dict[str, str] = {
    "vendor": "Vendor",
    "date": "Date",
    "bill_ref": "Bill Reference",
    "description": "Description",
    "account_code": "Account Code",
    "quantity": "Quantity",
    "amount": "Amount",
    "taxes": "Taxes",
}

_WIRE_TO_ATTRIBUTE = {wire: attribute for attribute, wire in FIELD_KEYS.items()}


@dataclass(frozen=True, slots=True)
class Attachment:
    """Receipt image picked by the user; only its presence matters to the form."""

    name: str
    size_bytes: int
    content_type: str | None = None
    content: bytes | None = None

    @property
    def size_label(self) -> str:
        return f"{round_half_up(self.size_bytes / 1024, 0)} KB"


@dataclass
class ExpenseRecord:
    """
    The single expense/receipt entity edited by the form.

    Numeric fields stay text so partial input ("1.", "007") survives editing.
    The attachment rides along in memory but is never part of `to_payload()`.
    """

    vendor: str = ""
    date: str = ""
    bill_ref: str = ""
    description: str = ""
    account_code: str = ""
    quantity: str = ""
    amount: str = ""
    taxes: str = ""
    attachment: Attachment | None = None

    @classmethod
    def empty(cls) -> "ExpenseRecord":
        return cls()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ExpenseRecord":
        """
        Build a record from a stored payload, keeping the eight-field invariant.

        Unknown keys are ignored; missing or non-string values become "".
        Both wire (camelCase) and attribute (snake_case) keys are accepted.
        """
        values: Dict[str, str] = {}
        for key, value in payload.items():
            attribute = resolve_field(key)
            if attribute is None or not isinstance(value, str):
                continue
            values[attribute] = value
        return cls(**values)

    def to_payload(self) -> Dict[str, str]:
        return {wire: getattr(self, attribute) for attribute, wire in FIELD_KEYS.items()}

    def get(self, key: str) -> str:
        attribute = resolve_field(key)
        if attribute is None:
            raise KeyError(key)
        return getattr(self, attribute)


def resolve_field(key: str) -> str | None:
    """Map an attribute or wire key to the attribute name, or None when unknown."""
    if key in FIELD_KEYS:
        return key
    return _WIRE_TO_ATTRIBUTE.get(key)


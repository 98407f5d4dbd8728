import pytest

from expense_form.expense_record import Attachment, ExpenseRecord


@pytest.mark.parametrize(
    ("size_bytes", "expected"),
    [
        (0, "0 KB"),
        (512, "1 KB"),
        (1536, "2 KB"),
        (2560, "3 KB"),
        (2559, "2 KB"),
        (1048576, "1024 KB"),
    ],
)
def test_attachment_size_label_rounds_half_kilobytes_up(size_bytes: int, expected: str) -> None:
    attachment = Attachment(name="r.png", size_bytes=size_bytes)

    assert attachment.size_label == expected


def test_from_payload_accepts_wire_and_attribute_keys() -> None:
    record = ExpenseRecord.from_payload({"billRef": "INV-1", "account_code": "6001", "bogus": "x", "vendor": 7})

    assert record.bill_ref == "INV-1"
    assert record.account_code == "6001"
    assert record.vendor == ""
    assert record.to_payload()["accountCode"] == "6001"

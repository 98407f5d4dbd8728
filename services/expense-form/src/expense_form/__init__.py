"""
Expense/receipt form core: record state, draft persistence, validation,
submission and toast feedback.
"""

from .bootstrap import build_form_controller
from .draft_store import DraftStore
from .errors import (
    DraftLoadError,
    DraftStorageError,
    ExpenseFormError,
    SubmissionError,
    ValidationError,
)
from .expense_record import FIELD_KEYS, FIELD_LABELS, NUMERIC_FIELDS, REQUIRED_FIELDS, Attachment, ExpenseRecord
from .form_controller import ExpenseFormController, SubmissionPhase, compute_estimated_total
from .notifications import Notification, NotificationChannel, NotificationKind
from .numeric import format_amount, to_number
from .submission_provider import (
    HttpSubmissionProvider,
    SimulatedSubmissionProvider,
    SubmissionProvider,
    SubmissionReceipt,
    SubmissionRequest,
    build_submission_provider,
)
from .validation import GENERIC_VALIDATION_MESSAGE, ValidationResult, require_complete, validate_record

__all__ = [
    "Attachment",
    "DraftLoadError",
    "DraftStorageError",
    "DraftStore",
    "ExpenseFormController",
    "ExpenseFormError",
    "ExpenseRecord",
    "FIELD_KEYS",
    "FIELD_LABELS",
    "GENERIC_VALIDATION_MESSAGE",
    "HttpSubmissionProvider",
    "NUMERIC_FIELDS",
    "Notification",
    "NotificationChannel",
    "NotificationKind",
    "REQUIRED_FIELDS",
    "SimulatedSubmissionProvider",
    "SubmissionError",
    "SubmissionPhase",
    "SubmissionProvider",
    "SubmissionReceipt",
    "SubmissionRequest",
    "ValidationError",
    "ValidationResult",
    "build_form_controller",
    "build_submission_provider",
    "compute_estimated_total",
    "format_amount",
    "require_complete",
    "to_number",
    "validate_record",
]

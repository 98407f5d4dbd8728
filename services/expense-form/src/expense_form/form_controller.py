from __future__ import annotations

"""
Form state & draft-lifecycle controller.

Owns the live ExpenseRecord and mediates between field edits, the draft
store, validation, the submission provider and the notification channel.

Submission runs through a small state machine:

    IDLE -> VALIDATING -> IDLE (validation failed, error toast)
                       -> SUBMITTING -> SUBMITTED -> IDLE

While SUBMITTING, `can_submit` is False and further `submit()` calls are
ignored; that is the only re-entrancy guard. A successful submission clears
the persisted draft but leaves the in-memory record and attachment as they
were, so the user still sees what was sent.
"""

import logging
from enum import Enum
from typing import Optional

from shared.observability.privacy import field_presence, record_fingerprint
from shared.observability.telemetry import get_tracer, submission_context

from .draft_store import DraftStore
from .errors import DraftStorageError, SubmissionError, ValidationError
from .expense_record import NUMERIC_FIELDS, Attachment, ExpenseRecord, resolve_field
from .notifications import NotificationChannel
from .numeric import format_amount, to_number
from .submission_provider import SubmissionProvider, SubmissionReceipt, SubmissionRequest
from .validation import require_complete

logger = logging.getLogger(__name__)

DRAFT_SAVED_MESSAGE = "Draft saved locally."
DRAFT_SAVE_FAILED_MESSAGE = "Could not save the draft."
SUBMITTED_MESSAGE = "Expense submitted."
# Wire keys that are safe to log verbatim.
SAFE_LOG_KEYS = frozenset({"date", "accountCode"})


class SubmissionPhase(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


def compute_estimated_total(record: ExpenseRecord) -> str:
    """quantity * amount + taxes, each coerced from text, with two decimals."""
    quantity = to_number(record.quantity)
    amount = to_number(record.amount)
    taxes = to_number(record.taxes)
    return format_amount(quantity * amount + taxes)


class ExpenseFormController:
    def __init__(
        self,
        draft_store: DraftStore,
        submission_provider: SubmissionProvider,
        notifications: Optional[NotificationChannel] = None,
    ) -> None:
        self._draft_store = draft_store
        self._submission_provider = submission_provider
        self._notifications = notifications or NotificationChannel()
        self._record = ExpenseRecord.empty()
        self._total = compute_estimated_total(self._record)
        self._phase = SubmissionPhase.IDLE

    @property
    def record(self) -> ExpenseRecord:
        return self._record

    @property
    def notifications(self) -> NotificationChannel:
        return self._notifications

    @property
    def phase(self) -> SubmissionPhase:
        return self._phase

    @property
    def can_submit(self) -> bool:
        return self._phase is not SubmissionPhase.SUBMITTING

    @property
    def estimated_total(self) -> str:
        return self._total

    @property
    def has_attachment(self) -> bool:
        return self._record.attachment is not None

    def initialize(self) -> ExpenseRecord:
        """Load the persisted draft, or start from the empty template."""
        try:
            record = self._draft_store.load()
        except Exception:  # noqa: BLE001 - a form must always open
            logger.exception({"event": "form_initialize_failed", "draft_key": self._draft_store.key})
            record = ExpenseRecord.empty()

        # Attachments are never restored from a draft.
        record.attachment = None
        self._record = record
        self._total = compute_estimated_total(record)
        self._phase = SubmissionPhase.IDLE
        return record

    def update_field(self, key: str, value: str) -> None:
        attribute = resolve_field(key)
        if attribute is None:
            raise KeyError(f"Unknown expense field '{key}'")

        setattr(self._record, attribute, "" if value is None else str(value))
        if attribute in NUMERIC_FIELDS:
            self._total = compute_estimated_total(self._record)

    def compute_total(self) -> str:
        return compute_estimated_total(self._record)

    def set_attachment(self, attachment: Optional[Attachment]) -> None:
        self._record.attachment = attachment

    def clear_attachment(self) -> None:
        self._record.attachment = None

    def save(self) -> bool:
        """Persist the current record as the draft; no validation is applied."""
        try:
            self._draft_store.save(self._record)
        except DraftStorageError as exc:
            logger.error({"event": "draft_save_failed", "error": str(exc)})
            self._notifications.error(DRAFT_SAVE_FAILED_MESSAGE)
            return False

        self._notifications.success(DRAFT_SAVED_MESSAGE)
        return True

    async def submit(self) -> Optional[SubmissionReceipt]:
        """
        Validate and submit the current record.

        Returns:
            The provider's receipt on success; None when validation failed,
            the provider raised SubmissionError, or a submission was already
            in flight.
        """
        if not self.can_submit:
            logger.warning({"event": "submit_ignored", "reason": "already_submitting"})
            return None

        self._phase = SubmissionPhase.VALIDATING
        try:
            require_complete(self._record)
        except ValidationError as exc:
            self._phase = SubmissionPhase.IDLE
            logger.info({"event": "submit_rejected", "missing_fields": list(exc.missing_fields)})
            self._notifications.error(exc.user_message)
            return None

        payload = self._record.to_payload()
        request = SubmissionRequest(payload=payload, attachment=self._record.attachment)
        provider_name = self._submission_provider.name
        self._phase = SubmissionPhase.SUBMITTING
        try:
            with submission_context(draft_key=self._draft_store.key, provider=provider_name) as context:
                with get_tracer().start_as_current_span("expense_form.submit") as span:
                    span.set_attribute("expense_form.request_id", context.request_id)
                    span.set_attribute("expense_form.provider", provider_name)
                    span.set_attribute("expense_form.has_attachment", request.has_attachment)
                    logger.info(
                        {
                            "event": "submit_started",
                            "fields": field_presence(payload, SAFE_LOG_KEYS),
                            "record_fingerprint": record_fingerprint(payload),
                        }
                    )
                    receipt = await self._submission_provider.submit(request)
        except SubmissionError as exc:
            self._phase = SubmissionPhase.IDLE
            logger.error(
                {
                    "event": "submit_failed",
                    "provider": exc.provider or provider_name,
                    "retryable": exc.retryable,
                    "error": str(exc),
                }
            )
            self._notifications.error(str(exc))
            return None
        except Exception:
            self._phase = SubmissionPhase.IDLE
            raise

        self._phase = SubmissionPhase.SUBMITTED
        self._notifications.success(SUBMITTED_MESSAGE)
        try:
            self._draft_store.clear()
        except DraftStorageError as exc:
            logger.warning({"event": "draft_clear_failed", "error": str(exc)})
        self._phase = SubmissionPhase.IDLE
        logger.info({"event": "submit_completed", "submission_id": receipt.submission_id})
        return receipt

    def field_value(self, key: str) -> str:
        return self._record.get(key)

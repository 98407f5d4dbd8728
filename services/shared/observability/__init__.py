"""
Shared observability helpers (telemetry, privacy utilities, etc.).

The form core and the Streamlit shell import from this package to get
consistent instrumentation and logging guardrails.
"""

from .privacy import field_presence, record_fingerprint
from .telemetry import (
    CORRELATION_ID_HEADER,
    SubmissionContext,
    SubmissionLogFilter,
    TelemetryOptions,
    current_submission,
    get_tracer,
    setup_telemetry,
    submission_context,
)

__all__ = [
    "field_presence",
    "record_fingerprint",
    "CORRELATION_ID_HEADER",
    "SubmissionContext",
    "SubmissionLogFilter",
    "TelemetryOptions",
    "current_submission",
    "get_tracer",
    "setup_telemetry",
    "submission_context",
]

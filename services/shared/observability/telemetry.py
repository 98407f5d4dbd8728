"""
Logging and tracing bootstrap for the expense form.

Every log line is a JSON object carrying the service name. While a submission
is in flight its correlation data (request id, draft key and provider) is
bound through `submission_context`, and the log filter copies it onto each
record emitted inside that block, including the ones from the HTTP client.
OpenTelemetry tracing and httpx instrumentation are opt-in via
ENABLE_TELEMETRY.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator
from uuid import uuid4

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from pythonjsonlogger import jsonlogger

CORRELATION_ID_HEADER = "x-request-id"
TRACER_NAME = "expense_form"
DEFAULT_OTLP_ENDPOINT = "http://localhost:4318/v1/traces"
LOG_RECORD_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "service_name",
    "request_id",
    "draft_key",
    "submission_provider",
    "trace_id",
    "span_id",
)

_installed: set[str] = set()


@dataclass(frozen=True)
class SubmissionContext:
    request_id: str
    draft_key: str | None = None
    provider: str | None = None


_submission_ctx: ContextVar[SubmissionContext | None] = ContextVar("expense_form_submission", default=None)


@dataclass(frozen=True)
class TelemetryOptions:
    service_name: str
    traces_enabled: bool = False
    console_export: bool = False
    otlp_endpoint: str = DEFAULT_OTLP_ENDPOINT

    @classmethod
    def from_env(cls, service_name: str) -> "TelemetryOptions":
        return cls(
            service_name=os.getenv("OTEL_SERVICE_NAME", service_name),
            traces_enabled=_env_flag("ENABLE_TELEMETRY"),
            console_export=_env_flag("OTEL_CONSOLE_EXPORT"),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT),
        )


def setup_telemetry(service_name: str, options: TelemetryOptions | None = None) -> TelemetryOptions:
    """
    Install JSON logging and, when enabled, tracing for the running process.

    Streamlit re-executes the page script on every interaction, so each piece
    is installed at most once per process and later calls are no-ops.

    Args:
        service_name: Identifier stamped on log records and OTLP resources.
            OTEL_SERVICE_NAME overrides it when options come from the environment.
        options: Explicit options; read from the environment when omitted.
    Returns:
        The options that were applied.
    """
    options = options or TelemetryOptions.from_env(service_name)

    if "logging" not in _installed:
        handler = logging.StreamHandler()
        handler.setFormatter(jsonlogger.JsonFormatter(" ".join(f"%({name})s" for name in LOG_RECORD_FIELDS)))
        handler.addFilter(SubmissionLogFilter(options.service_name, traces_enabled=options.traces_enabled))
        logging.basicConfig(level=logging.INFO, handlers=[handler], force=True)
        _installed.add("logging")

    if options.traces_enabled and "tracing" not in _installed:
        _install_tracer_provider(options)
        HTTPXClientInstrumentor().instrument()
        LoggingInstrumentor().instrument(set_logging_format=False)
        _installed.add("tracing")

    return options


def get_tracer() -> trace.Tracer:
    """Tracer for form spans; a no-op tracer until tracing is installed."""
    return trace.get_tracer(TRACER_NAME)


@contextmanager
def submission_context(
    *,
    draft_key: str | None = None,
    provider: str | None = None,
    request_id: str | None = None,
) -> Iterator[SubmissionContext]:
    """
    Bind one submission's correlation data for the duration of the block.

    A request id is generated (prefixed with REQUEST_ID_PREFIX, if set) unless
    one is given. The previous binding is restored on exit.
    """
    context = SubmissionContext(
        request_id=request_id or os.getenv("REQUEST_ID_PREFIX", "") + uuid4().hex,
        draft_key=draft_key,
        provider=provider,
    )
    token = _submission_ctx.set(context)
    try:
        yield context
    finally:
        _submission_ctx.reset(token)


def current_submission() -> SubmissionContext | None:
    return _submission_ctx.get()


class SubmissionLogFilter(logging.Filter):
    """Copy the service name, the bound submission and the active span ids onto records."""

    def __init__(self, service_name: str, *, traces_enabled: bool = False) -> None:
        super().__init__()
        self._service_name = service_name
        self._traces_enabled = traces_enabled

    def filter(self, record: logging.LogRecord) -> bool:
        context = _submission_ctx.get()
        record.service_name = self._service_name
        record.request_id = context.request_id if context else None
        record.draft_key = context.draft_key if context else None
        record.submission_provider = context.provider if context else None
        record.trace_id, record.span_id = _active_span_ids() if self._traces_enabled else (None, None)
        return True


def _active_span_ids() -> tuple[str | None, str | None]:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None, None
    return format(span_context.trace_id, "032x"), format(span_context.span_id, "016x")


def _install_tracer_provider(options: TelemetryOptions) -> None:
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: options.service_name}))
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=options.otlp_endpoint)))
    if options.console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in {"1", "true", "yes", "on"}

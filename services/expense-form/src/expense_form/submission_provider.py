from __future__ import annotations

"""
Provider abstraction for delivering a completed expense record.

The form only depends on the `SubmissionProvider` protocol: an async
`submit` that either returns a receipt or raises `SubmissionError`. The
default simulated provider reproduces the fixed-latency stub the form
shipped with; the HTTP provider is the drop-in real transport.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, runtime_checkable
from uuid import uuid4

import httpx

from shared.form_settings import FormSettings, HttpSubmissionConfig
from shared.observability.privacy import record_fingerprint
from shared.observability.telemetry import current_submission, submission_context

from .errors import SubmissionError
from .expense_record import Attachment
from .http_client import ResilientHttpClient

logger = logging.getLogger(__name__)

DEFAULT_SIMULATED_LATENCY_SECONDS = 0.8


@dataclass(slots=True)
class SubmissionRequest:
    """
    Contract for submission inputs.

    Attributes:
        payload: The eight record fields keyed by their wire names.
        attachment: Optional receipt image chosen by the user.
    """

    payload: Dict[str, str]
    attachment: Optional[Attachment] = None

    @property
    def has_attachment(self) -> bool:
        return self.attachment is not None


@dataclass(slots=True)
class SubmissionReceipt:
    submission_id: str
    provider: str
    submitted_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


@runtime_checkable
class SubmissionProvider(Protocol):
    """
    Interface for swappable submission transports.

    Implementations expose a descriptive `name` and an async `submit` that
    raises SubmissionError on any delivery failure.
    """

    name: str

    async def submit(self, request: SubmissionRequest) -> SubmissionReceipt:
        ...


class SimulatedSubmissionProvider:
    """Waits a fixed latency and always succeeds; stands in for a real backend."""

    name = "simulated"

    def __init__(self, latency_seconds: float = DEFAULT_SIMULATED_LATENCY_SECONDS) -> None:
        self._latency_seconds = max(0.0, latency_seconds)

    async def submit(self, request: SubmissionRequest) -> SubmissionReceipt:
        await asyncio.sleep(self._latency_seconds)
        receipt = SubmissionReceipt(submission_id=str(uuid4()), provider=self.name)
        _log_submission(self.name, request, receipt)
        return receipt


class HttpSubmissionProvider:
    """
    Posts the record to a remote endpoint.

    Records without attachment bytes are sent as JSON; with bytes, as
    multipart with the record serialized in a `record` form field and the
    image under `receipt`. The endpoint may answer with `{"id": ...}`; a
    locally generated id is used otherwise.
    """

    name = "http"

    def __init__(self, config: HttpSubmissionConfig, *, client: ResilientHttpClient | None = None) -> None:
        self._config = config
        self._client = client or ResilientHttpClient(
            timeout=config.timeout_seconds,
            max_attempts=config.max_attempts,
        )

    async def submit(self, request: SubmissionRequest) -> SubmissionReceipt:
        context = current_submission()
        if context is None:
            with submission_context(provider=self.name) as context:
                return await self._send(request, context.request_id)
        return await self._send(request, context.request_id)

    async def _send(self, request: SubmissionRequest, request_id: str) -> SubmissionReceipt:
        try:
            response, _metrics = await self._client.post(
                self._config.url,
                request_id=request_id,
                **_build_request_kwargs(request),
            )
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise SubmissionError(
                f"Submission was rejected ({status}).",
                provider=self.name,
                retryable=status >= 500,
            ) from exc
        except httpx.RequestError as exc:
            raise SubmissionError(
                "Could not reach the submission service.",
                provider=self.name,
                retryable=True,
            ) from exc

        receipt = SubmissionReceipt(
            submission_id=_extract_submission_id(response) or request_id,
            provider=self.name,
        )
        _log_submission(self.name, request, receipt)
        return receipt


def _build_request_kwargs(request: SubmissionRequest) -> Dict[str, Any]:
    attachment = request.attachment
    if attachment is None or attachment.content is None:
        body: Dict[str, Any] = dict(request.payload)
        if attachment is not None:
            body["attachment"] = {"name": attachment.name, "sizeBytes": attachment.size_bytes}
        return {"json": body}

    return {
        "data": {"record": json.dumps(request.payload)},
        "files": {
            "receipt": (
                attachment.name,
                attachment.content,
                attachment.content_type or "application/octet-stream",
            )
        },
    }


def _extract_submission_id(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("id") is not None:
        return str(data["id"])
    return None


def build_submission_provider(
    name: str | None,
    *,
    settings: Optional[FormSettings] = None,
) -> SubmissionProvider:
    """
    Factory that instantiates the requested submission provider implementation.
    """

    normalized = (name or "").strip().lower()
    if normalized in ("", "simulated"):
        latency = settings.submit_latency_seconds if settings else DEFAULT_SIMULATED_LATENCY_SECONDS
        return SimulatedSubmissionProvider(latency_seconds=latency)
    if normalized == "http":
        if settings is None or settings.http is None:
            raise ValueError("The http submission provider requires HTTP settings")
        return HttpSubmissionProvider(settings.http)

    raise ValueError(f"Unsupported submission provider '{name}'")


def _log_submission(provider_name: str, request: SubmissionRequest, receipt: SubmissionReceipt) -> None:
    logger.info(
        {
            "event": "submission_provider_output",
            "provider": provider_name,
            "submission_id": receipt.submission_id,
            "record_fingerprint": record_fingerprint(request.payload),
            "has_attachment": request.has_attachment,
        }
    )

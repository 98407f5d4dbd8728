import asyncio
import logging
import random
import time
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

import httpx
from shared.observability.telemetry import CORRELATION_ID_HEADER

logger = logging.getLogger(__name__)
DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_FACTOR = 0.5
RETRYABLE_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}


@dataclass
class RequestMetrics:
    attempts: int
    latency_ms: float


class ResilientHttpClient:
    """Async httpx helper used for submissions: retries, timeouts, correlation ids."""

    def __init__(
        self,
        *,
        timeout: httpx.Timeout | float = DEFAULT_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        correlation_header: str = CORRELATION_ID_HEADER,
        retry_status_codes: set[int] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._max_attempts = max(1, max_attempts)
        self._backoff_factor = max(0.0, backoff_factor)
        self._correlation_header = correlation_header
        self._retry_status_codes = retry_status_codes or RETRYABLE_STATUS_CODES
        self._transport = transport

    async def post(
        self,
        url: str,
        *,
        request_id: str,
        headers: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> tuple[httpx.Response, RequestMetrics]:
        """
        POST with retries on transport errors and retryable status codes.

        Non-retryable failures, and the last retryable one, are re-raised as the
        original httpx exception so callers can translate them.
        """
        attempts = 0
        start_time = time.perf_counter()

        while True:
            attempts += 1
            request_headers = self._build_headers(headers, request_id)

            try:
                async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                    response = await client.post(url, headers=request_headers, **kwargs)
                response.raise_for_status()
            except (httpx.HTTPStatusError, httpx.RequestError) as exc:
                metrics = self._metrics(start_time, attempts)
                if self._should_retry(exc) and attempts < self._max_attempts:
                    self._log("retry", url, request_id, metrics, error=str(exc))
                    await asyncio.sleep(self._backoff_seconds(attempts))
                    continue
                self._log("failure", url, request_id, metrics, error=str(exc))
                raise

            metrics = self._metrics(start_time, attempts)
            self._log("success", url, request_id, metrics, status_code=response.status_code)
            return response, metrics

    def _build_headers(
        self,
        headers: Mapping[str, str] | None,
        request_id: str,
    ) -> MutableMapping[str, str]:
        merged: MutableMapping[str, str] = {}
        if headers:
            merged.update(headers)
        merged.setdefault(self._correlation_header, request_id)
        return merged

    def _metrics(self, start_time: float, attempts: int) -> RequestMetrics:
        latency_ms = (time.perf_counter() - start_time) * 1000
        return RequestMetrics(attempts=attempts, latency_ms=round(latency_ms, 2))

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            return status >= 500 or status in self._retry_status_codes
        return isinstance(exc, httpx.RequestError)

    def _backoff_seconds(self, attempts: int) -> float:
        base = self._backoff_factor * (2 ** (attempts - 1))
        jitter = random.uniform(0, base / 2 if base else 0)
        return base + jitter

    def _log(self, outcome: str, url: str, request_id: str, metrics: RequestMetrics, **extra: Any) -> None:
        level = {"success": logging.INFO, "retry": logging.WARNING}.get(outcome, logging.ERROR)
        logger.log(
            level,
            {
                "event": "submission_http_request",
                "outcome": outcome,
                "url": url,
                "request_id": request_id,
                "attempts": metrics.attempts,
                "latency_ms": metrics.latency_ms,
                **extra,
            },
        )

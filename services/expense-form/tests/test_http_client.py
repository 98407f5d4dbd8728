import httpx
import pytest
from expense_form.http_client import ResilientHttpClient
from shared.observability.telemetry import CORRELATION_ID_HEADER


@pytest.mark.anyio
async def test_resilient_http_client_successful_post_injects_request_id() -> None:
    captured_headers: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured_headers.update(request.headers)
        return httpx.Response(201, json={"id": "exp-1"})

    client = ResilientHttpClient(max_attempts=1, backoff_factor=0, transport=httpx.MockTransport(handler))

    response, metrics = await client.post("https://example.org/expenses", request_id="req-123", json={"vendor": "ACME"})

    assert response.status_code == 201
    assert response.json() == {"id": "exp-1"}
    assert captured_headers.get(CORRELATION_ID_HEADER) == "req-123"
    assert metrics.attempts == 1
    assert metrics.latency_ms >= 0


@pytest.mark.anyio
async def test_resilient_http_client_keeps_explicit_correlation_header() -> None:
    captured_headers: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured_headers.update(request.headers)
        return httpx.Response(200)

    client = ResilientHttpClient(max_attempts=1, backoff_factor=0, transport=httpx.MockTransport(handler))

    await client.post(
        "https://example.org/expenses",
        request_id="generated",
        headers={CORRELATION_ID_HEADER: "from-caller"},
    )

    assert captured_headers.get(CORRELATION_ID_HEADER) == "from-caller"


@pytest.mark.anyio
async def test_resilient_http_client_retries_on_retryable_status() -> None:
    call_count = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        if call_count < 2:
            return httpx.Response(503, json={"error": "temporary"})
        return httpx.Response(200, json={"status": "ok"})

    client = ResilientHttpClient(max_attempts=3, backoff_factor=0, transport=httpx.MockTransport(handler))

    response, metrics = await client.post("https://example.org/retry", request_id="req-456")

    assert response.status_code == 200
    assert metrics.attempts == 2


@pytest.mark.anyio
async def test_resilient_http_client_does_not_retry_client_errors() -> None:
    call_count = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        return httpx.Response(422, json={"error": "invalid"})

    client = ResilientHttpClient(max_attempts=3, backoff_factor=0, transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.HTTPStatusError):
        await client.post("https://example.org/invalid", request_id="req-422")

    assert call_count == 1


@pytest.mark.anyio
async def test_resilient_http_client_raises_after_request_errors() -> None:
    call_count = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        raise httpx.ConnectError("boom", request=request)

    client = ResilientHttpClient(max_attempts=2, backoff_factor=0, transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.RequestError):
        await client.post("https://example.org/fail", request_id="req-789")

    assert call_count == 2

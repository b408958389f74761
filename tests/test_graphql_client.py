"""
GraphQL Client Test Suite.

Uses ``httpx.MockTransport`` as the fake GitHub endpoint and a recording sleep
so that rate limit waits complete immediately.
"""

import json
import time
from unittest.mock import AsyncMock

import httpx
import pytest
from tenacity import RetryError

from miners.graphql_client import (
    GraphQLClient,
    ProtocolError,
    RateLimitExhaustedError,
    TransportError,
)

URL = "https://api.github.test/graphql"


def make_client(responses, requests, sleep=None, **kwargs):
    """Build a client whose transport replays ``responses`` in order."""
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return queue.pop(0)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GraphQLClient(
        "secret-token",
        url=URL,
        client=http_client,
        sleep=sleep or AsyncMock(),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_execute_returns_data():
    """Test a successful query returns the data payload."""
    requests = []
    client = make_client(
        [httpx.Response(200, json={"data": {"viewer": {"login": "alice"}}})], requests
    )

    data = await client.execute("query { viewer { login } }", {"a": 1})

    assert data == {"viewer": {"login": "alice"}}
    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert request.headers["Authorization"] == "Bearer secret-token"
    assert json.loads(request.content) == {
        "query": "query { viewer { login } }",
        "variables": {"a": 1},
    }


@pytest.mark.asyncio
async def test_rate_limit_retries_once_with_hint():
    """Test a 429 with a 2 second hint is retried once with the same payload."""
    requests = []
    sleep = AsyncMock()
    client = make_client(
        [
            httpx.Response(429, headers={"Retry-After": "2"}),
            httpx.Response(200, json={"data": {"ok": True}}),
        ],
        requests,
        sleep=sleep,
    )

    data = await client.execute("query { ok }", {"owner": "test"})

    assert data == {"ok": True}
    assert len(requests) == 2
    assert requests[0].content == requests[1].content
    sleep.assert_awaited_once_with(2.0)


@pytest.mark.asyncio
async def test_rate_limit_without_hint_uses_default():
    requests = []
    sleep = AsyncMock()
    client = make_client(
        [httpx.Response(429), httpx.Response(200, json={"data": {}})],
        requests,
        sleep=sleep,
    )

    await client.execute("query { ok }")

    sleep.assert_awaited_once_with(60.0)


@pytest.mark.asyncio
async def test_primary_rate_limit_waits_until_reset():
    """Test a 403 with exhausted quota waits for the reset time."""
    requests = []
    sleep = AsyncMock()
    reset = int(time.time()) + 30
    client = make_client(
        [
            httpx.Response(
                403,
                headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": str(reset)},
            ),
            httpx.Response(200, json={"data": {"ok": True}}),
        ],
        requests,
        sleep=sleep,
    )

    await client.execute("query { ok }")

    waited = sleep.await_args.args[0]
    assert 0 < waited <= 30
    assert len(requests) == 2


@pytest.mark.asyncio
async def test_rate_limit_ceiling_raises():
    requests = []
    sleep = AsyncMock()
    client = make_client(
        [httpx.Response(429, headers={"Retry-After": "1"}) for _ in range(3)],
        requests,
        sleep=sleep,
        max_retries=2,
    )

    with pytest.raises(RateLimitExhaustedError):
        await client.execute("query { ok }")

    assert len(requests) == 3
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_http_error_raises_transport_error():
    requests = []
    client = make_client([httpx.Response(502)], requests)

    with pytest.raises(TransportError) as exc_info:
        await client.execute("query { ok }")

    assert exc_info.value.status_code == 502
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_forbidden_without_rate_limit_is_transport_error():
    requests = []
    client = make_client(
        [httpx.Response(403, headers={"X-RateLimit-Remaining": "42"})], requests
    )

    with pytest.raises(TransportError):
        await client.execute("query { ok }")


@pytest.mark.asyncio
async def test_graphql_errors_raise_protocol_error():
    requests = []
    errors = [{"type": "NOT_FOUND", "message": "Could not resolve to a Repository"}]
    client = make_client(
        [httpx.Response(200, json={"data": {"repository": None}, "errors": errors})],
        requests,
    )

    with pytest.raises(ProtocolError) as exc_info:
        await client.execute("query { ok }")

    assert exc_info.value.errors == errors


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = GraphQLClient(
        "secret-token",
        url=URL,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(TransportError) as exc_info:
        await client.execute("query { ok }")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_rate_limit_retries_are_driven_by_tenacity():
    """Test the exhausted error chains tenacity's RetryError and reports the ceiling."""
    requests = []
    sleep = AsyncMock()
    client = make_client(
        [httpx.Response(429, headers={"Retry-After": "3"}) for _ in range(2)],
        requests,
        sleep=sleep,
        max_retries=1,
    )

    with pytest.raises(RateLimitExhaustedError) as exc_info:
        await client.execute("query { ok }")

    assert isinstance(exc_info.value.__cause__, RetryError)
    assert exc_info.value.attempts == 1
    sleep.assert_awaited_once_with(3.0)


@pytest.mark.asyncio
async def test_no_retries_allowed_fails_on_first_rate_limit():
    requests = []
    sleep = AsyncMock()
    client = make_client([httpx.Response(429)], requests, sleep=sleep, max_retries=0)

    with pytest.raises(RateLimitExhaustedError):
        await client.execute("query { ok }")

    assert len(requests) == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_non_object_body_raises_protocol_error():
    requests = []
    client = make_client([httpx.Response(200, json=["unexpected"])], requests)

    with pytest.raises(ProtocolError):
        await client.execute("query { ok }")

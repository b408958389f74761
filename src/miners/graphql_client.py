"""
GitHub GraphQL Client Module.

Executes authenticated GraphQL queries against the GitHub API using a
long-lived ``httpx.AsyncClient``. Rate limited responses are retried after the
server supplied wait hint; every other failure is surfaced as a typed error and
is fatal for the run.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from config import logger


class GraphQLClientError(Exception):
    """Base error for GraphQL query execution failures."""


class TransportError(GraphQLClientError):
    """Raised for non-2xx responses (other than rate limiting) and network failures."""

    def __init__(self, status_code: Optional[int], reason: str):
        self.status_code = status_code
        self.reason = reason
        if status_code is None:
            super().__init__(f"GitHub API transport error: {reason}")
        else:
            super().__init__(f"GitHub API error: {status_code} {reason}")


class ProtocolError(GraphQLClientError):
    """Raised when the response carries a GraphQL error list instead of data."""

    def __init__(self, errors: List[Any]):
        self.errors = errors
        super().__init__(f"GraphQL errors: {errors}")


class RateLimitedError(GraphQLClientError):
    """Raised for a throttled response; carries the wait before the next attempt."""

    def __init__(self, status_code: int, wait_seconds: float):
        self.status_code = status_code
        self.wait_seconds = wait_seconds
        super().__init__(
            f"GitHub API rate limited ({status_code}), retry in {wait_seconds:g}s"
        )


class RateLimitExhaustedError(GraphQLClientError):
    """Raised when a request stays rate limited past the retry ceiling."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"GitHub API still rate limited after {attempts} retries")


class GraphQLClient:
    """
    Query executor for the GitHub GraphQL endpoint.

    Sends one POST per call with a bearer token. On a rate limited response the
    caller is suspended for the ``Retry-After`` hint (or ``default_retry_after``
    seconds when absent) and the identical payload is sent again through
    tenacity, up to
    ``max_retries`` times.

    Attributes:
        url (str): GraphQL endpoint
        default_retry_after (float): Wait used when no hint is supplied
        max_retries (int): Rate limit retries before RateLimitExhaustedError
    """

    GRAPHQL_URL = "https://api.github.com/graphql"
    RATE_LIMITED = 429

    def __init__(
        self,
        token: str,
        url: str = GRAPHQL_URL,
        timeout: float = 30.0,
        default_retry_after: float = 60,
        max_retries: int = 100,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the client.

        Args:
            token (str): GitHub token sent as a bearer credential.
            url (str): GraphQL endpoint.
            timeout (float): Per request timeout in seconds.
            default_retry_after (float): Wait used when a rate limited response
                has no hint.
            max_retries (int): Rate limit retries before giving up.
            client (Optional[httpx.AsyncClient]): Pre-built HTTP client, for tests.
            sleep (Callable): Coroutine used to wait between rate limited attempts.
        """
        self.url = url
        self.default_retry_after = default_retry_after
        self.max_retries = max_retries
        self._sleep = sleep
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def __aenter__(self) -> "GraphQLClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def execute(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Execute one GraphQL query.

        Args:
            query (str): GraphQL document
            variables (Optional[Dict[str, Any]]): Query variables

        Returns:
            Dict[str, Any]: The ``data`` payload of the response

        Raises:
            TransportError: Non-2xx response other than rate limiting, or a
                network failure
            ProtocolError: Response body carries GraphQL errors
            RateLimitExhaustedError: Still rate limited after ``max_retries`` retries
        """
        payload = {"query": query, "variables": variables or {}}
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(RateLimitedError),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self._wait_for_hint,
            sleep=self._sleep,
            before_sleep=self._log_rate_limited,
        )

        try:
            return await retrying(self._post, payload)
        except RetryError as e:
            logger.critical(
                {
                    "message": "GitHub API rate limit retries exhausted",
                    "retries": self.max_retries,
                }
            )
            raise RateLimitExhaustedError(self.max_retries) from e

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Send one request, raising RateLimitedError when it is throttled."""
        try:
            response = await self._client.post(
                self.url, json=payload, headers=self._headers
            )
        except httpx.HTTPError as e:
            logger.error({"message": "GitHub API request failed", "error": str(e)})
            raise TransportError(None, str(e)) from e

        if self._is_rate_limited(response):
            raise RateLimitedError(response.status_code, self._retry_after(response))

        if not response.is_success:
            raise TransportError(response.status_code, response.reason_phrase)

        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError([f"Invalid JSON response: {e}"]) from e

        if not isinstance(body, dict):
            raise ProtocolError([f"Unexpected response body: {body!r}"])

        if body.get("errors"):
            raise ProtocolError(body["errors"])

        return body.get("data") or {}

    @staticmethod
    def _wait_for_hint(retry_state: RetryCallState) -> float:
        return retry_state.outcome.exception().wait_seconds

    @staticmethod
    def _log_rate_limited(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        logger.warning(
            {
                "message": f"Rate limited. Waiting {error.wait_seconds:g} seconds...",
                "status_code": error.status_code,
                "wait_seconds": error.wait_seconds,
                "retry": retry_state.attempt_number,
            }
        )

    def _is_rate_limited(self, response: httpx.Response) -> bool:
        if response.status_code == self.RATE_LIMITED:
            return True
        # Primary rate limit exhaustion is reported as 403
        return (
            response.status_code == 403
            and response.headers.get("X-RateLimit-Remaining") == "0"
        )

    def _retry_after(self, response: httpx.Response) -> float:
        """Seconds to wait before retrying a rate limited request."""
        hint = response.headers.get("Retry-After")
        if hint is not None:
            try:
                return max(0.0, float(hint))
            except ValueError:
                pass

        reset = response.headers.get("X-RateLimit-Reset")
        if response.headers.get("X-RateLimit-Remaining") == "0" and reset:
            try:
                return max(0.0, float(reset) - time.time())
            except ValueError:
                pass

        return float(self.default_retry_after)

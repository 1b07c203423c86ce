"""Base async HTTP client with rate limiting and connection pooling.

All API clients inherit from this base to ensure consistent behavior:
- Async/await for non-blocking I/O
- Connection pooling for performance
- Client-side pacing to respect API quotas
- No automatic retries: every failure surfaces to the caller
- Proper error handling and logging

Usage:
    class MyAPIClient(BaseAsyncClient):
        def __init__(self, token: str, rate_limit: int = 10):
            super().__init__(
                base_url="https://api.example.com",
                headers={"Authorization": f"Bearer {token}"},
                rate_limit=rate_limit
            )

        async def get_data(self, name: str) -> dict:
            return await self._request("GET", f"/data/{name}")
"""

import asyncio
import logging
from typing import Any

import httpx


logger = logging.getLogger(__name__)


class RateLimiter:
    """Token bucket rate limiter for async operations.

    Ensures we don't exceed API rate limits using a token bucket algorithm.
    Safe to share between concurrent tasks on one event loop.

    Args:
        rate: Maximum requests per second
    """

    def __init__(self, rate: int) -> None:
        self.rate = rate
        self.tokens = rate
        self.updated_at: float = 0.0
        self._initialized: bool = False
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Acquire a token, waiting if necessary."""
        async with self._lock:
            loop = asyncio.get_running_loop()

            if not self._initialized:
                self.updated_at = loop.time()
                self._initialized = True

            while self.tokens < 1:
                now = loop.time()
                elapsed = now - self.updated_at
                self.tokens = min(self.rate, self.tokens + elapsed * self.rate)
                self.updated_at = now

                if self.tokens < 1:
                    wait_time = (1 - self.tokens) / self.rate
                    await asyncio.sleep(wait_time)

            self.tokens -= 1
            self.updated_at = loop.time()


class APIProviderError(Exception):
    """Base exception for API provider errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class RateLimitExceededError(APIProviderError):
    """The provider reports the request quota as exhausted.

    Attributes:
        reset_at: Epoch seconds when the quota resets, if the provider said so
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        reset_at: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, response_body=response_body)
        self.reset_at = reset_at


class BaseAsyncClient:
    """Base async HTTP client with rate limiting and connection pooling.

    Provides a foundation for all API clients with consistent error handling,
    rate limiting, and logging.

    Args:
        base_url: Base URL for all API requests
        headers: Default headers for all requests
        rate_limit: Maximum requests per second (default: 10)
        timeout: Request timeout in seconds (default: 30)
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        rate_limit: int = 10,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self.timeout = timeout
        self._rate_limiter = RateLimiter(rate=rate_limit)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BaseAsyncClient":
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _is_rate_limited(self, response: httpx.Response) -> bool:
        """Whether a failed response signals quota exhaustion.

        Subclasses override this with provider-specific signals.
        """
        return response.status_code == 429

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an HTTP request with rate limiting and error handling.

        Failures are never retried here. Quota exhaustion raises
        RateLimitExceededError so callers can decide whether a stronger
        credential is worth asking for.

        Args:
            method: HTTP method
            endpoint: API endpoint path (relative to base_url)
            params: Query parameters

        Returns:
            Parsed JSON response (object or array)

        Raises:
            RateLimitExceededError: If the provider signals quota exhaustion
            APIProviderError: On any other non-success status, timeout,
                network error or invalid JSON
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with context manager.")

        # Ensure endpoint starts with /
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"

        await self._rate_limiter.acquire()

        logger.debug("%s %s%s params=%s", method, self.base_url, endpoint, params)

        try:
            response = await self._client.request(
                method=method,
                url=endpoint,
                params=params,
            )
        except httpx.TimeoutException as e:
            logger.error("Request timeout for %s: %s", endpoint, e)
            raise APIProviderError(f"Request timeout: {e}") from e
        except httpx.NetworkError as e:
            logger.error("Network error for %s: %s", endpoint, e)
            raise APIProviderError(f"Network error: {e}") from e
        except httpx.HTTPError as e:
            logger.error("Transport error for %s: %s", endpoint, e)
            raise APIProviderError(f"Transport error: {e}") from e

        logger.debug("Response: %d for %s", response.status_code, endpoint)

        if response.status_code >= 400:
            error_body = response.text[:500]

            if self._is_rate_limited(response):
                reset = response.headers.get("X-RateLimit-Reset")
                reset_at = int(reset) if reset and reset.isdigit() else None
                logger.warning(
                    "Rate limit exceeded: %d %s (reset_at=%s)",
                    response.status_code, endpoint, reset_at,
                )
                raise RateLimitExceededError(
                    message=f"API rate limit exceeded: {response.status_code}",
                    status_code=response.status_code,
                    response_body=error_body,
                    reset_at=reset_at,
                )

            logger.error(
                "API error: %d %s - %s",
                response.status_code, endpoint, error_body,
            )
            raise APIProviderError(
                message=f"API request failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                response_body=error_body,
            )

        # Parse JSON response
        try:
            return response.json()
        except ValueError as e:
            logger.error("Failed to parse JSON response: %s", e)
            raise APIProviderError(
                message=f"Invalid JSON response: {e}",
                status_code=response.status_code,
                response_body=response.text[:500],
            ) from e

    async def get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Convenience method for GET requests."""
        return await self._request("GET", endpoint, params=params)

"""Tests for base async client."""

import asyncio

import httpx
import pytest

from followcheck.clients.base import (
    APIProviderError,
    BaseAsyncClient,
    RateLimitExceededError,
    RateLimiter,
)


class TestRateLimiter:
    """Tests for token bucket rate limiter."""

    @pytest.mark.asyncio
    async def test_allows_requests_under_limit(self):
        """Rate limiter should allow requests under the limit."""
        limiter = RateLimiter(rate=10)  # 10 req/s

        # Should allow 5 requests immediately
        for _ in range(5):
            await limiter.acquire()

    @pytest.mark.asyncio
    async def test_blocks_when_over_limit(self):
        """Rate limiter should block when over limit."""
        limiter = RateLimiter(rate=2)  # 2 req/s

        loop = asyncio.get_running_loop()

        # First 2 requests should be instant
        start = loop.time()
        await limiter.acquire()
        await limiter.acquire()
        first_duration = loop.time() - start

        # Third request should wait ~0.5s
        start = loop.time()
        await limiter.acquire()
        third_duration = loop.time() - start

        assert first_duration < 0.1  # Nearly instant
        assert third_duration > 0.3  # Had to wait

    def test_init_without_event_loop(self):
        """RateLimiter can be created in synchronous context."""
        limiter = RateLimiter(rate=10)
        assert limiter.rate == 10
        assert limiter.tokens == 10
        assert limiter._initialized is False


class TestBaseAsyncClient:
    """Tests for base async HTTP client."""

    @pytest.mark.asyncio
    async def test_context_manager_lifecycle(self, respx_mock):
        """Client should properly initialize and cleanup."""
        respx_mock.get("https://api.example.com/test").mock(
            return_value=httpx.Response(200, json={"status": "ok"})
        )

        async with BaseAsyncClient(
            base_url="https://api.example.com",
            headers={"Authorization": "test_key"},
        ) as client:
            assert client._client is not None
            result = await client.get("/test")
            assert result == {"status": "ok"}

        # Client should be closed after exiting context
        assert client._client is None

    @pytest.mark.asyncio
    async def test_raises_if_used_without_context_manager(self):
        """Client should raise if used without async with."""
        client = BaseAsyncClient(base_url="https://api.example.com")

        with pytest.raises(RuntimeError, match="not initialized"):
            await client.get("/test")

    @pytest.mark.asyncio
    async def test_request_adds_leading_slash(self, respx_mock):
        """Requests should work with or without leading slash."""
        respx_mock.get("https://api.example.com/test").mock(
            return_value=httpx.Response(200, json={"data": "value"})
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            result1 = await client.get("/test")
            result2 = await client.get("test")  # No leading slash

            assert result1 == {"data": "value"}
            assert result2 == {"data": "value"}

    @pytest.mark.asyncio
    async def test_returns_json_arrays(self, respx_mock):
        """Listing endpoints return arrays, which pass through unchanged."""
        respx_mock.get("https://api.example.com/list").mock(
            return_value=httpx.Response(200, json=[{"login": "a"}, {"login": "b"}])
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            result = await client.get("/list", params={"page": 1})
            assert result == [{"login": "a"}, {"login": "b"}]

    @pytest.mark.asyncio
    async def test_get_sends_query_params_without_body(self, respx_mock):
        route = respx_mock.get("https://api.example.com/list").mock(
            return_value=httpx.Response(200, json=[])
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            await client.get("/list", params={"page": 2, "per_page": 100})

        request = route.calls.last.request
        assert request.url.params["page"] == "2"
        assert request.content == b""

    @pytest.mark.asyncio
    async def test_handles_http_errors(self, respx_mock):
        """Client should raise APIProviderError on HTTP errors."""
        respx_mock.get("https://api.example.com/error").mock(
            return_value=httpx.Response(404, text="Not Found")
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError) as exc_info:
                await client.get("/error")

            assert exc_info.value.status_code == 404
            assert "Not Found" in exc_info.value.response_body
            assert not isinstance(exc_info.value, RateLimitExceededError)

    @pytest.mark.asyncio
    async def test_handles_invalid_json(self, respx_mock):
        """Client should raise APIProviderError on invalid JSON."""
        respx_mock.get("https://api.example.com/invalid").mock(
            return_value=httpx.Response(200, text="not json")
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError, match="Invalid JSON"):
                await client.get("/invalid")

    @pytest.mark.asyncio
    async def test_respects_rate_limit(self, respx_mock):
        """Client should respect rate limiting."""
        respx_mock.get("https://api.example.com/test").mock(
            return_value=httpx.Response(200, json={"ok": True})
        )

        async with BaseAsyncClient(
            base_url="https://api.example.com",
            rate_limit=2,  # 2 req/s
        ) as client:
            loop = asyncio.get_running_loop()
            start = loop.time()

            # Make 3 requests
            await client.get("/test")
            await client.get("/test")
            await client.get("/test")

            duration = loop.time() - start

            # Should take at least ~0.5s due to rate limiting
            assert duration > 0.3


class TestNoRetries:
    """Failures are never retried by the client."""

    @pytest.mark.asyncio
    async def test_429_raises_rate_limit_error_once(self, respx_mock):
        """429 is classified as rate limiting and not retried."""
        route = respx_mock.get("https://api.example.com/limited")
        route.mock(
            return_value=httpx.Response(
                429, text="Too Many Requests", headers={"X-RateLimit-Reset": "1700000000"}
            )
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(RateLimitExceededError) as exc_info:
                await client.get("/limited")

        assert exc_info.value.status_code == 429
        assert exc_info.value.reset_at == 1700000000
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_503_not_retried(self, respx_mock):
        """Server errors raise immediately."""
        route = respx_mock.get("https://api.example.com/unavailable")
        route.mock(return_value=httpx.Response(503, text="Service Unavailable"))

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError) as exc_info:
                await client.get("/unavailable")

        assert exc_info.value.status_code == 503
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_timeout_becomes_provider_error(self, respx_mock):
        """A timeout surfaces as APIProviderError without a status code."""
        route = respx_mock.get("https://api.example.com/slow")
        route.side_effect = httpx.ReadTimeout("Connection timed out")

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError, match="timeout") as exc_info:
                await client.get("/slow")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_network_error_becomes_provider_error(self, respx_mock):
        """Connection failures surface as APIProviderError."""
        respx_mock.get("https://api.example.com/down").mock(
            side_effect=httpx.ConnectError("Connection refused")
        )

        async with BaseAsyncClient(base_url="https://api.example.com") as client:
            with pytest.raises(APIProviderError, match="Network error"):
                await client.get("/down")

"""
Base client for openFDA endpoints.

Provides: optional response caching, rate limiting, retry with exponential
backoff on transient failures, and structured logging.  Client errors are
raised as DataSourceError with the HTTP status attached so callers can decide
which of them mean "no data".
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import aiohttp
from pydantic import BaseModel

from fda_insights.config import Settings, get_settings
from fda_insights.constants import CACHE_TTL, DEFAULT_CACHE_DIR
from fda_insights.utils.cache import cache_get, cache_set

logger = logging.getLogger("fda_insights.data_sources")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class RetryConfig(BaseModel):
    """Retry behaviour for failed requests."""

    max_retries: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    backoff_factor: float = 2.0
    retryable_status_codes: set[int] = {429, 500, 502, 503, 504}


class RateLimitConfig(BaseModel):
    """Token-bucket rate limiter settings.

    openFDA allows 240 requests per minute per IP without an API key.
    """

    requests_per_second: float = 4.0
    burst: int = 10


class CacheConfig(BaseModel):
    """Disk cache settings."""

    enabled: bool = False
    directory: Path = DEFAULT_CACHE_DIR
    ttl_seconds: int = CACHE_TTL


class ClientConfig(BaseModel):
    """Top-level config aggregating retry, rate limit, and cache."""

    retry: RetryConfig = RetryConfig()
    rate_limit: RateLimitConfig = RateLimitConfig()
    cache: CacheConfig = CacheConfig()
    timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientConfig":
        return cls(
            retry=RetryConfig(max_retries=settings.max_retries),
            cache=CacheConfig(
                enabled=settings.cache_enabled,
                directory=settings.cache_dir,
                ttl_seconds=settings.cache_ttl_seconds,
            ),
            timeout_seconds=settings.request_timeout_seconds,
        )


# ---------------------------------------------------------------------------
# Rate limiter (async token bucket)
# ---------------------------------------------------------------------------


class TokenBucketRateLimiter:
    """
    Async token-bucket rate limiter.

    Allows `burst` requests immediately, then refills at
    `requests_per_second`.  Callers await `acquire()` before
    making a request; it sleeps only when the bucket is empty.
    """

    def __init__(self, config: RateLimitConfig):
        self.rate = config.requests_per_second
        self.max_tokens = config.burst
        self.tokens = float(config.burst)
        self.last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self.last_refill
            self.tokens = min(self.max_tokens, self.tokens + elapsed * self.rate)
            self.last_refill = now

            if self.tokens < 1.0:
                wait = (1.0 - self.tokens) / self.rate
                logger.debug("Rate limiter: sleeping %.2fs", wait)
                await asyncio.sleep(wait)
                self.tokens = 0.0
                self.last_refill = time.monotonic()
            else:
                self.tokens -= 1.0


# ---------------------------------------------------------------------------
# Request context (for structured logging)
# ---------------------------------------------------------------------------


class RequestContext(BaseModel):
    """Metadata attached to every outgoing request for logging."""

    source: str  # e.g. "openfda"
    method: str  # e.g. "fetch_adverse_events"
    params: dict[str, Any] = {}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DataSourceError(Exception):
    """Base exception for data source failures."""

    def __init__(self, source: str, message: str, status_code: int | None = None):
        self.source = source
        self.status_code = status_code
        super().__init__(f"[{source}] {message}")


class RateLimitError(DataSourceError):
    """Raised when rate limit is exceeded and retries are exhausted."""

    pass


# ---------------------------------------------------------------------------
# Base client
# ---------------------------------------------------------------------------


class BaseClient(ABC):
    """
    Abstract base for openFDA clients.

    Subclasses implement `_source_name` and their own typed methods that
    call `_rest_get()`.
    """

    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig.from_settings(get_settings())
        self.rate_limiter = TokenBucketRateLimiter(self.config.rate_limit)
        self._session: aiohttp.ClientSession | None = None

    @property
    @abstractmethod
    def _source_name(self) -> str:
        """Identifier for this data source, e.g. 'openfda'."""
        ...

    # -- Session management --------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    # -- Core request with retry + cache + rate limiting ---------------------

    def _backoff_delay(self, attempt: int) -> float:
        retry = self.config.retry
        return min(retry.base_delay * (retry.backoff_factor**attempt), retry.max_delay)

    async def _request(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        context: RequestContext | None = None,
    ) -> Any:
        """
        Make a GET request with caching, rate limiting, and retry.

        Returns the decoded JSON body.  Raises DataSourceError for any
        non-retryable HTTP error, and for retryable ones once retries are
        exhausted.

        Parameters
        ----------
        url : str
            Full URL.
        params : dict, optional
            Query string parameters.
        headers : dict, optional
            Additional HTTP headers.
        context : RequestContext, optional
            Logging context.
        """
        ctx = context or RequestContext(source=self._source_name, method="unknown")
        params = params or {}
        cache = self.config.cache

        # --- Check cache first ---
        if cache.enabled:
            cached = cache_get(url, params, cache.directory)
            if cached is not None:
                logger.info("Cache hit [%s.%s] url=%s", ctx.source, ctx.method, url)
                return cached

        # --- Retry loop ---
        max_retries = self.config.retry.max_retries
        last_error: DataSourceError | None = None
        start = time.monotonic()

        for attempt in range(max_retries + 1):
            try:
                await self.rate_limiter.acquire()
                session = await self._get_session()

                logger.info(
                    "Request [%s.%s] attempt=%d url=%s",
                    ctx.source,
                    ctx.method,
                    attempt + 1,
                    url,
                )

                resp = await session.get(url, params=params, headers=headers)

                # --- Handle HTTP errors ---
                if resp.status in self.config.retry.retryable_status_codes:
                    body = await resp.text()
                    logger.warning(
                        "Retryable %d from %s.%s: %s",
                        resp.status,
                        ctx.source,
                        ctx.method,
                        body[:200],
                    )
                    error_cls = RateLimitError if resp.status == 429 else DataSourceError
                    last_error = error_cls(
                        ctx.source,
                        f"HTTP {resp.status}: {body[:200]}",
                        status_code=resp.status,
                    )
                    if attempt < max_retries:
                        # Respect Retry-After header if present
                        retry_after = resp.headers.get("Retry-After")
                        if resp.status == 429 and retry_after:
                            await asyncio.sleep(float(retry_after))
                        else:
                            await asyncio.sleep(self._backoff_delay(attempt))
                    continue

                if resp.status >= 400:
                    body = await resp.text()
                    raise DataSourceError(
                        ctx.source,
                        f"HTTP {resp.status}: {body[:500]}",
                        status_code=resp.status,
                    )

                # --- Success ---
                data = await resp.json()
                elapsed = time.monotonic() - start

                logger.info(
                    "Success [%s.%s] elapsed=%.2fs cached=False",
                    ctx.source,
                    ctx.method,
                    elapsed,
                )

                if cache.enabled:
                    cache_set(url, params, data, cache.directory, ttl=cache.ttl_seconds)

                return data

            except asyncio.TimeoutError:
                elapsed = time.monotonic() - start
                last_error = DataSourceError(
                    ctx.source, f"Timeout after {elapsed:.1f}s"
                )
                logger.warning(
                    "Timeout [%s.%s] attempt=%d elapsed=%.1fs",
                    ctx.source,
                    ctx.method,
                    attempt + 1,
                    elapsed,
                )

            except aiohttp.ClientError as e:
                last_error = DataSourceError(ctx.source, f"Connection error: {e}")
                logger.warning(
                    "Connection error [%s.%s] attempt=%d: %s",
                    ctx.source,
                    ctx.method,
                    attempt + 1,
                    e,
                )

            # Exponential backoff before next attempt
            if attempt < max_retries:
                await asyncio.sleep(self._backoff_delay(attempt))

        elapsed = time.monotonic() - start
        logger.error(
            "All retries exhausted [%s.%s] after %.1fs: %s",
            ctx.source,
            ctx.method,
            elapsed,
            last_error,
        )
        raise last_error

    async def _rest_get(
        self,
        url: str,
        params: dict[str, Any],
        *,
        context: RequestContext | None = None,
    ) -> Any:
        """Convenience wrapper for REST GET requests."""
        return await self._request(url, params=params, context=context)

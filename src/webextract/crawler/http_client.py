"""
Rate-limited HTTP client that fetches a single HTML page with browser-like headers.
"""

from __future__ import annotations

import asyncio
import os
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

import aiohttp
import structlog

from webextract.crawler.rate_limiter import DispatchRateLimiter
from webextract.crawler.user_agents import UserAgentRotator
from webextract.exceptions import FetchTimeoutError, HttpStatusError, UnsupportedContentTypeError
from webextract.observability.metrics import METRICS

if TYPE_CHECKING:
    from webextract.config import FetcherConfig

logger = structlog.get_logger(__name__)

# Sent with every request next to a rotated User-Agent.
BROWSER_HEADERS: Dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Cache-Control": "max-age=0",
}

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")

PROXY_ENV_VARS = ("HTTP_PROXY", "HTTPS_PROXY")


def resolve_proxy(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the configured proxy endpoint, HTTP_PROXY taking precedence over HTTPS_PROXY."""
    env = os.environ if environ is None else environ
    for name in PROXY_ENV_VARS:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


def is_html_content_type(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in HTML_CONTENT_TYPES


@dataclass
class FetchResponse:
    """A fully read HTTP response."""

    url: str
    final_url: str
    status: int
    reason: str
    headers: Dict[str, str]
    text: str
    elapsed: float

    @property
    def content_type(self) -> Optional[str]:
        for name, value in self.headers.items():
            if name.lower() == "content-type":
                return value
        return None


class HttpClient:
    """
    Fetches pages through a shared DispatchRateLimiter.

    Every request carries a freshly chosen User-Agent plus a fixed set of
    browser headers, is routed through HTTP_PROXY / HTTPS_PROXY when one is
    set, and is bounded by a single total timeout. There are no retries.
    """

    def __init__(
        self,
        config: FetcherConfig,
        rate_limiter: DispatchRateLimiter,
        rotator: Optional[UserAgentRotator] = None,
        proxy: Optional[str] = None,
    ) -> None:
        self.config = config
        self.rate_limiter = rate_limiter
        self.rotator = rotator or UserAgentRotator(config.user_agents)
        self.proxy = (proxy if proxy is not None else resolve_proxy()) or None

        self.session: Optional[aiohttp.ClientSession] = None
        self._is_initialized = False

        logger.debug(
            "HTTP client created",
            timeout=config.timeout,
            user_agents=len(self.rotator.agents),
            proxy_enabled=bool(self.proxy),
        )

    async def initialize(self) -> None:
        """Open the HTTP session."""
        if self.session is None:
            # The total timeout is enforced around each request instead.
            self.session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
            self._is_initialized = True
            logger.debug("HTTP client session initialized")

    async def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None
        self._is_initialized = False
        logger.debug("HTTP client closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def build_headers(self) -> Dict[str, str]:
        """Browser-like request headers with a rotated User-Agent."""
        headers = {"User-Agent": self.rotator.get_random_user_agent()}
        headers.update(BROWSER_HEADERS)
        return headers

    async def fetch(self, url: str) -> FetchResponse:
        """
        Fetch ``url`` once the rate limiter grants the slot.

        Args:
            url: Sanitized http(s) URL

        Returns:
            FetchResponse for a successful HTML response

        Raises:
            FetchTimeoutError: no complete response within the timeout
            HttpStatusError: status code 400 or above
            UnsupportedContentTypeError: missing or non-HTML Content-Type
            aiohttp.ClientError: network-level failure
        """
        if not self._is_initialized:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        try:
            response = await self.rate_limiter.schedule(self._fetch_with_timeout, url)
        except FetchTimeoutError:
            METRICS["fetch_requests_total"].labels(outcome="timeout").inc()
            raise
        except aiohttp.ClientError as e:
            METRICS["fetch_requests_total"].labels(outcome="network_error").inc()
            logger.warning("Request failed", url=url, error=str(e))
            raise

        METRICS["fetch_latency_seconds"].observe(response.elapsed)
        try:
            self._validate(response)
        except HttpStatusError:
            METRICS["fetch_requests_total"].labels(outcome="http_error").inc()
            raise
        except UnsupportedContentTypeError:
            METRICS["fetch_requests_total"].labels(outcome="unsupported_content_type").inc()
            raise

        METRICS["fetch_requests_total"].labels(outcome="success").inc()
        logger.debug("Fetched page", url=url, status=response.status, elapsed=round(response.elapsed, 3))
        return response

    async def _fetch_with_timeout(self, url: str) -> FetchResponse:
        headers = self.build_headers()
        try:
            async with asyncio.timeout(self.config.timeout):
                return await self._send(url, headers)
        except TimeoutError:
            logger.warning("Request timed out", url=url, timeout=self.config.timeout)
            raise FetchTimeoutError(f"Request timed out after {self.config.timeout:g}s") from None

    async def _send(self, url: str, headers: Dict[str, str]) -> FetchResponse:
        """Perform the GET and read the body of HTML success responses."""
        assert self.session is not None

        kwargs: Dict[str, Any] = {"headers": headers}
        if self.proxy:
            kwargs["proxy"] = self.proxy

        start_time = time.monotonic()
        async with self.session.get(url, **kwargs) as response:
            response_headers = {key: value for key, value in response.headers.items()}
            body = ""
            if response.status < 400 and is_html_content_type(response.headers.get("Content-Type")):
                body = await response.text(errors="replace")

            return FetchResponse(
                url=url,
                final_url=str(response.url),
                status=response.status,
                reason=response.reason or "",
                headers=response_headers,
                text=body,
                elapsed=time.monotonic() - start_time,
            )

    @staticmethod
    def _validate(response: FetchResponse) -> None:
        if response.status >= 400:
            raise HttpStatusError(response.status, response.reason)
        if not is_html_content_type(response.content_type):
            raise UnsupportedContentTypeError(response.content_type)

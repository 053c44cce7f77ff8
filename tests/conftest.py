"""
Shared test configuration for webextract.

Fixtures build the pipeline components with a zero-interval rate limiter so
tests do not wait between fetches; rate limiter behaviour has its own tests.
"""

# Standard library imports
import asyncio
import logging
from typing import AsyncGenerator

# Third-party imports
import pytest
import pytest_asyncio
import structlog

# Local imports
from webextract.config import Config, FetcherConfig, ParserConfig
from webextract.crawler.http_client import HttpClient
from webextract.crawler.rate_limiter import DispatchRateLimiter
from webextract.extractor.soup_extractor import SoupContentParser
from webextract.security.validation import UrlGuard
from webextract.service import ExtractionService

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Isolation Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def no_proxy_env(monkeypatch):
    """Tests never inherit a proxy from the developer's shell."""
    monkeypatch.delenv("HTTP_PROXY", raising=False)
    monkeypatch.delenv("HTTPS_PROXY", raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any logging configuration a test (e.g. the CLI) installed."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


@pytest_asyncio.fixture(autouse=True)
async def cleanup_tasks() -> AsyncGenerator[None, None]:
    """Cancel tasks a test left behind."""
    tasks_before = asyncio.all_tasks()
    yield
    new_tasks = asyncio.all_tasks() - tasks_before

    for task in new_tasks:
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


# ============================================================================
# Sample Data
# ============================================================================


@pytest.fixture
def sample_html():
    """Provide sample HTML content for testing."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>  Test Article  </title>
        <meta name="description" content="Sample article for testing">
        <style>body { color: red; }</style>
    </head>
    <body>
        <nav>Home | About</nav>
        <article>
            <h1>Test Article Title</h1>
            <p>This is a sample paragraph with <strong>bold text</strong> and
               <a href="https://example.com">a link</a>.</p>
            <img src="/images/hero.png" alt="Hero" title="Hero image">
            <img src="thumb.jpg">
            <script>trackVisitor();</script>
        </article>
        <form><input name="q"><button>Search</button></form>
    </body>
    </html>
    """


# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def config():
    """Default configuration without spacing between fetches."""
    config = Config()
    config.rate_limiter.min_interval = 0.0
    return config


@pytest.fixture
def fetcher_config():
    return FetcherConfig(timeout=2.0)


@pytest.fixture
def rate_limiter():
    return DispatchRateLimiter(min_interval=0.0)


@pytest.fixture
def parser():
    return SoupContentParser(ParserConfig())


@pytest_asyncio.fixture
async def http_client(fetcher_config, rate_limiter) -> AsyncGenerator[HttpClient, None]:
    """Initialized HTTP client without a proxy."""
    client = HttpClient(fetcher_config, rate_limiter, proxy="")
    await client.initialize()
    try:
        yield client
    finally:
        await client.close()


@pytest_asyncio.fixture
async def service(http_client, parser) -> AsyncGenerator[ExtractionService, None]:
    yield ExtractionService(UrlGuard(), http_client, parser)

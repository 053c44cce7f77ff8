"""
Dependency injection container for webextract components.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, Generic, Optional, TypeVar

import structlog

from webextract.config import Config, find_config_file
from webextract.crawler.http_client import HttpClient
from webextract.crawler.rate_limiter import DispatchRateLimiter
from webextract.extractor.soup_extractor import SoupContentParser
from webextract.security.validation import UrlGuard
from webextract.service import ExtractionService

T = TypeVar("T")


class LazyInstance(Generic[T]):
    """Lazy-loaded instance with lifecycle management."""

    def __init__(self, factory: Callable[..., T], *args: Any, **kwargs: Any) -> None:
        self._factory = factory
        self._args = args
        self._kwargs = kwargs
        self._instance: Optional[T] = None
        self._initialized = False

    async def get(self) -> T:
        """Get or create the instance."""
        if not self._initialized:
            self._instance = self._factory(*self._args, **self._kwargs)
            if callable(getattr(self._instance, "initialize", None)):
                await self._instance.initialize()  # type: ignore
            self._initialized = True
        assert self._instance is not None
        return self._instance

    async def cleanup(self) -> None:
        """Clean up the instance."""
        if self._instance is not None and callable(getattr(self._instance, "close", None)):
            await self._instance.close()  # type: ignore
        self._instance = None
        self._initialized = False


class DependencyContainer:
    """
    Builds the extraction pipeline once and shares it.

    The rate limiter is created exactly once per container; the HTTP client
    holds it by reference, so every extraction served through this container
    queues behind the same limiter.
    """

    def __init__(self, config_path: Optional[Path] = None, config: Optional[Config] = None) -> None:
        self.config_path = config_path
        self.config: Optional[Config] = config
        self.logger = structlog.get_logger(self.__class__.__name__)
        self._instances: Dict[str, LazyInstance[Any]] = {}
        self.is_running = False

    async def initialize(self) -> None:
        """Load configuration and wire the components."""
        if self.config is None:
            self.load_config()
        self._create_instances()
        self.is_running = True

        self.logger.debug(
            "Dependency container initialized",
            config_path=str(self.config_path) if self.config_path else "default",
        )

    def load_config(self) -> None:
        """Load configuration from the given path, a config file in the cwd, or the environment."""
        path = self.config_path or find_config_file()
        if path is not None:
            self.config = Config.from_yaml(path)
            self.config_path = path
        else:
            self.config = Config()

    def _create_instances(self) -> None:
        assert self.config is not None
        config = self.config

        rate_limiter = DispatchRateLimiter(min_interval=config.rate_limiter.min_interval)
        self._instances = {
            "rate_limiter": LazyInstance(lambda: rate_limiter),
            "url_guard": LazyInstance(UrlGuard),
            "parser": LazyInstance(SoupContentParser, config.parser),
            "http_client": LazyInstance(HttpClient, config.fetcher, rate_limiter),
        }

    async def _get(self, name: str) -> Any:
        if not self.is_running:
            raise RuntimeError("Container is not initialized")
        return await self._instances[name].get()

    async def get_rate_limiter(self) -> DispatchRateLimiter:
        return await self._get("rate_limiter")  # type: ignore[no-any-return]

    async def get_http_client(self) -> HttpClient:
        return await self._get("http_client")  # type: ignore[no-any-return]

    async def get_parser(self) -> SoupContentParser:
        return await self._get("parser")  # type: ignore[no-any-return]

    async def get_extraction_service(self) -> ExtractionService:
        """The shared service; its HTTP session is opened on first use."""
        if "service" not in self._instances:
            url_guard = await self._get("url_guard")
            http_client = await self.get_http_client()
            parser = await self.get_parser()
            self._instances["service"] = LazyInstance(ExtractionService, url_guard, http_client, parser)
        return await self._get("service")  # type: ignore[no-any-return]

    async def shutdown(self) -> None:
        """Close every component that owns resources."""
        if not self.is_running:
            return
        self.is_running = False
        for name, instance in list(self._instances.items()):
            try:
                await instance.cleanup()
            except Exception as e:
                self.logger.error("Error cleaning up instance", instance=name, error=str(e))
        self.logger.debug("Dependency container shut down")

    @asynccontextmanager
    async def lifecycle(self) -> AsyncIterator[DependencyContainer]:
        """Context manager for the container lifecycle."""
        await self.initialize()
        try:
            yield self
        finally:
            await self.shutdown()

"""
Tests for DependencyContainer wiring and lifecycle.
"""

from unittest.mock import AsyncMock, patch

import pytest
from webextract.config import Config
from webextract.container import DependencyContainer, LazyInstance
from webextract.crawler.rate_limiter import DispatchRateLimiter
from webextract.service import ExtractionService


@pytest.fixture
def quiet_config():
    config = Config()
    config.rate_limiter.min_interval = 0.25
    return config


class TestLazyInstance:
    @pytest.mark.asyncio
    async def test_factory_runs_once(self):
        calls = []

        def factory():
            calls.append(1)
            return object()

        lazy = LazyInstance(factory)
        first = await lazy.get()
        second = await lazy.get()

        assert first is second
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_initialize_and_close_are_called(self):
        resource = AsyncMock()
        lazy = LazyInstance(lambda: resource)

        await lazy.get()
        await lazy.cleanup()

        resource.initialize.assert_awaited_once()
        resource.close.assert_awaited_once()


class TestDependencyContainer:
    @pytest.mark.asyncio
    async def test_getters_require_initialize(self, quiet_config):
        container = DependencyContainer(config=quiet_config)

        with pytest.raises(RuntimeError, match="not initialized"):
            await container.get_rate_limiter()

    @pytest.mark.asyncio
    async def test_rate_limiter_is_shared(self, quiet_config):
        async with DependencyContainer(config=quiet_config).lifecycle() as container:
            limiter = await container.get_rate_limiter()
            http_client = await container.get_http_client()
            service = await container.get_extraction_service()

            assert isinstance(limiter, DispatchRateLimiter)
            assert limiter.min_interval == 0.25
            assert http_client.rate_limiter is limiter
            assert service.http_client is http_client
            assert await container.get_rate_limiter() is limiter

    @pytest.mark.asyncio
    async def test_service_is_singleton(self, quiet_config):
        async with DependencyContainer(config=quiet_config).lifecycle() as container:
            service = await container.get_extraction_service()

            assert isinstance(service, ExtractionService)
            assert await container.get_extraction_service() is service

    @pytest.mark.asyncio
    async def test_components_follow_config(self, quiet_config):
        quiet_config.fetcher.timeout = 4.0
        quiet_config.parser.content_selectors = ["#story"]

        async with DependencyContainer(config=quiet_config).lifecycle() as container:
            http_client = await container.get_http_client()
            parser = await container.get_parser()

            assert http_client.config.timeout == 4.0
            assert parser.config.content_selectors == ["#story"]

    @pytest.mark.asyncio
    async def test_shutdown_closes_http_session(self, quiet_config):
        container = DependencyContainer(config=quiet_config)
        await container.initialize()
        http_client = await container.get_http_client()
        assert http_client.session is not None

        await container.shutdown()

        assert http_client.session is None
        assert container.is_running is False
        with pytest.raises(RuntimeError):
            await container.get_http_client()

    @pytest.mark.asyncio
    async def test_duplicate_shutdown_is_safe(self, quiet_config):
        container = DependencyContainer(config=quiet_config)
        await container.initialize()

        await container.shutdown()
        await container.shutdown()

        assert container.is_running is False

    @pytest.mark.asyncio
    async def test_cleanup_errors_are_isolated(self, quiet_config):
        container = DependencyContainer(config=quiet_config)
        await container.initialize()
        http_client = await container.get_http_client()

        with patch.object(LazyInstance, "cleanup", AsyncMock(side_effect=RuntimeError("close failed"))):
            await container.shutdown()

        assert container.is_running is False
        await http_client.close()

    @pytest.mark.asyncio
    async def test_config_from_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("rate_limiter:\n  min_interval: 0.5\n", encoding="utf-8")

        async with DependencyContainer(config_path=path).lifecycle() as container:
            assert container.config.rate_limiter.min_interval == 0.5
            assert (await container.get_rate_limiter()).min_interval == 0.5

    def test_config_found_in_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text("fetcher:\n  timeout: 7\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        container = DependencyContainer()
        container.load_config()

        assert container.config.fetcher.timeout == 7.0
        assert container.config_path.name == "config.yaml"

    def test_default_config_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        container = DependencyContainer()
        container.load_config()

        assert container.config_path is None
        assert container.config.rate_limiter.min_interval == 1.0

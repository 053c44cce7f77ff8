"""
Tests for configuration defaults, validation, YAML loading and env overrides.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError
from webextract.config import Config, FetcherConfig, MonitoringConfig, RateLimiterConfig, find_config_file
from webextract.crawler.user_agents import DESKTOP_USER_AGENTS


@pytest.mark.unit
class TestDefaults:
    def test_defaults(self):
        config = Config()

        assert config.fetcher.timeout == 10.0
        assert config.fetcher.user_agents == list(DESKTOP_USER_AGENTS)
        assert config.rate_limiter.min_interval == 1.0
        assert config.parser.parser == "html.parser"
        assert config.parser.strip_tags == [
            "script",
            "style",
            "iframe",
            "frame",
            "object",
            "embed",
            "form",
            "input",
            "button",
        ]
        assert config.parser.content_selectors[0] == "main"
        assert config.monitoring.log_level == "WARNING"
        assert config.monitoring.log_file is None


@pytest.mark.unit
class TestValidation:
    @pytest.mark.parametrize("timeout", [0, -1])
    def test_timeout_must_be_positive(self, timeout):
        with pytest.raises(ValidationError):
            FetcherConfig(timeout=timeout)

    def test_user_agents_are_stripped(self):
        config = FetcherConfig(user_agents=["  agent-a ", "", "agent-b"])
        assert config.user_agents == ["agent-a", "agent-b"]

    @pytest.mark.parametrize("agents", [[], ["", "  "]])
    def test_user_agents_must_not_be_empty(self, agents):
        with pytest.raises(ValidationError):
            FetcherConfig(user_agents=agents)

    def test_negative_interval_rejected(self):
        with pytest.raises(ValidationError):
            RateLimiterConfig(min_interval=-0.5)

    def test_zero_interval_allowed(self):
        assert RateLimiterConfig(min_interval=0).min_interval == 0

    def test_log_level_is_normalized(self):
        assert MonitoringConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            MonitoringConfig(log_level="chatty")

    def test_log_file_parent_is_created(self, tmp_path):
        log_file = tmp_path / "logs" / "nested" / "webextract.log"

        config = MonitoringConfig(log_file=log_file)

        assert config.log_file == str(log_file)
        assert log_file.parent.is_dir()


@pytest.mark.unit
class TestEnvironment:
    def test_nested_override(self, monkeypatch):
        monkeypatch.setenv("WEBEXTRACT_FETCHER__TIMEOUT", "2.5")
        monkeypatch.setenv("WEBEXTRACT_RATE_LIMITER__MIN_INTERVAL", "0")
        monkeypatch.setenv("WEBEXTRACT_MONITORING__LOG_LEVEL", "info")

        config = Config()

        assert config.fetcher.timeout == 2.5
        assert config.rate_limiter.min_interval == 0
        assert config.monitoring.log_level == "INFO"


@pytest.mark.unit
class TestYaml:
    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "fetcher:\n"
            "  timeout: 3\n"
            "  user_agents:\n"
            "    - custom-agent\n"
            "rate_limiter:\n"
            "  min_interval: 0.25\n"
            "parser:\n"
            "  content_selectors: ['#story']\n",
            encoding="utf-8",
        )

        config = Config.from_yaml(path)

        assert config.fetcher.timeout == 3.0
        assert config.fetcher.user_agents == ["custom-agent"]
        assert config.rate_limiter.min_interval == 0.25
        assert config.parser.content_selectors == ["#story"]
        assert config.parser.parser == "html.parser"

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        assert Config.from_yaml(path).fetcher.timeout == 10.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("fetcher:\n  timeout: -5\n", encoding="utf-8")

        with pytest.raises(ValidationError):
            Config.from_yaml(path)


@pytest.mark.unit
class TestFindConfigFile:
    def test_none_in_empty_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None

    @pytest.mark.parametrize("name", ["config.yaml", "config.yml"])
    def test_found_in_cwd(self, tmp_path, monkeypatch, name):
        (tmp_path / name).write_text("{}", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert find_config_file() == Path.cwd() / name

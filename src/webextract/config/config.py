"""
Configuration management for webextract using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from webextract.crawler.user_agents import DESKTOP_USER_AGENTS

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class FetcherConfig(BaseModel):
    """HTTP fetch configuration."""

    timeout: float = Field(default=10.0, gt=0, description="Total request timeout in seconds.")
    user_agents: List[str] = Field(
        default_factory=lambda: list(DESKTOP_USER_AGENTS),
        description="Pool of browser User-Agent strings, one is picked per request.",
    )

    @field_validator("user_agents")
    @classmethod
    def non_empty_pool(cls, v: List[str]) -> List[str]:
        agents = [agent.strip() for agent in v if agent and agent.strip()]
        if not agents:
            raise ValueError("user_agents must contain at least one entry")
        return agents


class RateLimiterConfig(BaseModel):
    min_interval: float = Field(default=1.0, ge=0, description="Minimum seconds between two dispatched fetches.")


class ParserConfig(BaseModel):
    """HTML parsing configuration."""

    parser: str = Field(default="html.parser", description="BeautifulSoup tree builder.")
    strip_tags: List[str] = Field(
        default_factory=lambda: [
            "script",
            "style",
            "iframe",
            "frame",
            "object",
            "embed",
            "form",
            "input",
            "button",
        ],
        description="Elements removed before any text is read.",
    )
    content_selectors: List[str] = Field(
        default_factory=lambda: [
            "main",
            "article",
            ".content",
            "#content",
            ".main",
            '[role="main"]',
        ],
        description="Main content candidates; the first match in document order wins.",
    )


class MonitoringConfig(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="WARNING", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(
        default=None,
        description="Path to a JSON log file. If None, logs to stderr.",
    )

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "webextract"
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    rate_limiter: RateLimiterConfig = Field(default_factory=RateLimiterConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="WEBEXTRACT_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls()
        return cls(**yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for path in (current_dir / "config.yaml", current_dir / "config.yml"):
        if path.is_file():
            return path
    return None

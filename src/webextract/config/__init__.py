from .config import (
    Config,
    FetcherConfig,
    MonitoringConfig,
    ParserConfig,
    RateLimiterConfig,
    find_config_file,
)

__all__ = [
    "Config",
    "FetcherConfig",
    "MonitoringConfig",
    "ParserConfig",
    "RateLimiterConfig",
    "find_config_file",
]

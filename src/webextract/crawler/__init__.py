"""
webextract fetch layer.

- Process-wide dispatch rate limiting (one request in flight, minimum spacing)
- User-Agent rotation over a pool of desktop browsers
- Browser-like request headers, optional HTTP(S) proxy, single total timeout
- Status and Content-Type validation
"""

from .http_client import FetchResponse, HttpClient
from .rate_limiter import DispatchRateLimiter
from .user_agents import DESKTOP_USER_AGENTS, UserAgentRotator, choose_user_agent

__all__ = [
    "DESKTOP_USER_AGENTS",
    "DispatchRateLimiter",
    "FetchResponse",
    "HttpClient",
    "UserAgentRotator",
    "choose_user_agent",
]

"""
Browser User-Agent pool and selection.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence

# Desktop browsers only; the pool is static configuration data.
DESKTOP_USER_AGENTS: tuple[str, ...] = (
    # Chrome
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    # Firefox
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0) Gecko/20100101 Firefox/120.0",
)


def choose_user_agent(pool: Sequence[str], rng: Optional[random.Random] = None) -> str:
    """Pick one entry of ``pool`` uniformly at random."""
    if not pool:
        raise ValueError("User-Agent pool is empty")
    return (rng or random).choice(pool)


class UserAgentRotator:
    """Picks a fresh User-Agent for every request."""

    def __init__(self, agents: Optional[Sequence[str]] = None, rng: Optional[random.Random] = None) -> None:
        self.agents: List[str] = list(agents) if agents is not None else list(DESKTOP_USER_AGENTS)
        if not self.agents:
            raise ValueError("User-Agent pool is empty")
        self._rng = rng

    def get_random_user_agent(self) -> str:
        return choose_user_agent(self.agents, self._rng)

    def get_all_agents(self) -> List[str]:
        """Get all available user agents."""
        return self.agents.copy()

"""
Data models for parsed page content.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class ImageRef:
    """An image found on the page, with its source resolved to an absolute URL."""

    src: str
    alt: str = ""
    title: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"src": self.src, "alt": self.alt, "title": self.title}


@dataclass(slots=True, frozen=True)
class ParsedContent:
    """Result of parsing one HTML document."""

    title: str
    description: str
    content: str
    images: tuple[ImageRef, ...] | None = None

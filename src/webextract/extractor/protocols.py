"""
Protocol for pluggable HTML parsing strategies.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import ParsedContent


@runtime_checkable
class ContentParser(Protocol):
    """HTML-to-ParsedContent strategy."""

    name: str

    def parse(self, html: str, base_url: str, include_images: bool = False) -> ParsedContent:
        """Parse synchronously."""
        ...

    async def extract(self, html: str, base_url: str, include_images: bool = False) -> ParsedContent:
        """Parse without blocking the event loop.

        Args:
            html: HTML content to parse
            base_url: URL the page was fetched from, used to resolve images
            include_images: Whether to collect image references

        Returns:
            ParsedContent with extracted content
        """
        ...

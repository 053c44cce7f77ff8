"""
BeautifulSoup-based page parser: metadata, main content and images.
"""

from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING, List, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

import structlog
from bs4 import BeautifulSoup
from bs4.element import Tag

from webextract.extractor.models import ImageRef, ParsedContent
from webextract.security.validation import is_absolute_url

if TYPE_CHECKING:
    from webextract.config import ParserConfig

logger = structlog.get_logger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

# Document-level elements that html.parser leaves outside an absent <body>.
_HEAD_ONLY_SELECTOR = "head, title, meta, link, base, template"


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def page_origin(base_url: str) -> str:
    """``scheme://host[:port]/`` of a page."""
    parts = urlsplit(base_url)
    return urlunsplit((parts.scheme, parts.netloc, "/", "", ""))


def page_directory(base_url: str) -> str:
    """The directory a page lives in: its path up to and including the last ``/``."""
    parts = urlsplit(base_url)
    path = parts.path or "/"
    directory = path[: path.rfind("/") + 1]
    return urlunsplit((parts.scheme, parts.netloc, directory, "", ""))


def resolve_image_src(src: str, base_url: str) -> Optional[str]:
    """
    Resolve an ``img`` source against the page URL.

    Sources starting with ``/`` resolve against the page origin; everything else
    resolves against the page directory. Returns None when the result is not an
    absolute URL.
    """
    src = src.strip()
    try:
        if src.startswith("/"):
            resolved = urljoin(page_origin(base_url), src)
        else:
            resolved = urljoin(page_directory(base_url), src)
    except ValueError:
        return None
    if not is_absolute_url(resolved):
        return None
    return resolved


class SoupContentParser:
    """Extracts title, description, main text and images from an HTML page."""

    name = "soup"

    def __init__(self, config: ParserConfig) -> None:
        self.config = config
        self._strip_selector = ", ".join(config.strip_tags)
        self._content_selector = ", ".join(config.content_selectors)

    async def extract(self, html: str, base_url: str, include_images: bool = False) -> ParsedContent:
        """Parse in the default executor; BeautifulSoup is CPU bound."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.parse, html, base_url, include_images)

    def parse(self, html: str, base_url: str, include_images: bool = False) -> ParsedContent:
        """
        Parse an HTML document.

        Args:
            html: Raw page markup; malformed markup is parsed best-effort
            base_url: Sanitized URL the page was fetched from
            include_images: Whether to collect ``img`` references

        Returns:
            ParsedContent; ``images`` is None unless requested
        """
        if not isinstance(html, str):
            raise ValueError("html must be a string")
        if not base_url:
            raise ValueError("base_url is required")

        soup = BeautifulSoup(html, self.config.parser)

        # Executable and interactive elements never contribute text.
        if self._strip_selector:
            for element in soup.select(self._strip_selector):
                element.decompose()

        title_tag = soup.find("title")
        title = title_tag.get_text().strip() if title_tag else ""

        description = ""
        meta = soup.find("meta", attrs={"name": "description"})
        if isinstance(meta, Tag):
            description = meta.get("content") or ""

        content = normalize_whitespace(self._main_text(soup))

        images = self._images(soup, base_url) if include_images else None

        logger.debug(
            "Parsed page",
            url=base_url,
            title_length=len(title),
            content_length=len(content),
            images=len(images) if images is not None else None,
        )
        return ParsedContent(title=title, description=description, content=content, images=images)

    def _main_text(self, soup: BeautifulSoup) -> str:
        """Text of the first main content candidate, else of the body."""
        if self._content_selector:
            main = soup.select_one(self._content_selector)
            if main is not None:
                text = main.get_text().strip()
                if text:
                    return text

        if soup.body is not None:
            return soup.body.get_text().strip()

        # html.parser does not imply a <body>; drop head content so only body text remains.
        for element in soup.select(_HEAD_ONLY_SELECTOR):
            element.decompose()
        return soup.get_text().strip()

    def _images(self, soup: BeautifulSoup, base_url: str) -> tuple[ImageRef, ...]:
        images: List[ImageRef] = []
        for img in soup.find_all("img", src=True):
            src = resolve_image_src(img["src"], base_url)
            if src is None:
                logger.debug("Skipping image with invalid source", src=img["src"])
                continue
            images.append(
                ImageRef(
                    src=src,
                    alt=img.get("alt") or "",
                    title=img.get("title") or "",
                )
            )
        return tuple(images)

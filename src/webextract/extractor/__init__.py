"""
webextract content extraction: HTML parsing, main content selection and image resolution.
"""

from .models import ImageRef, ParsedContent
from .protocols import ContentParser
from .soup_extractor import SoupContentParser, normalize_whitespace, resolve_image_src

__all__ = [
    "ContentParser",
    "ImageRef",
    "ParsedContent",
    "SoupContentParser",
    "normalize_whitespace",
    "resolve_image_src",
]

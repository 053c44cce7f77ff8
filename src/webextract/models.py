"""
Request and result types of the extraction API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from webextract.exceptions import ErrorKind
from webextract.extractor.models import ImageRef


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Format a moment as ISO-8601 UTC with millisecond precision, e.g. ``2024-01-01T12:00:00.000Z``."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ExtractionRequest:
    """A single page to extract."""

    url: str
    include_images: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.url, str):
            raise TypeError(f"url must be a string, got {type(self.url).__name__}")


@dataclass(frozen=True)
class ExtractionSuccess:
    """Normalized content of a fetched page."""

    title: str
    description: str
    content: str
    url: str
    images: Optional[tuple[ImageRef, ...]] = None
    timestamp: str = field(default_factory=utc_timestamp)

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "content": self.content,
        }
        if self.images is not None:
            data["images"] = [image.to_dict() for image in self.images]
        data["url"] = self.url
        data["timestamp"] = self.timestamp
        return {"success": True, "data": data}


@dataclass(frozen=True)
class ExtractionFailure:
    """Why an extraction did not produce content."""

    error: str
    kind: ErrorKind = ErrorKind.UNEXPECTED_ERROR
    timestamp: str = field(default_factory=utc_timestamp)

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error, "timestamp": self.timestamp}


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]

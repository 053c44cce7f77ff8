"""
Typed errors raised by the extraction pipeline.

Each component raises one of these on its own failure path; the
ExtractionService maps them into a uniform failure result.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Category of an extraction failure."""

    INVALID_URL_FORMAT = "invalid_url_format"
    INVALID_PROTOCOL = "invalid_protocol"
    FETCH_TIMEOUT = "fetch_timeout"
    HTTP_ERROR = "http_error"
    UNSUPPORTED_CONTENT_TYPE = "unsupported_content_type"
    UNEXPECTED_ERROR = "unexpected_error"


class ExtractionError(Exception):
    """Base class for all pipeline errors."""

    kind: ErrorKind = ErrorKind.UNEXPECTED_ERROR
    default_message = "Failed to extract content"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)


class InvalidUrlFormatError(ExtractionError, ValueError):
    """The input string is not a well-formed URL."""

    kind = ErrorKind.INVALID_URL_FORMAT
    default_message = "Invalid URL format"


class InvalidProtocolError(ExtractionError, ValueError):
    """The URL scheme is neither http nor https."""

    kind = ErrorKind.INVALID_PROTOCOL
    default_message = "Invalid URL protocol"


class FetchTimeoutError(ExtractionError):
    """No complete response arrived within the fetch timeout."""

    kind = ErrorKind.FETCH_TIMEOUT
    default_message = "Request timed out"


class HttpStatusError(ExtractionError):
    """The server answered with a non-success status."""

    kind = ErrorKind.HTTP_ERROR

    def __init__(self, status: int, status_text: str = "") -> None:
        self.status = status
        self.status_text = status_text
        super().__init__(f"Failed to fetch URL: {status_text} ({status})")


class UnsupportedContentTypeError(ExtractionError):
    """The response is not an HTML document."""

    kind = ErrorKind.UNSUPPORTED_CONTENT_TYPE
    default_message = "URL does not point to a valid HTML page"

    def __init__(self, content_type: Optional[str] = None) -> None:
        self.content_type = content_type
        super().__init__()


def error_kind(exc: BaseException) -> ErrorKind:
    """Return the failure category for any exception."""
    if isinstance(exc, ExtractionError):
        return exc.kind
    return ErrorKind.UNEXPECTED_ERROR

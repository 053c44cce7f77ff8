"""
URL validation and sanitization for outbound fetches.

Only http and https URLs ever reach the network layer.
"""

from __future__ import annotations

import re
from typing import Any, List
from urllib.parse import SplitResult, quote, urlsplit, urlunsplit

from pydantic import BaseModel, Field

from webextract.exceptions import InvalidProtocolError, InvalidUrlFormatError

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

# Schemes that cannot exist without a host component.
_HOST_REQUIRED_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

_DEFAULT_PORTS = {"http": 80, "https": 443}

_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?"


class URLValidationRules(BaseModel):
    """Rules for URL sanitization."""

    allowed_schemes: List[str] = Field(default_factory=lambda: ["http", "https"])


class UrlGuard:
    """
    Gatekeeper for user supplied URLs.

    ``validate`` answers whether a string is a well-formed URL of any scheme;
    ``sanitize`` additionally restricts the scheme and returns the canonical form
    that is actually fetched.
    """

    def __init__(self, rules: URLValidationRules | None = None) -> None:
        self.rules = rules or URLValidationRules()

    def validate(self, url: Any) -> bool:
        """Return True iff ``url`` parses as a well-formed absolute URL."""
        if not isinstance(url, str):
            return False
        try:
            self._split(url)
        except InvalidUrlFormatError:
            return False
        return True

    def sanitize(self, url: str) -> str:
        """
        Canonicalize an http(s) URL.

        Raises:
            InvalidUrlFormatError: the string is not a URL at all
            InvalidProtocolError: the scheme is not allowed
        """
        parts = self._split(url)
        scheme = parts.scheme.lower()
        if scheme not in self.rules.allowed_schemes:
            raise InvalidProtocolError()

        return urlunsplit(
            (
                scheme,
                self._canonical_netloc(scheme, parts),
                quote(parts.path, safe=_PATH_SAFE) or "/",
                quote(parts.query, safe=_QUERY_SAFE),
                parts.fragment,
            )
        )

    @staticmethod
    def _split(url: str) -> SplitResult:
        candidate = url.strip()
        if not candidate:
            raise InvalidUrlFormatError()
        try:
            parts = urlsplit(candidate)
            if parts.scheme.lower() in _HOST_REQUIRED_SCHEMES and not parts.netloc:
                # "http:example.com" and "https:/example.com" name a host, as browsers read them.
                remainder = candidate[len(parts.scheme) + 1 :].lstrip("/")
                parts = urlsplit(f"{parts.scheme}://{remainder}")
            # Accessing .port validates it.
            parts.port
        except ValueError as e:
            raise InvalidUrlFormatError() from e

        if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
            raise InvalidUrlFormatError()
        if parts.scheme.lower() in _HOST_REQUIRED_SCHEMES and not parts.hostname:
            raise InvalidUrlFormatError()
        if any(ch.isspace() for ch in parts.netloc):
            raise InvalidUrlFormatError()
        if not parts.netloc and not parts.path:
            raise InvalidUrlFormatError()
        return parts

    @staticmethod
    def _canonical_netloc(scheme: str, parts: SplitResult) -> str:
        host = parts.hostname or ""
        if ":" in host:
            host = f"[{host}]"
        elif not host.isascii():
            try:
                host = host.encode("idna").decode("ascii")
            except UnicodeError as e:
                raise InvalidUrlFormatError() from e

        port = parts.port
        if port is not None and port != _DEFAULT_PORTS.get(scheme):
            host = f"{host}:{port}"

        userinfo, sep, _ = parts.netloc.rpartition("@")
        if sep:
            return f"{userinfo}@{host}"
        return host


def is_absolute_url(url: str) -> bool:
    """True for URLs with a scheme, and a host where the scheme requires one."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return False
    if parts.scheme.lower() in _HOST_REQUIRED_SCHEMES and not parts.netloc:
        return False
    return True

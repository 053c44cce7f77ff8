"""URL validation for outbound requests."""

from .validation import URLValidationRules, UrlGuard, is_absolute_url

__all__ = ["URLValidationRules", "UrlGuard", "is_absolute_url"]

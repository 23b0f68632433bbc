"""Exceptions raised by the cleaning engine and the rule provider."""

from typing import Optional


class LinkscrubError(Exception):
    """Base class for all linkscrub errors."""


class InvalidUrlError(LinkscrubError, ValueError):
    """Raised when a string cannot be parsed as an absolute URL."""


class UrlBlockedError(LinkscrubError):
    """Raised when a complete provider matches: the URL must not be used at all."""

    def __init__(self, url: str, provider: Optional[str] = None):
        self.url = url
        self.provider = provider
        super().__init__(f"URL blocked by provider {provider or '?'}: {url}")


class RulesFetchError(LinkscrubError):
    """A single refresh of the rule database failed."""


class IntegrityError(RulesFetchError):
    """Fetched rule document does not match its published SHA-256 hash."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Hash validation failed. Expected: {expected}, Actual: {actual}")


class RulesUnavailableError(LinkscrubError):
    """No rules could be fetched and no cached copy exists."""

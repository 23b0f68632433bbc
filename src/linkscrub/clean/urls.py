"""URL parsing and normalization for the cleaning engine."""

import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

from ..errors import InvalidUrlError

SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*$")

# Schemes that always carry a host and a path
SPECIAL_SCHEMES = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
}


def parse_url(url: str) -> SplitResult:
    """
    Parse an absolute URL and normalize it the way browsers serialize it.

    Scheme and host are lowercased, default ports dropped and an empty
    path on http(s)-like schemes becomes "/".

    Args:
        url: Absolute URL

    Returns:
        Normalized SplitResult

    Raises:
        InvalidUrlError: If url is not an absolute URL
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError(f"Invalid URL: {url!r}")

    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL: {url!r}") from e

    scheme = parts.scheme.lower()
    if not scheme or not SCHEME_RE.match(scheme):
        raise InvalidUrlError(f"Invalid URL: {url!r}")

    if scheme not in SPECIAL_SCHEMES:
        return parts._replace(scheme=scheme)

    if not parts.hostname:
        raise InvalidUrlError(f"Invalid URL: {url!r}")

    netloc = _normalize_netloc(parts, port, SPECIAL_SCHEMES[scheme])
    path = parts.path or "/"
    return SplitResult(scheme, netloc, path, parts.query, parts.fragment)


def _normalize_netloc(parts: SplitResult, port: Optional[int], default_port: int) -> str:
    userinfo, _, _ = parts.netloc.rpartition("@")
    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    netloc = f"{userinfo}@{host}" if userinfo else host
    if port is not None and port != default_port:
        netloc = f"{netloc}:{port}"
    return netloc


def normalize_url(url: str) -> str:
    """Return the normalized string form of url (raises InvalidUrlError)."""
    return urlunsplit(parse_url(url))


def origin(url: str) -> str:
    """scheme://host[:port] of an absolute URL."""
    parts = parse_url(url)
    return f"{parts.scheme}://{parts.netloc.rpartition('@')[2]}"

"""Apply a provider's parameter, fragment and raw rules to a URL."""

from typing import List, Optional, Tuple
from urllib.parse import unquote_plus, urlunsplit

from .urls import normalize_url, parse_url
from ..errors import InvalidUrlError, UrlBlockedError
from ..rules.patterns import CompiledProvider
from ..logging import get_logger

logger = get_logger(__name__)

FragmentPairs = List[Tuple[str, Optional[str]]]


def clean_query(query: str, provider: CompiledProvider) -> str:
    """
    Drop every query pair whose decoded key matches a provider rule.

    Surviving pairs keep their original encoding and relative order;
    repeated keys are tested one by one.
    """
    if not query:
        return query

    kept = []
    for segment in query.split("&"):
        if not segment:
            continue
        key = unquote_plus(segment.split("=", 1)[0])
        if provider.removes_key(key):
            continue
        kept.append(segment)
    return "&".join(kept)


def parse_fragment(fragment: str) -> FragmentPairs:
    """
    Split a fragment into key/value pairs.

    "key" and "key=" both yield a None value.
    """
    pairs: FragmentPairs = []
    if not fragment:
        return pairs
    for token in fragment.split("&"):
        key, _, value = token.partition("=")
        if not key:
            continue
        pairs.append((key, value or None))
    return pairs


def build_fragment(pairs: FragmentPairs) -> str:
    return "&".join(key if value is None else f"{key}={value}" for key, value in pairs)


def clean_fragment(fragment: str, provider: CompiledProvider) -> str:
    pairs = [(k, v) for k, v in parse_fragment(fragment) if not provider.removes_key(k)]
    return build_fragment(pairs)


def apply_raw_rules(url: str, provider: CompiledProvider) -> str:
    """
    Remove every raw-rule match from the whole URL text.

    Falls back to the input when the rewritten text is no longer a URL.
    """
    cleaned = url
    for pattern in provider.raw_rules:
        cleaned = pattern.sub("", cleaned)

    if cleaned == url:
        return url
    try:
        return normalize_url(cleaned)
    except InvalidUrlError:
        logger.warning(f"Raw rules of {provider.name} produced an invalid URL, keeping {url}")
        return url


def apply_rules(url: str, provider: Optional[CompiledProvider]) -> str:
    """
    Clean url with the rules of one provider.

    Args:
        url: Absolute URL
        provider: Provider returned by match_provider (None leaves the URL as is)

    Returns:
        Normalized, cleaned URL

    Raises:
        UrlBlockedError: If the provider is a complete provider
        InvalidUrlError: If url cannot be parsed
    """
    parts = parse_url(url)
    href = urlunsplit(parts)

    if provider is None:
        return href

    if provider.complete_provider:
        raise UrlBlockedError(href, provider.name)

    if provider.is_exception(href):
        logger.debug(f"{href} is an exception of {provider.name}")
        return href

    if provider.rules:
        parts = parts._replace(
            query=clean_query(parts.query, provider),
            fragment=clean_fragment(parts.fragment, provider),
        )
        href = urlunsplit(parts)

    if provider.raw_rules:
        href = apply_raw_rules(href, provider)

    return href

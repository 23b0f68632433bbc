"""Redirect resolution: declared URL-in-URL redirectors, then a live probe."""

from typing import Optional
from urllib.parse import unquote

import httpx

from .matcher import Rules, match_provider
from .urls import origin, parse_url
from ..config import BROWSER_HEADERS, HTTP_TIMEOUT
from ..logging import get_logger

logger = get_logger(__name__)

# Some servers reject HEAD with one of these; the probe is retried with GET
RETRY_WITH_GET = {404, 405}


def extract_redirect_location(url: str, response: httpx.Response) -> Optional[str]:
    """
    Read the redirect target of a 3xx response.

    Args:
        url: URL the request was sent to
        response: Response received with redirects disabled

    Returns:
        Absolute target URL, or None if the response is not a redirect
    """
    if not 300 <= response.status_code < 400:
        return None
    location = response.headers.get("Location")
    if not location:
        return None
    if location.startswith("//"):
        return f"{parse_url(url).scheme}:{location}"
    if location.startswith("/"):
        return origin(url) + location
    return location


def find_declared_redirect(url: str, rules: Rules) -> Optional[str]:
    """Extract the embedded target of a known redirector link, without network access."""
    provider = match_provider(url, rules)
    if provider is None or not provider.redirections:
        return None

    for pattern in provider.redirections:
        match = pattern.search(url)
        if match and match.groups() and match.group(1):
            return unquote(match.group(1))
    return None


class RedirectResolver:
    """Finds where a URL leads: first from the rules, then over HTTP."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        probe_network: bool = True,
        timeout: Optional[float] = None,
    ):
        self.probe_network = probe_network
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=timeout or HTTP_TIMEOUT,
            follow_redirects=False,
        )

    def resolve(self, url: str, rules: Rules) -> Optional[str]:
        """
        Find the next hop for url.

        Args:
            url: Normalized absolute URL
            rules: Rule set used to detect declared redirections

        Returns:
            Target URL, or None if url does not redirect
        """
        target = find_declared_redirect(url, rules)
        if target:
            logger.debug(f"Declared redirection {url} -> {target}")
            return target

        if not self.probe_network:
            return None
        return self.probe(url)

    def probe(self, url: str) -> Optional[str]:
        """Ask the server where url redirects to (HEAD, then GET if HEAD is refused)."""
        try:
            response = self.client.head(url, headers=BROWSER_HEADERS, follow_redirects=False)
            target = extract_redirect_location(url, response)
            if target:
                logger.debug(f"HTTP redirect {url} -> {target} ({response.status_code})")
                return target

            if response.status_code in RETRY_WITH_GET:
                # Stream so only the status line and headers are read
                with self.client.stream(
                    "GET", url, headers=BROWSER_HEADERS, follow_redirects=False
                ) as response:
                    return extract_redirect_location(url, response)

            return None

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Redirect probe failed for {url}: {e}")
            return None

    def close(self) -> None:
        """Close the HTTP client if this resolver created it."""
        if self._owns_client:
            self.client.close()

    def __del__(self):
        """Close HTTP client on cleanup."""
        if hasattr(self, "client"):
            self.close()

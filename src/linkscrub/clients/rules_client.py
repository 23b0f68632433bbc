"""HTTP client for the upstream rule database and its published hash."""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple

import httpx

from ..config import HASH_URL, HTTP_TIMEOUT, RULES_URL, USER_AGENT
from ..errors import RulesFetchError
from ..logging import get_logger

logger = get_logger(__name__)


class RulesClient:
    """Downloads the rule document and its hash."""

    def __init__(
        self,
        rules_url: Optional[str] = None,
        hash_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.rules_url = rules_url or RULES_URL
        self.hash_url = hash_url or HASH_URL
        self._owns_client = client is None
        self.client = client or httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=HTTP_TIMEOUT,
            follow_redirects=True,
        )

    def _get(self, url: str, what: str) -> httpx.Response:
        try:
            response = self.client.get(url)
        except httpx.HTTPError as e:
            raise RulesFetchError(f"Failed to fetch {what}: {e}") from e
        if not response.is_success:
            raise RulesFetchError(f"Failed to fetch {what}: {response.status_code}")
        return response

    def fetch(self) -> Tuple[bytes, str]:
        """
        Fetch the rule document and its hash concurrently.

        Returns:
            (document bytes exactly as served, published hash text)

        Raises:
            RulesFetchError: If either request fails or is not successful
        """
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="rules-fetch") as executor:
            rules_future = executor.submit(self._get, self.rules_url, "rules")
            hash_future = executor.submit(self._get, self.hash_url, "hash")
            rules_response = rules_future.result()
            hash_response = hash_future.result()

        logger.debug(
            f"Fetched rules ({len(rules_response.content)} bytes) and hash from {self.rules_url}"
        )
        return rules_response.content, hash_response.text

    def close(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._owns_client:
            self.client.close()

    def __del__(self):
        """Close HTTP client on cleanup."""
        if hasattr(self, "client"):
            self.close()

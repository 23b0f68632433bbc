"""Disk-based stores for the rule database and cleaned responses."""

import hashlib
from pathlib import Path
from typing import Optional
import diskcache

from ..config import CACHE_DIR, RESPONSE_CACHE_TTL, RULES_CACHE_KEY
from ..rules.model import CachedRuleSet
from ..logging import get_logger

logger = get_logger(__name__)


class RuleStore:
    """Durable single-record store for the verified rule database."""

    def __init__(self, cache_dir: Optional[Path] = None, key: str = RULES_CACHE_KEY):
        cache_dir = cache_dir or CACHE_DIR / "rules"
        self.cache = diskcache.Cache(str(cache_dir))
        self.key = key

    def get(self) -> Optional[CachedRuleSet]:
        """Get the cached rule record, if any."""
        raw = self.cache.get(self.key)
        if raw is None:
            return None
        return CachedRuleSet.model_validate(raw)

    def put(self, record: CachedRuleSet) -> None:
        """Replace the cached rule record as a whole."""
        # diskcache writes each key in a single SQLite transaction
        self.cache.set(self.key, record.model_dump(mode="json"))
        logger.debug(f"Stored rule record {record.hash}")

    def close(self) -> None:
        self.cache.close()


class ResponseCache:
    """Cleaned URLs by requested URL, expiring after RESPONSE_CACHE_TTL."""

    def __init__(self, cache_dir: Optional[Path] = None, ttl: int = RESPONSE_CACHE_TTL):
        cache_dir = cache_dir or CACHE_DIR / "responses"
        self.cache = diskcache.Cache(str(cache_dir))
        self.ttl = ttl

    def _make_key(self, url: str) -> str:
        """Create a cache key."""
        if len(url) > 100:
            url = hashlib.sha256(url.encode()).hexdigest()
        return f"clean:{url}"

    def get(self, url: str) -> Optional[str]:
        """Get cached cleaned URL."""
        result = self.cache.get(self._make_key(url))
        if result is not None:
            logger.debug(f"Cache hit for {url}")
        return result

    def set(self, url: str, cleaned: str) -> None:
        """Cache a cleaned URL."""
        self.cache.set(self._make_key(url), cleaned, expire=self.ttl)

    def delete(self, url: str) -> bool:
        """Remove a cached entry. Returns False if there was none."""
        return self.cache.delete(self._make_key(url))

    def close(self) -> None:
        self.cache.close()

"""Rule set provider: verified, time-bounded cache of the upstream rule database."""

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import ValidationError

from .model import CachedRuleSet, RuleSet
from .overlay import apply_custom_rules
from .patterns import CompiledRuleSet
from ..cache.store import RuleStore
from ..clients.rules_client import RulesClient
from ..config import RULES_CACHE_TTL
from ..errors import IntegrityError, RulesFetchError, RulesUnavailableError
from ..logging import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class RuleSetProvider:
    """
    Serves the rule database to the cleaning engine.

    The cached copy is used while fresh. Once expired it is refreshed from
    upstream and verified against the published SHA-256 hash; if that fails
    the stale copy keeps being served. The custom rule overlay is applied
    on every read and never written back.
    """

    def __init__(
        self,
        store: Optional[RuleStore] = None,
        client: Optional[RulesClient] = None,
        clock: Callable[[], datetime] = utcnow,
        ttl: int = RULES_CACHE_TTL,
        custom_rules: Optional[Dict[str, List[str]]] = None,
    ):
        self.store = store or RuleStore()
        self.client = client or RulesClient()
        self.clock = clock
        self.ttl = timedelta(seconds=ttl)
        self.custom_rules = custom_rules
        self._compiled: Optional[Tuple[str, CompiledRuleSet]] = None

    def get_rules(self) -> RuleSet:
        """
        Get the current rule set with the custom overlay applied.

        Raises:
            RulesUnavailableError: If nothing is cached and the refresh failed
        """
        return apply_custom_rules(self.current_record().data, self.custom_rules)

    def get_compiled_rules(self) -> CompiledRuleSet:
        """
        Get the current rule set, overlaid and compiled.

        The compiled table is rebuilt only when the upstream hash changes.

        Raises:
            RulesUnavailableError: If nothing is cached and the refresh failed
        """
        record = self.current_record()
        if self._compiled is None or self._compiled[0] != record.hash:
            rules = apply_custom_rules(record.data, self.custom_rules)
            self._compiled = (record.hash, CompiledRuleSet.from_rule_set(rules))
            logger.debug(f"Compiled rules {record.hash}")
        return self._compiled[1]

    def current_record(self) -> CachedRuleSet:
        """
        Get the cached record, refreshing it first if it has expired.

        Raises:
            RulesUnavailableError: If nothing is cached and the refresh failed
        """
        cached = self.store.get()
        if cached is not None and cached.is_fresh(self.clock()):
            logger.debug(f"Using cached rules {cached.hash}")
            return cached

        try:
            logger.info("Fetching fresh rules")
            return self.refresh()
        except RulesFetchError as e:
            if cached is None:
                logger.error(f"Failed to get rules and no cached fallback available: {e}")
                raise RulesUnavailableError(
                    "Failed to get rules and no cached fallback available"
                ) from e
            logger.warning(f"Falling back to expired cached rules {cached.hash}: {e}")
            return cached

    def refresh(self) -> CachedRuleSet:
        """
        Fetch, verify and persist the upstream rule database.

        Raises:
            RulesFetchError: On network failure, non-2xx status or invalid document
            IntegrityError: If the document does not match the published hash
        """
        document, published_hash = self.client.fetch()

        expected = published_hash.strip().lower()
        actual = sha256_hex(document)
        if actual != expected:
            raise IntegrityError(expected, actual)

        try:
            rule_set = RuleSet.parse_document(document.decode("utf-8"))
        except (ValueError, ValidationError) as e:
            raise RulesFetchError(f"Invalid rule document: {e}") from e

        now = self.clock()
        record = CachedRuleSet(
            data=rule_set,
            hash=actual,
            cached_at=now,
            expires_at=now + self.ttl,
        )
        self.store.put(record)
        logger.info(f"Cached rules with hash: {actual}")
        return record

"""Validated regex table built once per delivered rule set."""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from re import Pattern
from typing import List, Optional, Tuple

from .model import GLOBAL_PROVIDER, Provider, RuleSet
from ..logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=8192)
def compile_pattern(source: str, flags: int = 0) -> Optional[Pattern[str]]:
    """
    Compile a pattern from the rule database.

    Invalid patterns are logged once and cached as None, so callers
    skip them for the lifetime of the process instead of retrying.

    Args:
        source: Regex source as authored upstream
        flags: re flags

    Returns:
        Compiled pattern, or None if the source is not a valid regex
    """
    try:
        return re.compile(source, flags)
    except re.error as e:
        logger.warning(f"Skipping invalid pattern {source!r}: {e}")
        return None


def _compile_all(sources: List[str], flags: int = 0) -> Tuple[Pattern[str], ...]:
    compiled = (compile_pattern(s, flags) for s in sources)
    return tuple(p for p in compiled if p is not None)


@dataclass(frozen=True)
class CompiledProvider:
    """A provider with every pattern compiled; invalid ones are dropped."""

    name: str
    url_pattern: Optional[Pattern[str]]
    complete_provider: bool = False
    rules: Tuple[Pattern[str], ...] = field(default_factory=tuple)
    raw_rules: Tuple[Pattern[str], ...] = field(default_factory=tuple)
    exceptions: Tuple[Pattern[str], ...] = field(default_factory=tuple)
    redirections: Tuple[Pattern[str], ...] = field(default_factory=tuple)

    @classmethod
    def from_provider(cls, name: str, provider: Provider) -> "CompiledProvider":
        return cls(
            name=name,
            # urlPattern is matched case-sensitively, as authored
            url_pattern=compile_pattern(provider.url_pattern),
            complete_provider=provider.complete_provider,
            # Anchored as ^rule$, not ^(?:rule)$
            rules=_compile_all([f"^{rule}$" for rule in provider.rules], re.IGNORECASE),
            raw_rules=_compile_all(provider.raw_rules, re.IGNORECASE),
            exceptions=_compile_all(provider.exceptions, re.IGNORECASE),
            redirections=_compile_all(provider.redirections, re.IGNORECASE),
        )

    def matches(self, url: str) -> bool:
        return self.url_pattern is not None and self.url_pattern.search(url) is not None

    def is_exception(self, url: str) -> bool:
        return any(p.search(url) for p in self.exceptions)

    def removes_key(self, key: str) -> bool:
        """True if any anchored parameter rule matches the key."""
        return any(p.search(key) for p in self.rules)


@dataclass(frozen=True)
class CompiledRuleSet:
    """Ordered specific providers plus the global fallback."""

    providers: Tuple[CompiledProvider, ...]
    global_provider: Optional[CompiledProvider] = None

    @classmethod
    def from_rule_set(cls, rule_set: RuleSet) -> "CompiledRuleSet":
        providers = tuple(
            CompiledProvider.from_provider(name, provider)
            for name, provider in rule_set.ordered_providers()
        )
        global_provider = None
        if rule_set.global_provider is not None:
            global_provider = CompiledProvider.from_provider(GLOBAL_PROVIDER, rule_set.global_provider)
        return cls(providers=providers, global_provider=global_provider)

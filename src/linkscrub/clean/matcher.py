"""Provider selection for a URL."""

from typing import Optional, Union

from ..rules.model import RuleSet
from ..rules.patterns import CompiledProvider, CompiledRuleSet

Rules = Union[RuleSet, CompiledRuleSet]


def compiled(rules: Rules) -> CompiledRuleSet:
    """Accept either a parsed rule set or its compiled table."""
    if isinstance(rules, CompiledRuleSet):
        return rules
    return CompiledRuleSet.from_rule_set(rules)


def match_provider(url: str, rules: Rules) -> Optional[CompiledProvider]:
    """
    Select the provider responsible for url.

    Providers are tried in declaration order and the first whose urlPattern
    matches anywhere in the URL wins. The global fallback is never tested;
    it is returned when nothing else matches. Providers with an invalid
    urlPattern never match.

    Args:
        url: Normalized URL string
        rules: Rule set or compiled rule set

    Returns:
        Matching provider, the global fallback, or None if the rule set
        has no global entry
    """
    table = compiled(rules)
    for provider in table.providers:
        if provider.matches(url):
            return provider
    return table.global_provider

"""Local parameter rules layered over the upstream providers."""

from typing import Dict, List, Optional

from .model import RuleSet
from ..config import CUSTOM_RULES


def apply_custom_rules(
    rule_set: RuleSet,
    custom_rules: Optional[Dict[str, List[str]]] = None,
) -> RuleSet:
    """
    Return a copy of rule_set with the custom rules appended.

    Only providers already present upstream are extended, and rules they
    already declare are not repeated. rule_set itself is left untouched.

    Args:
        rule_set: Rule set as cached
        custom_rules: Provider name -> extra parameter rules (defaults to CUSTOM_RULES)

    Returns:
        New RuleSet
    """
    custom_rules = CUSTOM_RULES if custom_rules is None else custom_rules
    merged = rule_set.model_copy(deep=True)

    for name, extra in custom_rules.items():
        provider = merged.providers.get(name)
        if provider is None:
            continue
        for rule in extra:
            if rule not in provider.rules:
                provider.rules.append(rule)

    return merged

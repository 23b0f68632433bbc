"""Rule database models (ClearURLs wire format)."""

import json
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

GLOBAL_PROVIDER = "globalRules"


class Provider(BaseModel):
    """Cleaning rules for every URL matching urlPattern."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url_pattern: str = Field(..., alias="urlPattern")
    complete_provider: bool = Field(default=False, alias="completeProvider")
    rules: List[str] = Field(default_factory=list)
    raw_rules: List[str] = Field(default_factory=list, alias="rawRules")
    # Kept for round-tripping, no cleaning behavior is attached to these two
    referral_marketing: List[str] = Field(default_factory=list, alias="referralMarketing")
    force_redirection: bool = Field(default=False, alias="forceRedirection")
    exceptions: List[str] = Field(default_factory=list)
    redirections: List[str] = Field(default_factory=list)


class RuleSet(BaseModel):
    """All providers of the rule database, in declaration order."""

    model_config = ConfigDict(extra="ignore")

    providers: Dict[str, Provider] = Field(default_factory=dict)

    @classmethod
    def parse_document(cls, text: str) -> "RuleSet":
        """Parse the JSON rule document as published upstream."""
        return cls.model_validate(json.loads(text))

    @property
    def global_provider(self) -> Optional[Provider]:
        return self.providers.get(GLOBAL_PROVIDER)

    def ordered_providers(self) -> Iterator[Tuple[str, Provider]]:
        """Specific providers in declaration order, the global fallback excluded."""
        for name, provider in self.providers.items():
            if name != GLOBAL_PROVIDER:
                yield name, provider


class CachedRuleSet(BaseModel):
    """Persisted record of the last verified rule document."""

    data: RuleSet
    hash: str
    cached_at: datetime
    expires_at: datetime

    def is_fresh(self, now: datetime) -> bool:
        return now < self.expires_at

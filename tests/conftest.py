"""Shared fixtures: a sample of the ClearURLs rule database."""

import copy

import pytest

from linkscrub.clean.cleaner import UrlCleaner
from linkscrub.clean.redirects import RedirectResolver
from linkscrub.rules.model import RuleSet


SAMPLE_RULES = {
    "providers": {
        "google": {
            "urlPattern": r"^https?:\/\/(?:[a-z0-9-]+\.)*?google(?:\.[a-z]{2,}){1,}",
            "completeProvider": False,
            "rules": ["ved", "ei", "source", "gs_lcp", "aqs", "sourceid", "uact", "rlz", "sclient", "client"],
            "rawRules": [],
            "referralMarketing": [],
            "exceptions": [r"^https?:\/\/mail\.google\.com\/"],
            "redirections": [r"^https?:\/\/(?:[a-z0-9-]+\.)*?google(?:\.[a-z]{2,}){1,}\/url\?.*?(?:url|q)=(https?[^&]+)"],
            "forceRedirection": True,
        },
        "youtube": {
            "urlPattern": r"^https?:\/\/(?:[a-z0-9-]+\.)*?(youtube\.com|youtu\.be)",
            "completeProvider": False,
            "rules": ["feature", "gclid", "si", "pp", "ab_channel"],
            "rawRules": [],
            "referralMarketing": [],
            "exceptions": [],
            "redirections": [],
            "forceRedirection": False,
        },
        "amazon": {
            "urlPattern": r"^https?:\/\/(?:[a-z0-9-]+\.)*?amazon(?:\.[a-z]{2,}){1,}",
            "completeProvider": False,
            "rules": ["qid", "sr", "ref_?", "keywords", "sprefix", "tag", "linkCode", "camp", "creative", "creativeASIN", "psc"],
            "rawRules": [r"\/ref=[^\/?]*"],
            "referralMarketing": [],
            "exceptions": [],
            "redirections": [],
            "forceRedirection": False,
        },
        "tiktok": {
            "urlPattern": r"^https?:\/\/(?:[a-z0-9-]+\.)*?tiktok\.com",
            "completeProvider": False,
            "rules": ["u_code", "_d", "_t", "timestamp", "share_app_name", "_r", "checksum", "language"],
            "rawRules": [],
            "referralMarketing": [],
            "exceptions": [],
            "redirections": [],
            "forceRedirection": False,
        },
        "duckduckgo": {
            "urlPattern": r"^https?:\/\/(?:[a-z0-9-]+\.)*?duckduckgo\.com",
            "rules": [],
            "redirections": [r"^https?:\/\/duckduckgo\.com\/l\/.*?uddg=([^&]+)"],
        },
        "doubleclick": {
            "urlPattern": r"^https?:\/\/(?:[a-z0-9-]+\.)*?doubleclick\.net",
            "completeProvider": True,
        },
        "globalRules": {
            "urlPattern": ".*",
            "completeProvider": False,
            "rules": [
                "utm_source",
                "utm_medium",
                "utm_campaign",
                "utm_term",
                "utm_content",
                "mtm_campaign",
                "mtm_kwd",
                "ga_source",
                "ga_medium",
                "ga_term",
                "ga_content",
                "ga_campaign",
                "yclid",
                "_openstat",
                "fbclid",
                "gclid",
                "msclkid",
            ],
            "rawRules": [],
            "referralMarketing": [],
            "exceptions": [],
            "redirections": [],
            "forceRedirection": False,
        },
    }
}


@pytest.fixture
def rules_document():
    """Raw rule document as a dict (safe to modify)."""
    return copy.deepcopy(SAMPLE_RULES)


@pytest.fixture
def rule_set(rules_document):
    return RuleSet.model_validate(rules_document)


@pytest.fixture
def offline_cleaner():
    """Cleaner that only follows redirections declared in the rules."""
    return UrlCleaner(resolver=RedirectResolver(probe_network=False))

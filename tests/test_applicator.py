"""Tests for query, fragment and raw rule application."""

import pytest

from linkscrub.clean.applicator import (
    apply_rules,
    build_fragment,
    clean_query,
    parse_fragment,
)
from linkscrub.clean.matcher import match_provider
from linkscrub.errors import InvalidUrlError, UrlBlockedError
from linkscrub.rules.model import Provider
from linkscrub.rules.patterns import CompiledProvider


def make_provider(**fields):
    fields.setdefault("urlPattern", ".*")
    return CompiledProvider.from_provider("test", Provider.model_validate(fields))


def clean(url, rule_set):
    return apply_rules(url, match_provider(url, rule_set))


def test_global_tracking_parameters(rule_set):
    url = "https://example.com?utm_source=test&utm_medium=email&normal=keep"
    assert clean(url, rule_set) == "https://example.com/?normal=keep"


def test_provider_parameters(rule_set):
    url = "https://youtube.com/watch?v=abc123&feature=share&si=trackingid&t=30"
    assert clean(url, rule_set) == "https://youtube.com/watch?v=abc123&t=30"


def test_provider_rules_replace_global_rules(rule_set):
    """Only the matched provider's rules apply; utm_source survives on YouTube."""
    url = "https://youtube.com/watch?v=abc&utm_source=x"
    assert clean(url, rule_set) == "https://youtube.com/watch?v=abc&utm_source=x"


def test_rules_are_anchored_and_case_insensitive():
    provider = make_provider(rules=["ref_?"])
    assert clean_query("REF=1&ref_=2&reference=3&xref=4", provider) == "reference=3&xref=4"


def test_rules_with_alternation_are_anchored_per_branch():
    """^utm_source|fbclid$ strips keys starting with utm_source or ending with fbclid."""
    provider = make_provider(rules=["utm_source|fbclid"])
    assert clean_query("utm_source_x=1&x_fbclid=1&keep=1&xutm_source=1", provider) == "keep=1&xutm_source=1"
    assert provider.removes_key("UTM_SOURCE")
    assert not provider.removes_key("fbclid_x")


def test_duplicate_keys_are_kept_in_order():
    provider = make_provider(rules=["t"])
    assert clean_query("a=1&t=2&a=3&t=4&b=5", provider) == "a=1&a=3&b=5"


def test_query_encoding_is_preserved():
    provider = make_provider(rules=["utm_source"])
    assert clean_query("q=a%20b+c&utm%5Fsource=x", provider) == "q=a%20b+c"


def test_all_parameters_removed_drops_question_mark(rule_set):
    assert clean("https://example.com/path?utm_source=x", rule_set) == "https://example.com/path"


def test_fragment_parameters(rule_set):
    url = "https://example.com/page?normal=keep&utm_source=test#utm_campaign=fragment&other=stay"
    assert clean(url, rule_set) == "https://example.com/page?normal=keep#other=stay"


def test_fragment_emptied_has_no_hash(rule_set):
    assert clean("https://example.com/#utm_source=x", rule_set) == "https://example.com/"


def test_fragment_key_normalization(rule_set):
    """#key and #key= are the same thing."""
    assert clean("https://example.com/#anchor=", rule_set) == "https://example.com/#anchor"
    assert clean("https://example.com/#anchor", rule_set) == "https://example.com/#anchor"


def test_parse_fragment():
    assert parse_fragment("a=1&b&c=&=x&d=e=f") == [
        ("a", "1"),
        ("b", None),
        ("c", None),
        ("d", "e=f"),
    ]
    assert parse_fragment("") == []


def test_build_fragment():
    assert build_fragment([("a", "1"), ("b", None)]) == "a=1&b"
    assert build_fragment([]) == ""


def test_exception_leaves_url_untouched(rule_set):
    url = "https://mail.google.com/mail/u/0/?ved=1#inbox"
    assert clean(url, rule_set) == url


def test_complete_provider_blocks(rule_set):
    with pytest.raises(UrlBlockedError) as excinfo:
        clean("https://ad.doubleclick.net/click?x=1", rule_set)
    assert excinfo.value.provider == "doubleclick"


def test_raw_rules_run_after_parameter_rules(rule_set):
    url = "https://www.amazon.com/dp/B000TEST/ref=sr_1_1?keywords=x&th=1"
    assert clean(url, rule_set) == "https://www.amazon.com/dp/B000TEST?th=1"


def test_raw_rules_apply_in_order():
    provider = make_provider(rawRules=["abc", "xy"])
    assert apply_rules("https://example.com/xabcy", provider) == "https://example.com/"


def test_invalid_raw_rule_is_skipped():
    provider = make_provider(rawRules=["(unclosed", r"\/track"])
    assert apply_rules("https://example.com/track/page", provider) == "https://example.com/page"


def test_raw_rules_cannot_break_the_url():
    provider = make_provider(rawRules=[r"^https?:\/\/"])
    assert apply_rules("https://example.com/page", provider) == "https://example.com/page"


def test_no_provider_only_normalizes():
    assert apply_rules("HTTPS://Example.COM:443", None) == "https://example.com/"


def test_invalid_url_raises():
    with pytest.raises(InvalidUrlError):
        apply_rules("not-a-valid-url", make_provider(rules=["a"]))

"""Cleaning orchestrator: follow redirects, then strip tracking from the final URL."""

from dataclasses import dataclass
from typing import Optional, Set

from .applicator import apply_rules
from .matcher import Rules, compiled, match_provider
from .redirects import RedirectResolver
from .urls import normalize_url
from ..config import MAX_REDIRECTS
from ..errors import InvalidUrlError, UrlBlockedError
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CleanResult:
    """Outcome of one clean() call."""

    url: str
    blocked: bool = False


class UrlCleaner:
    """Turns any URL into its final, tracking-free form on a best-effort basis."""

    def __init__(
        self,
        resolver: Optional[RedirectResolver] = None,
        max_redirects: int = MAX_REDIRECTS,
    ):
        self.resolver = resolver or RedirectResolver()
        self.max_redirects = max_redirects

    def clean(self, input_url: str, rules: Rules, max_redirects: Optional[int] = None) -> CleanResult:
        """
        Clean a URL.

        Redirects are resolved first, at most max_redirects distinct URLs
        deep; rules are then applied once to the URL the chain ends on.
        Never raises: on any failure the input is returned unchanged.

        Args:
            input_url: URL as received from the caller
            rules: Rule set (or compiled rule set) to clean with
            max_redirects: Visit budget (defaults to the cleaner's)

        Returns:
            CleanResult; blocked is set when a complete provider refused the URL
        """
        budget = self.max_redirects if max_redirects is None else max_redirects
        try:
            table = compiled(rules)
            current = normalize_url(input_url)
            visited: Set[str] = set()

            while current not in visited and len(visited) < budget:
                visited.add(current)
                target = self.resolver.resolve(current, table)
                if not target:
                    break
                target = normalize_url(target)
                if target == current:
                    break
                logger.info(f"Following redirect {current} -> {target}")
                current = target

            return CleanResult(apply_rules(current, match_provider(current, table)))

        except UrlBlockedError as e:
            logger.info(f"Refusing to clean {input_url}: {e}")
            return CleanResult(input_url, blocked=True)
        except InvalidUrlError as e:
            logger.warning(f"Cannot clean {input_url!r}: {e}")
            return CleanResult(input_url)
        except Exception as e:
            logger.error(f"Error caught when trying to clean url {input_url}: {e}", exc_info=True)
            return CleanResult(input_url)


_default_cleaner: UrlCleaner | None = None


def clean_url(
    input_url: str,
    rules: Rules,
    max_redirects: int = MAX_REDIRECTS,
    cleaner: Optional[UrlCleaner] = None,
) -> str:
    """
    Clean a URL and return the resulting string (the input on any failure).

    Args:
        input_url: URL to clean
        rules: Rule set (or compiled rule set)
        max_redirects: Maximum number of distinct URLs visited while resolving redirects
        cleaner: Cleaner to use (defaults to a process-wide one with live probing)

    Returns:
        Cleaned URL
    """
    global _default_cleaner
    if cleaner is None:
        if _default_cleaner is None:
            _default_cleaner = UrlCleaner()
        cleaner = _default_cleaner
    return cleaner.clean(input_url, rules, max_redirects=max_redirects).url

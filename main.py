# ============================================================
# Command-line cleaning
# - Loads the rule set (cached, refreshed weekly, hash-verified)
# - Cleans every URL given on the command line
# - Prints one cleaned URL per line
# ============================================================

import sys

from src.linkscrub.clean.cleaner import UrlCleaner
from src.linkscrub.clean.redirects import RedirectResolver
from src.linkscrub.logging import setup_logging
from src.linkscrub.rules.provider import RuleSetProvider


def main(argv):
    if not argv:
        print("usage: python main.py [--offline] URL [URL ...]", file=sys.stderr)
        return 2

    offline = "--offline" in argv
    urls = [a for a in argv if a != "--offline"]

    setup_logging("WARNING")
    rules = RuleSetProvider().get_rules()
    cleaner = UrlCleaner(resolver=RedirectResolver(probe_network=not offline))

    for url in urls:
        result = cleaner.clean(url, rules)
        if result.blocked:
            print(f"{result.url}\t[blocked]")
        else:
            print(result.url)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))

"""Configuration management with environment variables."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Upstream rule database
RULES_URL = os.getenv("RULES_URL", "https://rules2.clearurls.xyz/data.minify.json")
HASH_URL = os.getenv("HASH_URL", "https://rules2.clearurls.xyz/rules.minify.hash")
RULES_CACHE_KEY = os.getenv("RULES_CACHE_KEY", "rules")

# Rule cache TTL (seconds)
RULES_CACHE_TTL = int(os.getenv("RULES_CACHE_TTL", "604800"))  # 7 days

# Cleaned response cache TTL (seconds)
RESPONSE_CACHE_TTL = int(os.getenv("RESPONSE_CACHE_TTL", "3600"))  # 1 hour

# Cache configuration
CACHE_DIR = Path(os.getenv("CACHE_DIR", ".cache"))
CACHE_DIR.mkdir(exist_ok=True)

# HTTP client configuration
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10.0"))
MAX_REDIRECTS = int(os.getenv("MAX_REDIRECTS", "5"))
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (X11; Linux x86_64; rv:143.0) Gecko/20100101 Firefox/143.0"
)

# Sent on redirect probes so that redirectors answer as they would to a browser
BROWSER_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate, br, zstd",
    "Sec-GPC": "1",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Connection": "keep-alive",
}

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Extra parameter rules merged on top of the upstream providers on every read
CUSTOM_RULES = {
    "youtube": ["si", "pp"],
    "tiktok": ["_t", "_r", "is_from_webapp", "sender_device", "web_id"],
}

"""FastAPI main application."""

from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse

from ..cache.store import ResponseCache
from ..clean.cleaner import UrlCleaner
from ..config import RESPONSE_CACHE_TTL
from ..errors import RulesUnavailableError
from ..logging import setup_logging, get_logger
from ..rules.provider import RuleSetProvider
from .models import HealthResponse

# Setup logging
setup_logging()
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="linkscrub",
    description="Strips tracking parameters and resolves redirects from URLs using the ClearURLs rules",
    version="0.1.0",
)

RESPONSE_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Cache-Control": f"public, max-age={RESPONSE_CACHE_TTL}",
}

# Services are initialized lazily on first request
_rules_provider: RuleSetProvider | None = None
_cleaner: UrlCleaner | None = None
_response_cache: ResponseCache | None = None


def get_rules_provider() -> RuleSetProvider:
    """Get or create the rule set provider."""
    global _rules_provider
    if _rules_provider is None:
        _rules_provider = RuleSetProvider()
    return _rules_provider


def get_cleaner() -> UrlCleaner:
    """Get or create the URL cleaner."""
    global _cleaner
    if _cleaner is None:
        _cleaner = UrlCleaner()
    return _cleaner


def get_response_cache() -> ResponseCache:
    """Get or create the response cache."""
    global _response_cache
    if _response_cache is None:
        _response_cache = ResponseCache()
    return _response_cache


def _text(body: str, status_code: int = 200, headers: Optional[dict] = None) -> PlainTextResponse:
    return PlainTextResponse(body, status_code=status_code, headers=headers)


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="ok")


@app.get("/")
def clean(
    url: Optional[str] = None,
    rules_provider: RuleSetProvider = Depends(get_rules_provider),
    cleaner: UrlCleaner = Depends(get_cleaner),
    response_cache: ResponseCache = Depends(get_response_cache),
):
    """
    Main endpoint: clean the URL given in the url query parameter.

    Returns the cleaned URL as plain text.
    """
    if not url:
        return _text("Missing url parameter", status_code=400)

    cached = response_cache.get(url)
    if cached is not None:
        return _text(cached, headers=RESPONSE_HEADERS)

    try:
        rules = rules_provider.get_compiled_rules()
    except RulesUnavailableError as e:
        logger.error(f"Error processing {url}: {e}", exc_info=True)
        return _text(f"Error processing URL: {e}", status_code=500)

    cleaned = cleaner.clean(url, rules).url
    response_cache.set(url, cleaned)
    logger.info(f"Cleaned {url} -> {cleaned}")
    return _text(cleaned, headers=RESPONSE_HEADERS)


@app.delete("/")
def forget(
    url: Optional[str] = None,
    response_cache: ResponseCache = Depends(get_response_cache),
):
    """Drop the cached response for url."""
    if not url:
        return _text("Missing url parameter", status_code=400)
    if response_cache.delete(url):
        return _text("Cache entry deleted")
    return _text("Cache entry not found", status_code=404)


@app.api_route("/", methods=["HEAD", "POST", "PUT", "PATCH", "OPTIONS", "TRACE"])
async def method_not_allowed():
    return _text("Method not allowed", status_code=405, headers={"Allow": "GET, DELETE"})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

"""Browser-facing relay to the WordPress REST API.

GET /api/wp?path=posts&per_page=3&_embed=true
    -> GET {WORDPRESS_URL}/wp-json/wp/v2/posts?per_page=3&_embed=true

Only a fixed set of resource types and query parameters gets through;
everything else is rejected (path) or dropped (params). Successful responses
are kept for a short freshness window so bursts of page views hit the CMS
once per window.
"""

import re
import time
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger

from lib.wordpress.config import WordPressConfig

router = APIRouter()

# ---------------------------------------------------------------------------
# Allow-lists
# ---------------------------------------------------------------------------

ALLOWED_PATHS = frozenset({
    "posts",
    "pages",
    "media",
    "categories",
    "tags",
})

ALLOWED_PARAMS = frozenset({
    "per_page",
    "page",
    "search",
    "slug",
    "include",
    "_embed",
})

# Path segments are plain identifiers: no dots, no query or fragment characters
_RE_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")


# ---------------------------------------------------------------------------
# Freshness cache
# ---------------------------------------------------------------------------


# Returned by ResponseCache.get on a miss; a cached body may itself be None
MISSING = object()


class ResponseCache:
    """Upstream URL -> parsed body, valid for ttl seconds. Oldest evicted when full."""

    def __init__(self, ttl: float = 60.0, max_entries: int = 500):
        self.ttl = ttl
        self.max_entries = max_entries
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Any:
        cached = self._entries.get(key)
        if cached is None:
            return MISSING
        data, ts = cached
        if time.monotonic() - ts < self.ttl:
            return data
        del self._entries[key]
        return MISSING

    def set(self, key: str, data: Any) -> None:
        if key not in self._entries and len(self._entries) >= self.max_entries:
            oldest = min(self._entries, key=lambda k: self._entries[k][1])
            del self._entries[oldest]
        self._entries[key] = (data, time.monotonic())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# ---------------------------------------------------------------------------
# Request filtering
# ---------------------------------------------------------------------------


def parse_path(path: str) -> Optional[str]:
    """Normalized upstream path, or None if it is not allowed."""
    segments = [s for s in path.split("/") if s]
    if not segments or segments[0] not in ALLOWED_PATHS:
        return None
    if not all(_RE_SEGMENT.match(s) for s in segments):
        return None
    return "/".join(segments)


def filter_params(request: Request) -> Dict[str, str]:
    """Keep only allow-listed keys (exact match, last value wins)."""
    params: Dict[str, str] = {}
    for key, value in request.query_params.multi_items():
        if key != "path" and key in ALLOWED_PARAMS:
            params[key] = value
    return params


def _error(status_code: int, body: dict) -> JSONResponse:
    return JSONResponse(body, status_code=status_code)


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------


@router.get("/api/wp")
async def wordpress_relay(request: Request):
    path = request.query_params.get("path")
    if not path:
        return _error(400, {"error": "Missing path parameter"})

    upstream_path = parse_path(path)
    if upstream_path is None:
        return _error(400, {"error": "Invalid path parameter"})

    params = filter_params(request)

    config: WordPressConfig = request.app.state.config
    if not config.is_configured:
        logger.error(
            "WordPress API URL is not configured. "
            "Please set WORDPRESS_URL or WORDPRESS_API_URL"
        )
        return _error(500, {
            "error": "Internal server error",
            "message": "WordPress API URL is not configured",
            "status": 500,
        })

    query = urlencode(params)
    url = f"{config.api_base}/{upstream_path}" + (f"?{query}" if query else "")
    cache: ResponseCache = request.app.state.relay_cache
    cache_headers = {"Cache-Control": f"public, max-age={int(cache.ttl)}"}

    cached = cache.get(url)
    if cached is not MISSING:
        logger.debug(f"[relay] cache hit {url}")
        return JSONResponse(cached, headers=cache_headers)

    logger.info(f"[relay] GET {url} params={params}")
    client: httpx.AsyncClient = request.app.state.http_client
    start = time.monotonic()
    try:
        resp = await client.get(url, headers={"Accept": "application/json"})
    except httpx.RequestError as e:
        logger.error(f"[relay] upstream error: {e}")
        return _error(500, {
            "error": "Failed to fetch from WordPress API",
            "details": f"Upstream request failed: {type(e).__name__}",
        })
    elapsed_ms = (time.monotonic() - start) * 1000
    logger.info(f"[relay] {url} -> {resp.status_code} ({elapsed_ms:.0f}ms)")

    if not resp.is_success:
        # Upstream body is logged, never forwarded
        logger.error(f"[relay] upstream {resp.status_code}: {resp.text[:500]}")
        return _error(500, {
            "error": "Failed to fetch from WordPress API",
            "details": (
                f"WordPress API request failed with status {resp.status_code}: "
                f"{resp.reason_phrase}"
            ),
        })

    try:
        data = resp.json()
    except ValueError:
        logger.error(f"[relay] invalid JSON from {url}")
        return _error(500, {
            "error": "Failed to fetch from WordPress API",
            "details": "Invalid JSON response from WordPress API",
        })

    cache.set(url, data)
    return JSONResponse(data, headers=cache_headers)

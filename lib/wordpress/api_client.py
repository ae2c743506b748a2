"""WordPress REST API client.

Thin async wrapper over /wp-json/wp/v2. One attempt per call, no retries,
no caching: every call sees the CMS as it is now.

Usage:
    async with WordPressApiClient(load_config()) as client:
        rooms = await client.list_rooms()
        page = await client.get_or_fail("pages", "about-us")

Failure policy differs per accessor and is part of the contract:
    list_by_type / list_amenities / list_points_of_interest / get_or_fail
        raise (ContentError subclasses)
    list_rooms / get_or_null / fetch_room_rates / get_media_url
        degrade to an empty value and log
"""

import asyncio
import time
from typing import Any, Dict, List, Mapping, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from lib.wordpress.config import WordPressConfig
from lib.wordpress.errors import (
    ContentError,
    MalformedResponseError,
    NotFoundError,
    RemoteRequestError,
)
from lib.wordpress.models import BetterFeaturedImage, ContentItem
from lib.wordpress.normalizer import format_rate

# Every call must observe the CMS's current state
NO_CACHE_HEADERS = {
    "Accept": "application/json",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

DEFAULT_PAGE_SIZE = 100
COLLECTION_PAGE_SIZE = 50

ROOMS = "rooms"
AMENITIES = "amenities"
POINTS_OF_INTEREST = "tourist-spots"


def build_query(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop unset values and render the rest the way WordPress expects."""
    query: Dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


def parse_items(data: Any, endpoint: str) -> List[ContentItem]:
    """Validate a collection response into ContentItems."""
    if not isinstance(data, list):
        raise MalformedResponseError(
            f"Expected a list from {endpoint}, got {type(data).__name__}"
        )
    try:
        return [ContentItem.model_validate(raw) for raw in data]
    except ValidationError as e:
        raise MalformedResponseError(f"Unexpected item shape from {endpoint}: {e}") from e


def merge_room_rates(
    rooms: List[ContentItem],
    rates: Mapping[int, Mapping[str, Any]],
    prefix: str = "K",
) -> List[ContentItem]:
    """Backfill room_rates from the acf-only rates lookup.

    Rooms that already carry a rate string are left untouched.
    """
    merged = []
    for room in rooms:
        price = (rates.get(room.id) or {}).get("price_per_night")
        if not room.room_rates and price:
            room = room.model_copy(update={"room_rates": format_rate(price, prefix)})
        merged.append(room)
    return merged


class WordPressApiClient:
    """Content accessors for the site's WordPress backend."""

    def __init__(
        self,
        config: WordPressConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not config.is_configured:
            if not config.is_production:
                config.require_base_url()
            logger.error("WordPress API URL is not configured")

        self.config = config
        self._http_client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> "WordPressApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
            )
        return self._http_client

    def build_url(self, endpoint: str) -> str:
        return f"{self.config.api_base}/{endpoint.lstrip('/')}"

    # ------------------------------------------------------------------
    # Generic fetch
    # ------------------------------------------------------------------

    async def fetch_resource(
        self, endpoint: str, params: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """GET {base}/wp-json/wp/v2/{endpoint} and return the parsed JSON.

        Raises:
            ConfigurationError: base URL unset
            RemoteRequestError: transport failure or non-2xx (carries status)
            MalformedResponseError: body is not JSON
        """
        self.config.require_base_url()
        url = self.build_url(endpoint)
        query = build_query(params)

        logger.debug(f"Fetching {url} params={query}")
        start = time.monotonic()
        try:
            resp = await self._get_client().get(url, params=query, headers=NO_CACHE_HEADERS)
        except httpx.RequestError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise RemoteRequestError(f"API request failed: {e}") from e
        elapsed_ms = (time.monotonic() - start) * 1000

        logger.info(f"GET {resp.url} -> {resp.status_code} ({elapsed_ms:.0f}ms)")

        if not resp.is_success:
            logger.error(f"API error: {resp.status_code} {resp.text[:500]}")
            raise RemoteRequestError(
                f"API request failed: {resp.status_code}", status=resp.status_code
            )

        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {resp.text[:200]!r}")
            raise MalformedResponseError(f"Invalid JSON response from {url}") from e

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def list_by_type(
        self,
        post_type: str,
        params: Optional[Mapping[str, Any]] = None,
        per_page: int = DEFAULT_PAGE_SIZE,
    ) -> List[ContentItem]:
        query = {"_embed": True, "per_page": per_page, **(params or {})}
        data = await self.fetch_resource(post_type, query)
        return parse_items(data, post_type)

    async def list_rooms(self, params: Optional[Mapping[str, Any]] = None) -> List[ContentItem]:
        """Rooms collection. Never raises: any failure yields [] so pages still render."""
        try:
            rooms = await self.list_by_type(ROOMS, params, per_page=COLLECTION_PAGE_SIZE)
        except ContentError as e:
            logger.error(f"Error in list_rooms: {e}")
            return []
        logger.info(f"Successfully fetched rooms: {len(rooms)}")
        return rooms

    async def list_amenities(self) -> List[ContentItem]:
        return await self.list_by_type(AMENITIES, per_page=COLLECTION_PAGE_SIZE)

    async def list_points_of_interest(self) -> List[ContentItem]:
        return await self.list_by_type(POINTS_OF_INTEREST, per_page=COLLECTION_PAGE_SIZE)

    # ------------------------------------------------------------------
    # Single items
    # ------------------------------------------------------------------

    async def get_or_fail(self, post_type: str, slug: str) -> ContentItem:
        """Item by slug. Raises NotFoundError when nothing matches."""
        items = await self.list_by_type(post_type, {"slug": slug})
        if not items:
            raise NotFoundError(post_type, slug)
        return items[0]

    async def get_or_null(self, post_type: str, slug: str) -> Optional[ContentItem]:
        """Item by slug, or None when missing or unreachable."""
        try:
            return await self.get_or_fail(post_type, slug)
        except NotFoundError:
            return None
        except ContentError as e:
            logger.error(f"Error fetching {post_type} by slug ({slug}): {e}")
            return None

    # ------------------------------------------------------------------
    # Best-effort enrichment
    # ------------------------------------------------------------------

    async def fetch_room_rates(self) -> Dict[int, Dict[str, Any]]:
        """id -> acf for every room. Failures are logged and yield {}."""
        try:
            data = await self.fetch_resource(
                ROOMS, {"_fields": "id,acf", "per_page": COLLECTION_PAGE_SIZE}
            )
        except ContentError as e:
            logger.warning(f"Could not fetch room rates: {e}")
            return {}

        if not isinstance(data, list):
            logger.warning(f"Could not fetch room rates: unexpected {type(data).__name__}")
            return {}

        rates: Dict[int, Dict[str, Any]] = {}
        for room in data:
            if isinstance(room, dict) and isinstance(room.get("acf"), dict) and "id" in room:
                rates[room["id"]] = room["acf"]
        return rates

    async def list_rooms_with_rates(self) -> List[ContentItem]:
        """Rooms with room_rates backfilled from acf prices.

        The two fetches are independent and run concurrently; the rates
        lookup is optional.
        """
        rooms, rates = await asyncio.gather(self.list_rooms(), self.fetch_room_rates())
        return merge_room_rates(rooms, rates, self.config.currency_prefix)

    async def get_media_url(self, media_id: int) -> Optional[str]:
        """source_url of a media item, or None."""
        try:
            media = await self.fetch_resource(f"media/{media_id}")
        except ContentError as e:
            logger.warning(f"Error fetching featured image {media_id}: {e}")
            return None
        if not isinstance(media, dict):
            return None
        return media.get("source_url") or None

    async def resolve_featured_images(self, items: List[ContentItem]) -> List[ContentItem]:
        """Look up featured images that were referenced but not embedded."""
        missing = [
            item for item in items
            if item.featured_media
            and not item.featured_media_items
            and not (item.better_featured_image and item.better_featured_image.source_url)
        ]
        if not missing:
            return items

        urls = await asyncio.gather(*(self.get_media_url(item.featured_media) for item in missing))
        found = {item.id: url for item, url in zip(missing, urls) if url}

        resolved = []
        for item in items:
            url = found.get(item.id)
            if url:
                item = item.model_copy(
                    update={"better_featured_image": BetterFeaturedImage(source_url=url)}
                )
            resolved.append(item)
        return resolved

"""Section loaders for the site's content pages.

Each loader applies the failure policy of its section:
    rooms        degrade to [] (the rooms accessor never raises)
    amenities    error message in SectionState, UI shows a retry action
    explore      same as amenities
    pages        NotFoundError propagates (route answers 404)
    posts        missing -> None
"""

from typing import List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from lib.wordpress.api_client import WordPressApiClient
from lib.wordpress.errors import ContentError
from lib.wordpress.models import ContentSummary, NormalizedRoom
from lib.wordpress.normalizer import normalize_room, normalize_rooms, summarize

AMENITIES_ERROR = "Failed to load amenities. Please try again later."
EXPLORE_ERROR = "Failed to load places to explore. Please try again later."


class SectionState(BaseModel):
    """What a list section renders: items, or an error with a retry action."""

    items: List[ContentSummary] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.items and self.error is None


async def load_rooms(client: WordPressApiClient) -> List[NormalizedRoom]:
    """Normalized rooms in CMS order, rates and images backfilled."""
    items = await client.list_rooms_with_rates()
    items = await client.resolve_featured_images(items)
    return normalize_rooms(items, client.config.currency_prefix)


async def load_room(client: WordPressApiClient, slug: str) -> Optional[NormalizedRoom]:
    item = await client.get_or_null("rooms", slug)
    if item is None:
        return None
    items = await client.resolve_featured_images([item])
    return normalize_room(items[0], client.config.currency_prefix)


async def load_amenities(client: WordPressApiClient) -> SectionState:
    try:
        items = await client.list_amenities()
    except ContentError as e:
        logger.error(f"Error fetching amenities: {e}")
        return SectionState(error=AMENITIES_ERROR)
    return SectionState(items=[summarize(item) for item in items])


async def load_points_of_interest(client: WordPressApiClient) -> SectionState:
    try:
        items = await client.list_points_of_interest()
    except ContentError as e:
        logger.error(f"Error fetching tourist spots: {e}")
        return SectionState(error=EXPLORE_ERROR)
    return SectionState(items=[summarize(item) for item in items])


async def load_page(client: WordPressApiClient, slug: str) -> ContentSummary:
    """Raises NotFoundError for unknown slugs."""
    item = await client.get_or_fail("pages", slug)
    return summarize(item)


async def load_post(client: WordPressApiClient, slug: str) -> Optional[ContentSummary]:
    item = await client.get_or_null("posts", slug)
    return summarize(item) if item else None

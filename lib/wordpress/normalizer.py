"""Room normalization.

Every shape quirk of the rooms endpoint is absorbed here so the rest of the
code only ever sees NormalizedRoom:

- acf.gallery may be a list, a single object, or missing
- the featured image may live in better_featured_image, in one of the
  embedded media sizes, in the embedded media itself, or nowhere
- the rate may be a pre-formatted string or a bare number in acf

Pure functions, no I/O.
"""

import re
from typing import Any, Iterable, List, Optional

from bs4 import BeautifulSoup

from lib.wordpress.models import ContentItem, ContentSummary, NormalizedRoom

CURRENCY_PREFIX = "K"
DEFAULT_ROOM_IMAGE = "/images/rooms/default-room.png"

# Descending preference for embedded media sizes
IMAGE_SIZE_PREFERENCE = ("large", "medium_large", "medium", "thumbnail")

_RE_NUMBER = re.compile(r"\d+(?:[.,]\d+)*")


def normalize_gallery(gallery: Any) -> List[Any]:
    """Always return a list: [] if absent, [obj] for a bare object."""
    if isinstance(gallery, list):
        return gallery
    if isinstance(gallery, dict):
        return [gallery]
    return []


def extract_plain_text(html: Optional[str]) -> str:
    """Strip markup from WordPress rich text and collapse whitespace."""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return " ".join(text.split())


def slug_to_title(slug: str) -> str:
    """deluxe-ocean-view -> Deluxe Ocean View"""
    words = [w for w in slug.split("-") if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def resolve_display_name(item: ContentItem) -> str:
    """Title, then featured_title, then the slug in title case, then Room {id}."""
    candidates = [
        extract_plain_text(item.title.rendered),
        (item.featured_title or "").strip(),
        slug_to_title(item.slug or ""),
    ]
    for name in candidates:
        if name:
            return name
    return f"Room {item.id}"


def _format_amount(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def format_rate(value: Any, prefix: str = CURRENCY_PREFIX) -> str:
    """Prefix a rate with the currency marker unless it already carries it."""
    text = _format_amount(value) if value is not None else ""
    if not text:
        return f"{prefix}0"
    if text.startswith(prefix):
        return text
    return f"{prefix}{text}"


def resolve_rate(
    rate_text: Any = None,
    price_per_night: Any = None,
    prefix: str = CURRENCY_PREFIX,
) -> str:
    """Pre-formatted rate string, then acf price, then the zero rate."""
    if rate_text not in (None, ""):
        return format_rate(rate_text, prefix)
    if price_per_night not in (None, "", 0, "0"):
        return format_rate(price_per_night, prefix)
    return f"{prefix}0"


def room_rate(item: ContentItem, prefix: str = CURRENCY_PREFIX) -> str:
    return resolve_rate(item.room_rates, item.acf_value("price_per_night"), prefix)


def parse_price(value: Any) -> float:
    """Numeric value of a price or rate string ("K1,250" -> 1250.0), 0 if none."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    match = _RE_NUMBER.search(str(value))
    if not match:
        return 0.0
    return float(match.group(0).replace(",", ""))


def resolve_image_url(item: ContentItem) -> str:
    """Pick the best available featured image. Always returns a usable URL."""
    if item.better_featured_image and item.better_featured_image.source_url:
        return item.better_featured_image.source_url

    media = item.featured_media_items
    if not media:
        return DEFAULT_ROOM_IMAGE
    featured = media[0]

    if featured.media_details:
        sizes = featured.media_details.sizes
        for size_name in IMAGE_SIZE_PREFERENCE:
            size = sizes.get(size_name)
            if size and size.source_url:
                return size.source_url

    if featured.source_url:
        return featured.source_url

    return DEFAULT_ROOM_IMAGE


def short_description(text: str) -> str:
    """Text up to the first period."""
    return text.split(".")[0].strip()


def describe(item: ContentItem) -> str:
    """Plain-text description, excerpt preferred over body."""
    description = ""
    if item.excerpt:
        description = extract_plain_text(item.excerpt.rendered)
    if not description:
        description = extract_plain_text(item.content.rendered)
    return description


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def room_details(
    rate: str,
    size: Optional[str] = None,
    bed_type: Optional[str] = None,
    capacity: Optional[int] = None,
) -> str:
    """One-line summary for pickers: K250 • 32 sqm • King • Sleeps 2"""
    parts = [rate, size, bed_type, f"Sleeps {capacity}" if capacity else ""]
    return " • ".join(p for p in parts if p)


def normalize_room(item: ContentItem, currency_prefix: str = CURRENCY_PREFIX) -> NormalizedRoom:
    rate = room_rate(item, currency_prefix)
    capacity = _to_int(item.max_guests) or _to_int(item.acf_value("max_guests"))
    size = item.room_size or item.acf_value("room_size") or item.acf_value("size")
    size = str(size) if size else None
    bed_type = item.bed_type or item.acf_value("bed_type")
    bed_type = str(bed_type) if bed_type else None
    features = item.acf_value("features", [])
    description = describe(item)

    price = parse_price(item.acf_value("price_per_night")) or parse_price(rate)

    return NormalizedRoom(
        id=item.id,
        slug=item.slug,
        name=resolve_display_name(item),
        rate=rate,
        price_per_night=price,
        capacity=capacity,
        size=size,
        bed_type=bed_type,
        features=[str(f) for f in features] if isinstance(features, list) else [],
        gallery=normalize_gallery(item.acf_value("gallery")),
        image_url=resolve_image_url(item),
        description=description,
        short_description=short_description(description),
        details=room_details(rate, size, bed_type, capacity),
    )


def normalize_rooms(
    items: Iterable[ContentItem], currency_prefix: str = CURRENCY_PREFIX
) -> List[NormalizedRoom]:
    return [normalize_room(item, currency_prefix) for item in items]


def sort_rooms_by_rate(rooms: Iterable[NormalizedRoom]) -> List[NormalizedRoom]:
    """Cheapest first; rooms without a price keep their order at the front."""
    return sorted(rooms, key=lambda r: r.price_per_night)


def summarize(item: ContentItem) -> ContentSummary:
    """Card view for non-room content. image_url stays None without a featured image."""
    image_url = resolve_image_url(item)
    return ContentSummary(
        id=item.id,
        slug=item.slug,
        title=extract_plain_text(item.title.rendered) or slug_to_title(item.slug),
        excerpt=describe(item),
        content_html=item.content.rendered,
        image_url=None if image_url == DEFAULT_ROOM_IMAGE else image_url,
    )

"""Business logic for the booking-intent form.

Loads the room picker (rooms + best-effort rates, cheapest first) and turns
a submitted intent into the /booking navigation target.
"""

from datetime import date
from typing import List, Optional

from loguru import logger

from lib.booking.form import BookingForm
from lib.booking.models import BookingIntent, RoomOption, ValidationError
from lib.wordpress.api_client import WordPressApiClient
from lib.wordpress.errors import ContentError
from lib.wordpress.models import NormalizedRoom
from lib.wordpress.normalizer import normalize_rooms, sort_rooms_by_rate

ROOMS_LOAD_ERROR = "Failed to load room information. Please try again later."


class RoomsUnavailableError(ContentError):
    """No rooms could be loaded for the picker."""


def to_room_option(room: NormalizedRoom) -> RoomOption:
    return RoomOption(
        id=room.id,
        slug=room.slug,
        name=room.name,
        rate=room.rate,
        price_per_night=room.price_per_night,
        short_description=room.short_description,
        details=room.details,
    )


async def load_room_options(client: WordPressApiClient) -> List[RoomOption]:
    """Room picker entries sorted by nightly rate.

    Raises RoomsUnavailableError when the CMS returned nothing; the rooms
    accessor itself degrades to [] so this is the only signal the form gets.
    """
    items = await client.list_rooms_with_rates()
    if not items:
        raise RoomsUnavailableError("No rooms found")

    rooms = sort_rooms_by_rate(normalize_rooms(items, client.config.currency_prefix))
    logger.debug(f"Loaded {len(rooms)} room options")
    return [to_room_option(room) for room in rooms]


async def create_booking_redirect(
    client: WordPressApiClient,
    check_in: Optional[date],
    check_out: Optional[date],
    room_slug: str,
    adults: int,
    children: int = 0,
) -> str:
    """Validate a submitted intent and return the /booking URL.

    Raises ValidationError with per-field messages when the form would block
    navigation.
    """
    options = await load_room_options(client)
    form = BookingForm(
        rooms=options,
        intent=BookingIntent(
            check_in=check_in,
            check_out=check_out,
            room_slug=room_slug,
            adults=adults,
            children=children,
        ),
    )
    url = form.submit()
    if url is None:
        logger.info(f"Booking intent rejected: {form.errors.messages}")
        raise ValidationError(form.errors.messages)
    return url

"""Booking-intent form as an explicit state machine.

    form = BookingForm(rooms=options)          # EDITING, tomorrow -> +2 nights
    form.pick_check_in(date(2024, 7, 1))
    form.pick_check_out(date(2024, 7, 4))
    form.pick_room("deluxe")
    form.set_adults("2")
    url = form.submit()                        # None while invalid
    # /booking?checkIn=2024-07-01&checkOut=2024-07-04&roomId=17&adults=2&children=1

Every transition is a plain method so the auto-correction and the
validation rules can be exercised without any UI.
"""

import math
import re
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

from lib.booking.models import (
    ADULTS_REQUIRED,
    ADULTS_TOO_MANY,
    BOOKING_PATH,
    CHECK_IN_REQUIRED,
    CHECK_OUT_BEFORE_CHECK_IN,
    CHECK_OUT_REQUIRED,
    CHILDREN_OUT_OF_RANGE,
    MAX_ADULTS,
    MAX_CHILDREN,
    MIN_ADULTS,
    MIN_CHILDREN,
    ROOM_REQUIRED,
    BookingErrors,
    BookingIntent,
    FormClosedError,
    FormState,
    RoomOption,
)

_RE_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_count(raw: Any) -> Optional[int]:
    """Leading integer of a number-input value, None if there is none."""
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    match = _RE_LEADING_INT.match(str(raw))
    return int(match.group(1)) if match else None


def clamp(value: int, low: int, high: int) -> int:
    return min(max(low, value), high)


def build_booking_url(
    check_in: date,
    check_out: date,
    room_id: int,
    adults: int,
    children: int,
) -> str:
    params = {
        "checkIn": check_in.isoformat(),
        "checkOut": check_out.isoformat(),
        "roomId": room_id,
        "adults": adults,
        "children": children,
    }
    return f"{BOOKING_PATH}?{urlencode(params)}"


def default_intent(today: Optional[date] = None) -> BookingIntent:
    """Tomorrow to tomorrow + 2, two adults, no room picked."""
    today = today or date.today()
    return BookingIntent(
        check_in=today + timedelta(days=1),
        check_out=today + timedelta(days=3),
    )


class BookingForm:
    """Collects a booking intent and turns it into a navigation target once."""

    def __init__(
        self,
        rooms: Iterable[RoomOption] = (),
        intent: Optional[BookingIntent] = None,
        today: Optional[date] = None,
    ):
        self.intent = intent or default_intent(today)
        self.rooms: List[RoomOption] = list(rooms)
        self.errors = BookingErrors()
        self.state = FormState.EDITING
        self.target_url: Optional[str] = None

    def _ensure_editing(self) -> None:
        if self.state is not FormState.EDITING:
            raise FormClosedError("Booking form was already submitted")

    def set_rooms(self, rooms: Iterable[RoomOption]) -> None:
        self.rooms = list(rooms)

    def find_room(self, slug: str) -> Optional[RoomOption]:
        return next((room for room in self.rooms if room.slug == slug), None)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _advance_check_out(self) -> None:
        intent = self.intent
        if intent.check_in and intent.check_out and intent.check_out <= intent.check_in:
            intent.check_out = intent.check_in + timedelta(days=1)

    def pick_check_in(self, day: Optional[date]) -> None:
        self._ensure_editing()
        if day is None:
            return
        self.intent.check_in = day
        self.errors.clear("checkIn")
        self._advance_check_out()

    def pick_check_out(self, day: Optional[date]) -> None:
        self._ensure_editing()
        if day is None:
            return
        self.intent.check_out = day
        self.errors.clear("checkOut")
        self._advance_check_out()

    def pick_room(self, slug: str) -> None:
        self._ensure_editing()
        self.intent.room_slug = slug
        self.errors.clear("roomType")

    def set_adults(self, raw: Any) -> None:
        self._ensure_editing()
        value = parse_count(raw)
        if value is None:
            return
        self.intent.adults = clamp(value, MIN_ADULTS, MAX_ADULTS)
        self.errors.clear("adults")

    def set_children(self, raw: Any) -> None:
        self._ensure_editing()
        value = parse_count(raw)
        if value is None:
            return
        self.intent.children = clamp(value, MIN_CHILDREN, MAX_CHILDREN)
        self.errors.clear("children")

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def validate(self) -> Dict[str, str]:
        intent = self.intent
        errors: Dict[str, str] = {}

        if not intent.check_in:
            errors["checkIn"] = CHECK_IN_REQUIRED
        if not intent.check_out:
            errors["checkOut"] = CHECK_OUT_REQUIRED
        if intent.check_in and intent.check_out and intent.check_out <= intent.check_in:
            errors["checkOut"] = CHECK_OUT_BEFORE_CHECK_IN
        if not intent.room_selected or self.find_room(intent.room_slug) is None:
            errors["roomType"] = ROOM_REQUIRED
        if intent.adults < MIN_ADULTS:
            errors["adults"] = ADULTS_REQUIRED
        elif intent.adults > MAX_ADULTS:
            errors["adults"] = ADULTS_TOO_MANY
        if not MIN_CHILDREN <= intent.children <= MAX_CHILDREN:
            errors["children"] = CHILDREN_OUT_OF_RANGE

        return errors

    def submit(self) -> Optional[str]:
        """Validate and navigate. Returns the target URL, or None if blocked."""
        self._ensure_editing()

        errors = self.validate()
        self.errors = BookingErrors(messages=errors)
        if errors:
            return None

        intent = self.intent
        room = self.find_room(intent.room_slug)
        self.target_url = build_booking_url(
            check_in=intent.check_in,
            check_out=intent.check_out,
            room_id=room.id,
            adults=intent.adults,
            children=intent.children,
        )
        self.state = FormState.NAVIGATED
        return self.target_url

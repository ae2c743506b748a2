"""Data models for the booking-intent form."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel

# Room picker value before the guest chooses anything
UNSELECTED_ROOM = "select"

MIN_ADULTS, MAX_ADULTS = 1, 10
MIN_CHILDREN, MAX_CHILDREN = 0, 10

BOOKING_PATH = "/booking"

# Field keys match the query/form names used by the booking page
CHECK_IN_REQUIRED = "Check-in date is required"
CHECK_OUT_REQUIRED = "Check-out date is required"
CHECK_OUT_BEFORE_CHECK_IN = "Check-out date must be after check-in date"
ROOM_REQUIRED = "Please select a room type"
ADULTS_REQUIRED = "At least one adult is required"
ADULTS_TOO_MANY = f"No more than {MAX_ADULTS} adults per booking"
CHILDREN_OUT_OF_RANGE = f"Children must be between {MIN_CHILDREN} and {MAX_CHILDREN}"


class FormState(str, Enum):
    """Lifecycle of a booking form. A failed submit stays in EDITING."""

    EDITING = "editing"
    NAVIGATED = "navigated"


class ValidationError(Exception):
    """Submit was blocked; errors maps field key to message."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class FormClosedError(Exception):
    """The form already navigated and accepts no more input."""


@dataclass
class BookingIntent:
    """What the guest has entered so far."""

    check_in: Optional[date]
    check_out: Optional[date]
    room_slug: str = UNSELECTED_ROOM
    adults: int = 2
    children: int = 0

    @property
    def room_selected(self) -> bool:
        return bool(self.room_slug) and self.room_slug != UNSELECTED_ROOM

    @property
    def nights(self) -> int:
        if not self.check_in or not self.check_out:
            return 0
        return max((self.check_out - self.check_in).days, 0)


@dataclass
class BookingErrors:
    """Per-field validation messages, keyed checkIn/checkOut/roomType/adults/children."""

    messages: Dict[str, str] = field(default_factory=dict)

    def set(self, key: str, message: str) -> None:
        self.messages[key] = message

    def clear(self, key: str) -> None:
        self.messages.pop(key, None)

    def __bool__(self) -> bool:
        return bool(self.messages)


class RoomOption(BaseModel):
    """One entry of the room picker."""

    id: int
    slug: str
    name: str
    rate: str
    price_per_night: float = 0.0
    short_description: str = ""
    details: str = ""

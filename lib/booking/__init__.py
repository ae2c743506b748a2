"""Booking-intent form.

Shared library: models and the form state machine only.
Room loading lives in services/booking/.
"""

from lib.booking.form import BookingForm, build_booking_url
from lib.booking.models import (
    BookingIntent,
    FormClosedError,
    FormState,
    RoomOption,
    ValidationError,
)

__all__ = [
    "BookingForm",
    "BookingIntent",
    "FormState",
    "RoomOption",
    "ValidationError",
    "FormClosedError",
    "build_booking_url",
]

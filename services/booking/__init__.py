"""Booking service: public interface."""

from services.booking.service import (
    ROOMS_LOAD_ERROR,
    RoomsUnavailableError,
    create_booking_redirect,
    load_room_options,
    to_room_option,
)

__all__ = [
    "load_room_options",
    "create_booking_redirect",
    "to_room_option",
    "RoomsUnavailableError",
    "ROOMS_LOAD_ERROR",
]

"""Content service: public interface."""

from services.content.service import (
    SectionState,
    load_amenities,
    load_page,
    load_points_of_interest,
    load_post,
    load_room,
    load_rooms,
)

__all__ = [
    "SectionState",
    "load_rooms",
    "load_room",
    "load_amenities",
    "load_points_of_interest",
    "load_page",
    "load_post",
]

"""API routes for normalized content and booking intents."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from lib.booking.models import UNSELECTED_ROOM, RoomOption, ValidationError
from lib.wordpress.api_client import WordPressApiClient
from lib.wordpress.errors import ContentError, NotFoundError
from lib.wordpress.models import ContentSummary, NormalizedRoom
from services import booking, content
from services.content import SectionState

router = APIRouter()


def _client(request: Request) -> WordPressApiClient:
    return request.app.state.wp_client


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class BookingBody(BaseModel):
    """Submitted booking form.

    Example:
        {
            "checkIn": "2024-07-01",
            "checkOut": "2024-07-04",
            "roomType": "deluxe",
            "adults": 2,
            "children": 1
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    check_in: Optional[date] = Field(default=None, alias="checkIn")
    check_out: Optional[date] = Field(default=None, alias="checkOut")
    room_type: str = Field(default=UNSELECTED_ROOM, alias="roomType")
    adults: int = 2
    children: int = 0


class BookingRedirect(BaseModel):
    redirect: str


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


@router.get("/api/rooms", response_model=List[NormalizedRoom])
async def list_rooms(request: Request):
    return await content.load_rooms(_client(request))


@router.get("/api/rooms/{slug}", response_model=NormalizedRoom)
async def get_room(slug: str, request: Request):
    room = await content.load_room(_client(request), slug)
    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


@router.get("/api/amenities", response_model=SectionState)
async def list_amenities(request: Request):
    return await content.load_amenities(_client(request))


@router.get("/api/explore", response_model=SectionState)
async def list_points_of_interest(request: Request):
    return await content.load_points_of_interest(_client(request))


@router.get("/api/pages/{slug}", response_model=ContentSummary)
async def get_page(slug: str, request: Request):
    try:
        return await content.load_page(_client(request), slug)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ContentError as e:
        raise HTTPException(status_code=502, detail=f"Failed to load page: {e}")


@router.get("/api/posts/{slug}", response_model=ContentSummary)
async def get_post(slug: str, request: Request):
    post = await content.load_post(_client(request), slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


# ---------------------------------------------------------------------------
# Booking
# ---------------------------------------------------------------------------


@router.get("/api/booking/rooms", response_model=List[RoomOption])
async def list_room_options(request: Request):
    try:
        return await booking.load_room_options(_client(request))
    except ContentError:
        return JSONResponse({"error": booking.ROOMS_LOAD_ERROR}, status_code=503)


@router.post("/api/booking", response_model=BookingRedirect)
async def submit_booking(body: BookingBody, request: Request):
    try:
        url = await booking.create_booking_redirect(
            _client(request),
            check_in=body.check_in,
            check_out=body.check_out,
            room_slug=body.room_type,
            adults=body.adults,
            children=body.children,
        )
    except ValidationError as e:
        return JSONResponse({"errors": e.errors}, status_code=422)
    except ContentError:
        return JSONResponse({"error": booking.ROOMS_LOAD_ERROR}, status_code=503)
    return BookingRedirect(redirect=url)

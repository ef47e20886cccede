"""Response schemas for the room catalogue and availability lookups."""

from datetime import date

from app.schemas.booking import BookingResponse
from app.schemas.common import CamelModel


class RoomTypeResponse(CamelModel):
    name: str
    price_per_night: int
    rooms: list[str]
    bed_info: str
    amenities: list[str]


class RoomAvailabilityResponse(CamelModel):
    room_number: str
    check_in: date
    check_out: date
    available: bool
    conflicting_booking: BookingResponse | None = None
    room_type: str | None = None
    nights: int
    quoted_total: int

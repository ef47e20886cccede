"""Room catalogue and availability lookup."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.api.deps import get_uow
from app.api.responses import validation_error
from app.repositories.base import UnitOfWork
from app.schemas.room import RoomAvailabilityResponse, RoomTypeResponse
from app.services.availability import check_room_availability
from app.services.rooms import ROOM_TYPES, calculate_nights, calculate_total_amount, get_room_type

router = APIRouter(prefix="/api/v1/rooms", tags=["rooms"])


@router.get(
    "",
    response_model=list[RoomTypeResponse],
    summary="List room types",
)
async def list_room_types() -> list[dict]:
    return [
        {
            "name": room_type.name,
            "price_per_night": room_type.price_per_night,
            "rooms": list(room_type.rooms),
            "bed_info": room_type.bed_info,
            "amenities": list(room_type.amenities),
        }
        for room_type in ROOM_TYPES
    ]


@router.get(
    "/{room_number}/availability",
    response_model=RoomAvailabilityResponse,
    summary="Check whether a room is free for a stay",
)
async def room_availability(
    room_number: str,
    check_in: date = Query(..., alias="checkIn"),
    check_out: date = Query(..., alias="checkOut"),
    exclude_booking_id: str | None = Query(None, alias="excludeBookingId", description="Booking being edited"),
    extra_guests: int = Query(0, ge=0, alias="extraGuests"),
    uow: UnitOfWork = Depends(get_uow),
) -> dict | JSONResponse:
    """Run the same conflict check used on create/update against stored bookings.

    The result is advisory: the room is only held once a booking is created.
    """
    if check_out <= check_in:
        return validation_error(["Check-out date must be after check-in date"])

    existing = await uow.bookings.list_for_room(room_number)
    result = check_room_availability(room_number, check_in, check_out, existing, exclude_booking_id)
    room_type = get_room_type(room_number)
    return {
        "room_number": room_number,
        "check_in": check_in,
        "check_out": check_out,
        "available": result.available,
        "conflicting_booking": result.conflicting_booking,
        "room_type": room_type.name if room_type else None,
        "nights": calculate_nights(check_in, check_out),
        "quoted_total": calculate_total_amount(room_number, check_in, check_out, extra_guests),
    }

"""Bookings API router.

All writes go through :class:`~app.services.booking_gateway.BookingGateway`
so validation and double-booking checks apply no matter who calls.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.api.deps import WRITE_GUARDS, get_booking_gateway
from app.api.responses import not_found, render_gateway_result
from app.domain.booking_state import BookingStatus
from app.schemas.booking import BookingCreate, BookingListResponse, BookingResponse, BookingUpdate
from app.services.booking_gateway import BookingGateway

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List bookings",
)
async def list_bookings(
    status_filter: BookingStatus | None = Query(None, alias="status", description="Filter by booking status"),
    room_number: str | None = Query(None, alias="roomNumber", description="Filter by room"),
    start_date: date | None = Query(None, alias="startDate", description="Bookings with check_in >= this date"),
    end_date: date | None = Query(None, alias="endDate", description="Bookings with check_in <= this date"),
    gateway: BookingGateway = Depends(get_booking_gateway),
) -> dict:
    """Return bookings, latest check-in first, capped at 1000 rows."""
    items = await gateway.list(
        status=status_filter,
        room_number=room_number,
        start_date=start_date,
        end_date=end_date,
    )
    return {"success": True, "data": items, "count": len(items)}


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking",
)
async def get_booking(
    booking_id: str,
    gateway: BookingGateway = Depends(get_booking_gateway),
) -> dict | JSONResponse:
    booking = await gateway.get(booking_id)
    if booking is None:
        return not_found("Booking not found")
    return booking


@router.post(
    "",
    summary="Create a booking",
    dependencies=WRITE_GUARDS,
    responses={400: {"description": "Validation failed"}, 409: {"description": "Room not available"}},
)
async def create_booking(
    body: BookingCreate,
    gateway: BookingGateway = Depends(get_booking_gateway),
) -> JSONResponse:
    """Create a booking after validating it and checking the room is free.

    Status defaults to ``confirmed``. Returns 400 with every field error, or
    409 with the booking that already holds the room.
    """
    result = await gateway.create(body.model_dump(exclude_unset=True))
    return render_gateway_result(result)


@router.put(
    "/{booking_id}",
    summary="Update a booking",
    dependencies=WRITE_GUARDS,
    responses={
        400: {"description": "Validation failed"},
        404: {"description": "Booking not found"},
        409: {"description": "Room not available"},
    },
)
async def update_booking(
    booking_id: str,
    body: BookingUpdate,
    gateway: BookingGateway = Depends(get_booking_gateway),
) -> JSONResponse:
    """Partially update a booking.

    Availability is re-checked, excluding this booking, whenever the room or
    either date changes.
    """
    result = await gateway.update(booking_id, body.model_dump(exclude_unset=True))
    return render_gateway_result(result)


@router.delete(
    "/{booking_id}",
    summary="Delete a booking",
    dependencies=WRITE_GUARDS,
    responses={404: {"description": "Booking not found"}},
)
async def delete_booking(
    booking_id: str,
    gateway: BookingGateway = Depends(get_booking_gateway),
) -> JSONResponse:
    result = await gateway.delete(booking_id)
    return render_gateway_result(result)

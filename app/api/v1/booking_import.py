"""Booking-email import endpoint, called by the mailbox sync script."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import require_import_secret
from app.schemas.booking import BookingImportResponse, EmailBookingData
from app.services.booking_import import BookingImportError, is_from_booking_com, parse_booking_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.post(
    "/import",
    response_model=BookingImportResponse,
    summary="Parse a Booking.com confirmation email",
    dependencies=[Depends(require_import_secret)],
)
async def import_booking_email(body: EmailBookingData) -> dict:
    """Extract booking fields from a forwarded confirmation email.

    Nothing is stored; the caller reviews the parsed booking and creates it
    through ``POST /api/v1/bookings``.
    """
    if not body.subject or not body.body or not body.sender:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required email data",
        )
    if not is_from_booking_com(body.sender):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email is not from Booking.com",
        )

    try:
        booking = await parse_booking_email(body)
    except BookingImportError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to process booking email",
        ) from e

    logger.info("Parsed booking email %s for %s", booking.confirmation_number, booking.guest_name)
    return {
        "success": True,
        "booking": booking,
        "processed_at": datetime.now(timezone.utc),
    }

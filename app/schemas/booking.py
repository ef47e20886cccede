"""Pydantic v2 request/response schemas for booking endpoints.

Fields checked by ``validate_booking`` (guest name, room, dates, amount,
status) are accepted loosely here so that bad values come back as a
``Validation failed`` error list instead of a schema error.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from app.domain.booking_state import BookingStatus
from app.schemas.common import CamelModel
from app.schemas.guest import GuestData


class DepositStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    REFUNDED = "refunded"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    DEPOSIT = "deposit"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class _BookingFields(CamelModel):
    guest_name: Any = None
    room_number: Any = None
    check_in: Any = None
    check_out: Any = None
    total_amount: Any = None
    status: Any = None

    nights: int | None = Field(None, ge=1)
    price_per_night: Decimal | None = Field(None, ge=0)
    deposit_amount: Decimal | None = Field(None, ge=0)
    deposit_status: DepositStatus | None = None
    payment_status: PaymentStatus | None = None
    paid_amount: Decimal | None = Field(None, ge=0)
    ota_channel: str | None = None
    confirmation_number: str | None = None
    guest_details: GuestData | None = None
    locked_until: datetime | None = None

    @field_validator("room_number", mode="before")
    @classmethod
    def _room_number_as_string(cls, value: Any) -> Any:
        """Room numbers are identifiers; accept ``5`` as ``"5"``."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class BookingCreate(_BookingFields):
    """Schema for creating a booking. Status defaults to ``confirmed`` when omitted."""


class BookingUpdate(_BookingFields):
    """Schema for partially updating a booking. Only fields sent are changed."""


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(CamelModel):
    """A stored booking as returned by the API."""

    id: str
    guest_name: str
    room_number: str
    check_in: date
    check_out: date
    total_amount: float | None = None
    status: BookingStatus
    nights: int | None = None
    price_per_night: float | None = None
    deposit_amount: float | None = None
    deposit_status: DepositStatus | None = None
    payment_status: PaymentStatus | None = None
    paid_amount: float | None = None
    ota_channel: str | None = None
    confirmation_number: str | None = None
    guest_details: GuestData | None = None
    locked_until: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BookingListResponse(CamelModel):
    success: bool = True
    data: list[BookingResponse]
    count: int


# ---------------------------------------------------------------------------
# Booking-email import
# ---------------------------------------------------------------------------


class EmailBookingData(CamelModel):
    """A forwarded OTA confirmation email."""

    subject: str | None = None
    body: str | None = None
    sender: str | None = Field(None, alias="from")
    date: str | None = None
    attachments: list[str] | None = None


class ParsedBooking(CamelModel):
    """Booking fields extracted from an OTA confirmation email."""

    guest_name: str
    room_number: str | None = None
    check_in: str
    check_out: str
    total_amount: float = 0
    confirmation_number: str = "UNKNOWN"
    ota_channel: str = "Booking.com"
    phone: str | None = None
    email: str | None = None
    nights: int | None = None


class BookingImportResponse(CamelModel):
    success: bool = True
    booking: ParsedBooking
    processed_at: datetime

"""Booking lifecycle: status values, which of them block a room, and legal transitions."""

from enum import Enum


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    PENDING = "pending"
    LOCKED = "locked"
    CANCELLED = "cancelled"


BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {
        BookingStatus.CONFIRMED,
        BookingStatus.LOCKED,
        BookingStatus.CHECKED_IN,
        BookingStatus.CANCELLED,
    },
    BookingStatus.CONFIRMED: {
        BookingStatus.PENDING,
        BookingStatus.LOCKED,
        BookingStatus.CHECKED_IN,
        BookingStatus.CANCELLED,
    },
    BookingStatus.LOCKED: {
        BookingStatus.PENDING,
        BookingStatus.CONFIRMED,
        BookingStatus.CHECKED_IN,
        BookingStatus.CANCELLED,
    },
    BookingStatus.CHECKED_IN: {BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED},
    BookingStatus.CHECKED_OUT: set(),
    BookingStatus.CANCELLED: set(),
}


def blocks_room(status: BookingStatus) -> bool:
    """Return True if a booking in ``status`` occupies its room."""
    match status:
        case BookingStatus.CANCELLED | BookingStatus.CHECKED_OUT:
            return False
        case BookingStatus.CONFIRMED | BookingStatus.PENDING | BookingStatus.LOCKED | BookingStatus.CHECKED_IN:
            return True


def is_blocking(raw_status: object) -> bool:
    """Like :func:`blocks_room` for a stored value.

    A value outside the enum is treated as occupying the room.
    """
    try:
        status = BookingStatus(raw_status)
    except ValueError:
        return True
    return blocks_room(status)


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    if current == target:
        return True
    return target in BOOKING_TRANSITIONS[current]

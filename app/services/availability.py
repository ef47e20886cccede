"""Room availability — detects date conflicts between bookings for one room.

Stays are compared at day resolution as half-open ``[check_in, check_out)``
ranges, so a guest checking out on the day another checks in is not a
conflict. Time of day is not modelled.
"""

import logging
from collections.abc import Iterable
from datetime import date
from typing import Any, Mapping

from pydantic import BaseModel

from app.domain.booking_state import is_blocking
from app.services.validation import parse_date

logger = logging.getLogger(__name__)


class AvailabilityResult(BaseModel):
    available: bool
    conflicting_booking: dict[str, Any] | None = None


def _overlaps(new_start: date, new_end: date, start: date, end: date) -> bool:
    return (
        (start <= new_start < end)
        or (start < new_end <= end)
        or (new_start <= start and new_end >= end)
    )


def check_room_availability(
    room_number: str,
    check_in: Any,
    check_out: Any,
    existing_bookings: Iterable[Mapping[str, Any]],
    exclude_booking_id: str | None = None,
) -> AvailabilityResult:
    """Check whether ``room_number`` is free for the requested stay.

    Args:
        room_number: Room to check.
        check_in: First night of the stay (date or ISO string).
        check_out: Departure day (date or ISO string).
        existing_bookings: Booking records to check against. Records for
            other rooms are ignored, so the full list may be passed.
        exclude_booking_id: Booking to skip, normally the one being edited.

    Returns:
        ``available=False`` with the first conflicting booking found, or
        ``available=True`` when no active booking overlaps.

    Raises:
        ValueError: If ``check_in`` or ``check_out`` is not a valid date.
    """
    new_start = parse_date(check_in)
    new_end = parse_date(check_out)
    if new_start is None or new_end is None:
        raise ValueError(f"Invalid stay dates: {check_in!r} to {check_out!r}")

    room = str(room_number)
    for booking in existing_bookings:
        if exclude_booking_id is not None and booking.get("id") == exclude_booking_id:
            continue
        if not is_blocking(booking.get("status")):
            continue
        if str(booking.get("room_number")) != room:
            continue

        start = parse_date(booking.get("check_in"))
        end = parse_date(booking.get("check_out"))
        if start is None or end is None:
            logger.warning("Skipping booking %s with unparseable dates", booking.get("id"))
            continue

        if _overlaps(new_start, new_end, start, end):
            return AvailabilityResult(available=False, conflicting_booking=dict(booking))

    return AvailabilityResult(available=True)

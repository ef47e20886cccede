"""Booking gateway — the single write path for bookings.

Every caller (front-desk API, email import, PMS sync) creates, edits and
removes bookings through :class:`BookingGateway`. Checks always run in the
same order: sanitize, validate, then availability. A request with invalid
fields is therefore never reported as a conflict.

Expected rejections come back as a :class:`GatewayResult`; only
infrastructure failures raised by the repository propagate as exceptions.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from app.domain.booking_state import BookingStatus, can_transition
from app.repositories.base import MAX_BOOKING_ROWS, BookingRepository, Record
from app.services.availability import check_room_availability
from app.services.rooms import calculate_nights
from app.services.validation import parse_date, sanitize, to_number, validate_booking

logger = logging.getLogger(__name__)

FREE_TEXT_FIELDS = ("guest_name", "room_number", "ota_channel", "confirmation_number")
AVAILABILITY_FIELDS = ("room_number", "check_in", "check_out")


class GatewayOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    VALIDATION_FAILED = "validation_failed"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


_ERROR_LABELS = {
    GatewayOutcome.VALIDATION_FAILED: "Validation failed",
    GatewayOutcome.CONFLICT: "Room not available",
    GatewayOutcome.NOT_FOUND: "not found",
}


class GatewayResult(BaseModel):
    """Tagged result of a gateway operation; ``outcome`` is the discriminator."""

    outcome: GatewayOutcome
    data: dict[str, Any] | None = None
    message: str | None = None
    errors: list[str] = []
    conflicting_booking: dict[str, Any] | None = None

    @property
    def success(self) -> bool:
        return self.outcome not in _ERROR_LABELS

    @property
    def error(self) -> str | None:
        return _ERROR_LABELS.get(self.outcome)

    @classmethod
    def validation_failed(cls, errors: list[str]) -> GatewayResult:
        return cls(outcome=GatewayOutcome.VALIDATION_FAILED, errors=errors)

    @classmethod
    def conflict(cls, message: str, booking: Record | None) -> GatewayResult:
        return cls(outcome=GatewayOutcome.CONFLICT, message=message, conflicting_booking=booking)

    @classmethod
    def not_found(cls) -> GatewayResult:
        return cls(outcome=GatewayOutcome.NOT_FOUND, message="Booking not found")


def new_booking_id() -> str:
    return f"BK{uuid.uuid4().hex[:12].upper()}"


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (timestamp columns are naive UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _sanitized(payload: Record) -> Record:
    record = dict(payload)
    if isinstance(record.get("room_number"), int):
        record["room_number"] = str(record["room_number"])
    for field in FREE_TEXT_FIELDS:
        if record.get(field) is not None:
            record[field] = sanitize(record[field])
    return record


def _normalized(record: Record) -> Record:
    """Convert validated values to their stored types."""
    normalized = dict(record)
    if "room_number" in normalized:
        normalized["room_number"] = str(normalized["room_number"]).strip()
    for field in ("check_in", "check_out"):
        if field in normalized:
            normalized[field] = parse_date(normalized[field])
    if normalized.get("total_amount") is not None:
        normalized["total_amount"] = Decimal(str(to_number(normalized["total_amount"])))
    if normalized.get("status"):
        normalized["status"] = BookingStatus(normalized["status"]).value
    locked_until = normalized.get("locked_until")
    if isinstance(locked_until, datetime) and locked_until.tzinfo is not None:
        normalized["locked_until"] = locked_until.astimezone(timezone.utc).replace(tzinfo=None)
    return normalized


class BookingGateway:
    """Read, create, update and delete bookings against a repository.

    Args:
        bookings: Repository for the active storage strategy.
        today: Clock for the past-date rule.
        now: Clock for ``created_at`` / ``updated_at``.
    """

    def __init__(
        self,
        bookings: BookingRepository,
        *,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self._bookings = bookings
        self._today = today
        self._now = now

    async def get(self, booking_id: str) -> Record | None:
        return await self._bookings.get(booking_id)

    async def list(
        self,
        *,
        status: BookingStatus | None = None,
        room_number: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[Record]:
        """Bookings matching the filters, latest check-in first, capped at 1000 rows."""
        return await self._bookings.list(
            status=status.value if status else None,
            room_number=room_number,
            start_date=start_date,
            end_date=end_date,
            limit=MAX_BOOKING_ROWS,
        )

    async def create(self, payload: Record) -> GatewayResult:
        record = _sanitized(payload)
        record.pop("id", None)

        validation = validate_booking(record, today=self._today())
        if not validation.valid:
            logger.info("Booking rejected: %s", "; ".join(validation.errors))
            return GatewayResult.validation_failed(validation.errors)

        record = _normalized(record)
        room = record["room_number"]

        async with self._bookings.room_lock(room):
            # Re-read right before the check to keep the race window small
            existing = await self._bookings.list_for_room(room)
            availability = check_room_availability(room, record["check_in"], record["check_out"], existing)
            if not availability.available:
                logger.info(
                    "Room %s unavailable %s..%s, conflicts with %s",
                    room,
                    record["check_in"],
                    record["check_out"],
                    availability.conflicting_booking.get("id"),
                )
                return GatewayResult.conflict(
                    f"Room {room} is already booked for these dates",
                    availability.conflicting_booking,
                )

            now = self._now()
            record["id"] = new_booking_id()
            record["status"] = record.get("status") or BookingStatus.CONFIRMED.value
            if record.get("nights") is None:
                record["nights"] = calculate_nights(record["check_in"], record["check_out"])
            record["created_at"] = now
            record["updated_at"] = now
            stored = await self._bookings.add(record)

        logger.info("Created booking %s for room %s", stored["id"], room)
        return GatewayResult(
            outcome=GatewayOutcome.CREATED,
            data=stored,
            message="Booking created successfully",
        )

    async def update(self, booking_id: str, changes: Record) -> GatewayResult:
        current = await self._bookings.get(booking_id)
        if current is None:
            return GatewayResult.not_found()

        changes = _sanitized(changes)
        for immutable in ("id", "created_at"):
            changes.pop(immutable, None)
        merged = {**current, **changes}

        validation = validate_booking(merged, today=self._today(), allow_past=True)
        errors = list(validation.errors)
        if changes.get("status") and validation.valid:
            target_status = BookingStatus(changes["status"])
            try:
                current_status = BookingStatus(current["status"])
            except ValueError:
                # A stored value outside the lifecycle has no legal transitions
                current_status = None
            if current_status is None or not can_transition(current_status, target_status):
                errors.append(
                    f"Invalid status transition: {current['status']} -> {target_status.value}"
                )
        if errors:
            logger.info("Update of booking %s rejected: %s", booking_id, "; ".join(errors))
            return GatewayResult.validation_failed(errors)

        changes = _normalized(changes)
        if "status" in changes and not changes["status"]:
            del changes["status"]
        merged = {**current, **changes}
        dates_changed = "check_in" in changes or "check_out" in changes
        if dates_changed and "nights" not in changes:
            changes["nights"] = calculate_nights(merged["check_in"], merged["check_out"])

        if not any(field in changes for field in AVAILABILITY_FIELDS):
            return await self._apply_update(booking_id, changes)

        room = merged["room_number"]
        async with self._bookings.room_lock(room):
            existing = await self._bookings.list_for_room(room)
            availability = check_room_availability(
                room,
                merged["check_in"],
                merged["check_out"],
                existing,
                exclude_booking_id=booking_id,
            )
            if not availability.available:
                logger.info(
                    "Update of booking %s conflicts with %s in room %s",
                    booking_id,
                    availability.conflicting_booking.get("id"),
                    room,
                )
                return GatewayResult.conflict(
                    "Room is already booked for the requested dates",
                    availability.conflicting_booking,
                )
            return await self._apply_update(booking_id, changes)

    async def _apply_update(self, booking_id: str, changes: Record) -> GatewayResult:
        changes["updated_at"] = self._now()
        updated = await self._bookings.update(booking_id, changes)
        if updated is None:
            return GatewayResult.not_found()
        logger.info("Updated booking %s (%s)", booking_id, ", ".join(sorted(changes)))
        return GatewayResult(
            outcome=GatewayOutcome.UPDATED,
            data=updated,
            message="Booking updated successfully",
        )

    async def delete(self, booking_id: str) -> GatewayResult:
        if not await self._bookings.delete(booking_id):
            return GatewayResult.not_found()
        logger.info("Deleted booking %s", booking_id)
        return GatewayResult(outcome=GatewayOutcome.DELETED, message="Booking deleted successfully")

"""Input sanitizing and field validation for bookings and transactions.

Validators are pure functions over plain records (snake_case dicts). They
never raise: every problem is collected into :class:`ValidationResult` so a
caller sees all errors at once, and the same record always yields the same
verdict for a given ``today``.
"""

import math
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Mapping

from pydantic import BaseModel

from app.domain.booking_state import BookingStatus

MAX_TEXT_LENGTH = 500
MAX_BOOKING_AMOUNT = 1_000_000
MAX_TRANSACTION_AMOUNT = 10_000_000

TRANSACTION_TYPES = ("INCOME", "EXPENSE")

_STATUS_VALUES = [s.value for s in BookingStatus]


class ValidationResult(BaseModel):
    """Outcome of a validator: ``valid`` is True exactly when ``errors`` is empty."""

    valid: bool
    errors: list[str]

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        return cls(valid=not errors, errors=errors)


def sanitize(value: Any) -> str:
    """Trim, drop ``<`` and ``>``, and cap at 500 characters.

    Non-string input yields an empty string.
    """
    if not isinstance(value, str):
        return ""
    return value.strip().replace("<", "").replace(">", "")[:MAX_TEXT_LENGTH]


def parse_date(value: Any) -> date | None:
    """Parse an ISO date or datetime (or a date object) to a calendar date.

    Returns ``None`` for anything that is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def to_number(value: Any) -> float | None:
    """Coerce ints, floats, Decimals and numeric strings to a finite float."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _one_year_before(day: date) -> date:
    try:
        return day.replace(year=day.year - 1)
    except ValueError:  # 29 February
        return day.replace(year=day.year - 1, day=28)


def validate_booking(
    record: Mapping[str, Any],
    *,
    today: date | None = None,
    allow_past: bool = False,
) -> ValidationResult:
    """Check a booking record.

    Args:
        record: Booking fields keyed by snake_case name.
        today: Reference date for the past-date rule (defaults to today).
        allow_past: Skip the past-date rule, used when editing a stay that
            has already started.
    """
    today = today or date.today()
    errors: list[str] = []

    guest_name = record.get("guest_name")
    if not isinstance(guest_name, str) or not guest_name.strip():
        errors.append("Guest name is required")

    if _is_blank(record.get("room_number")):
        errors.append("Room number is required")

    check_in = check_out = None
    if _is_blank(record.get("check_in")):
        errors.append("Check-in date is required")
    else:
        check_in = parse_date(record["check_in"])
        if check_in is None:
            errors.append("Invalid check-in date format")

    if _is_blank(record.get("check_out")):
        errors.append("Check-out date is required")
    else:
        check_out = parse_date(record["check_out"])
        if check_out is None:
            errors.append("Invalid check-out date format")

    if check_in is not None and check_out is not None:
        if check_out <= check_in:
            errors.append("Check-out date must be after check-in date")
        # One day of grace for timezone skew between desk and server
        if not allow_past and check_in < today - timedelta(days=1):
            errors.append("Cannot create booking for past dates")

    if record.get("total_amount") is not None:
        amount = to_number(record["total_amount"])
        if amount is None or amount < 0:
            errors.append("Total amount must be a positive number")
        elif amount > MAX_BOOKING_AMOUNT:
            errors.append("Total amount seems unreasonably high (> 1M)")

    status = record.get("status")
    if status and status not in _STATUS_VALUES:
        errors.append(f"Invalid status. Must be one of: {', '.join(_STATUS_VALUES)}")

    return ValidationResult.from_errors(errors)


def validate_transaction(record: Mapping[str, Any], *, today: date | None = None) -> ValidationResult:
    """Check an income/expense record.

    Amounts must be strictly positive. Dates are accepted from one year ago
    up to tomorrow.
    """
    today = today or date.today()
    errors: list[str] = []

    tx_date = None
    if _is_blank(record.get("date")):
        errors.append("Date is required")
    else:
        tx_date = parse_date(record["date"])
        if tx_date is None:
            errors.append("Invalid date format")

    tx_type = record.get("type")
    if _is_blank(tx_type):
        errors.append("Transaction type is required")
    elif tx_type not in TRANSACTION_TYPES:
        errors.append("Type must be either INCOME or EXPENSE")

    if _is_blank(record.get("category")):
        errors.append("Category is required")

    if record.get("amount") is None:
        errors.append("Amount is required")
    else:
        amount = to_number(record["amount"])
        if amount is None:
            errors.append("Amount must be a number")
        elif amount <= 0:
            errors.append("Amount must be greater than 0")
        elif amount > MAX_TRANSACTION_AMOUNT:
            errors.append("Amount seems unreasonably high (> 10M)")

    if tx_date is not None:
        if tx_date < _one_year_before(today):
            errors.append("Transaction date is more than 1 year old")
        if tx_date > today + timedelta(days=1):
            errors.append("Transaction date cannot be in the future")

    return ValidationResult.from_errors(errors)

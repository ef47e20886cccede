"""Unit tests for input sanitizing and booking/transaction validation."""

from datetime import date

import pytest

from app.services.validation import parse_date, sanitize, to_number, validate_booking, validate_transaction

TODAY = date(2026, 2, 1)


def _booking(**overrides) -> dict:
    record = {
        "guest_name": "Somchai",
        "room_number": "5",
        "check_in": "2026-03-01",
        "check_out": "2026-03-03",
        "total_amount": 1600,
    }
    record.update(overrides)
    return record


def _transaction(**overrides) -> dict:
    record = {
        "date": TODAY.isoformat(),
        "type": "INCOME",
        "category": "ค่าห้องพัก",
        "amount": 1600,
    }
    record.update(overrides)
    return record


class TestSanitize:
    def test_strips_angle_brackets_and_whitespace(self):
        assert sanitize("  <b>Somchai</b>  ") == "bSomchai/b"

    def test_truncates_to_500_characters(self):
        assert len(sanitize("a" * 600)) == 500

    def test_truncates_after_trimming(self):
        assert sanitize("   " + "x" * 500 + "yyy") == "x" * 500

    @pytest.mark.parametrize("value", [None, 123, 4.5, ["a"], {"a": 1}])
    def test_non_string_yields_empty_string(self, value):
        assert sanitize(value) == ""

    def test_plain_text_unchanged(self):
        assert sanitize("สมชาย ใจดี") == "สมชาย ใจดี"


class TestParsing:
    def test_parse_iso_date(self):
        assert parse_date("2026-03-01") == date(2026, 3, 1)

    def test_parse_iso_datetime_keeps_calendar_day(self):
        assert parse_date("2026-03-01T14:00:00") == date(2026, 3, 1)

    def test_parse_date_object(self):
        assert parse_date(date(2026, 3, 1)) == date(2026, 3, 1)

    @pytest.mark.parametrize("value", ["", "   ", "tomorrow", "2026-13-45", None, 20260301])
    def test_unparseable_returns_none(self, value):
        assert parse_date(value) is None

    def test_to_number_accepts_numeric_strings(self):
        assert to_number(" 1600.50 ") == 1600.5

    @pytest.mark.parametrize("value", ["abc", float("nan"), float("inf"), True, None, [1]])
    def test_to_number_rejects_non_numbers(self, value):
        assert to_number(value) is None


class TestValidateBooking:
    def test_valid_booking(self):
        result = validate_booking(_booking(), today=TODAY)
        assert result.valid is True
        assert result.errors == []

    def test_missing_required_fields_reports_each(self):
        result = validate_booking({}, today=TODAY)
        assert result.valid is False
        assert result.errors == [
            "Guest name is required",
            "Room number is required",
            "Check-in date is required",
            "Check-out date is required",
        ]

    def test_blank_guest_name_is_missing(self):
        result = validate_booking(_booking(guest_name="   "), today=TODAY)
        assert result.errors == ["Guest name is required"]

    def test_errors_accumulate(self):
        """An empty name and reversed dates are both reported."""
        result = validate_booking(
            _booking(guest_name="", check_in="2026-03-05", check_out="2026-03-03"),
            today=TODAY,
        )
        assert "Guest name is required" in result.errors
        assert "Check-out date must be after check-in date" in result.errors
        assert len(result.errors) >= 2

    def test_same_day_checkout_rejected(self):
        result = validate_booking(_booking(check_out="2026-03-01"), today=TODAY)
        assert result.errors == ["Check-out date must be after check-in date"]

    def test_invalid_date_format(self):
        result = validate_booking(_booking(check_in="2026-13-45"), today=TODAY)
        assert result.errors == ["Invalid check-in date format"]

    def test_invalid_checkout_format(self):
        result = validate_booking(_booking(check_out="03/05/2026"), today=TODAY)
        assert result.errors == ["Invalid check-out date format"]

    def test_past_check_in_rejected(self):
        result = validate_booking(
            _booking(check_in="2026-01-30", check_out="2026-02-02"),
            today=TODAY,
        )
        assert result.errors == ["Cannot create booking for past dates"]

    def test_yesterday_within_grace_window(self):
        result = validate_booking(
            _booking(check_in="2026-01-31", check_out="2026-02-02"),
            today=TODAY,
        )
        assert result.valid is True

    def test_past_date_reported_even_when_dates_reversed(self):
        result = validate_booking(
            _booking(check_in="2026-01-20", check_out="2026-01-10"),
            today=TODAY,
        )
        assert result.errors == [
            "Check-out date must be after check-in date",
            "Cannot create booking for past dates",
        ]

    def test_allow_past_skips_past_date_rule(self):
        result = validate_booking(
            _booking(check_in="2026-01-20", check_out="2026-02-03"),
            today=TODAY,
            allow_past=True,
        )
        assert result.valid is True

    @pytest.mark.parametrize("amount", [0, 1600, "1600", 999_999.99, 1_000_000])
    def test_acceptable_amounts(self, amount):
        assert validate_booking(_booking(total_amount=amount), today=TODAY).valid is True

    @pytest.mark.parametrize("amount", [-1, "abc", float("nan"), True])
    def test_amount_must_be_non_negative_number(self, amount):
        result = validate_booking(_booking(total_amount=amount), today=TODAY)
        assert result.errors == ["Total amount must be a positive number"]

    def test_amount_above_ceiling_flagged(self):
        result = validate_booking(_booking(total_amount=1_000_001), today=TODAY)
        assert result.errors == ["Total amount seems unreasonably high (> 1M)"]

    def test_missing_amount_is_fine(self):
        record = _booking()
        del record["total_amount"]
        assert validate_booking(record, today=TODAY).valid is True

    @pytest.mark.parametrize(
        "status", ["confirmed", "checked_in", "checked_out", "pending", "locked", "cancelled"]
    )
    def test_known_statuses(self, status):
        assert validate_booking(_booking(status=status), today=TODAY).valid is True

    def test_unknown_status(self):
        result = validate_booking(_booking(status="archived"), today=TODAY)
        assert result.errors == [
            "Invalid status. Must be one of: confirmed, checked_in, checked_out, pending, locked, cancelled"
        ]

    def test_numeric_room_number_accepted(self):
        assert validate_booking(_booking(room_number=5), today=TODAY).valid is True

    def test_idempotent(self):
        record = _booking(guest_name="", total_amount=-5, status="nope")
        first = validate_booking(record, today=TODAY)
        second = validate_booking(record, today=TODAY)
        assert first == second

    def test_does_not_mutate_record(self):
        record = _booking(guest_name="  Somchai ")
        validate_booking(record, today=TODAY)
        assert record["guest_name"] == "  Somchai "


class TestValidateTransaction:
    def test_valid_transaction(self):
        result = validate_transaction(_transaction(), today=TODAY)
        assert result.valid is True

    def test_unreasonably_high_amount(self):
        result = validate_transaction(_transaction(amount=15_000_000), today=TODAY)
        assert result.valid is False
        assert any("unreasonably high" in error for error in result.errors)

    def test_zero_amount_rejected(self):
        result = validate_transaction(_transaction(amount=0), today=TODAY)
        assert result.errors == ["Amount must be greater than 0"]

    def test_negative_amount_rejected(self):
        result = validate_transaction(_transaction(amount=-100), today=TODAY)
        assert result.errors == ["Amount must be greater than 0"]

    def test_missing_amount(self):
        result = validate_transaction(_transaction(amount=None), today=TODAY)
        assert result.errors == ["Amount is required"]

    def test_non_numeric_amount(self):
        result = validate_transaction(_transaction(amount="lots"), today=TODAY)
        assert result.errors == ["Amount must be a number"]

    def test_missing_fields(self):
        result = validate_transaction({}, today=TODAY)
        assert result.errors == [
            "Date is required",
            "Transaction type is required",
            "Category is required",
            "Amount is required",
        ]

    def test_unknown_type(self):
        result = validate_transaction(_transaction(type="REFUND"), today=TODAY)
        assert result.errors == ["Type must be either INCOME or EXPENSE"]

    def test_type_is_case_sensitive(self):
        result = validate_transaction(_transaction(type="income"), today=TODAY)
        assert result.errors == ["Type must be either INCOME or EXPENSE"]

    def test_invalid_date(self):
        result = validate_transaction(_transaction(date="yesterday"), today=TODAY)
        assert result.errors == ["Invalid date format"]

    def test_older_than_one_year(self):
        result = validate_transaction(_transaction(date="2025-01-31"), today=TODAY)
        assert result.errors == ["Transaction date is more than 1 year old"]

    def test_exactly_one_year_old_accepted(self):
        assert validate_transaction(_transaction(date="2025-02-01"), today=TODAY).valid is True

    def test_tomorrow_accepted(self):
        assert validate_transaction(_transaction(date="2026-02-02"), today=TODAY).valid is True

    def test_future_rejected(self):
        result = validate_transaction(_transaction(date="2026-02-03"), today=TODAY)
        assert result.errors == ["Transaction date cannot be in the future"]

    def test_leap_day_reference(self):
        leap_today = date(2024, 2, 29)
        result = validate_transaction(_transaction(date="2023-02-28"), today=leap_today)
        assert result.valid is True

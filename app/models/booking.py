"""Booking model — tracks room reservations."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Date, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, TimestampMixin


class Booking(TimestampMixin, Base):
    """A reservation of one room for a [check_in, check_out) date range."""

    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    guest_name: Mapped[str] = mapped_column(String(500))
    room_number: Mapped[str] = mapped_column(String(500), index=True)
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        default="confirmed",
        index=True,
    )  # confirmed, pending, locked, checked_in, checked_out, cancelled

    nights: Mapped[int | None] = mapped_column(Integer, nullable=True)
    price_per_night: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    deposit_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    deposit_status: Mapped[str | None] = mapped_column(String(20), nullable=True)  # unpaid, paid, refunded
    payment_status: Mapped[str | None] = mapped_column(String(20), nullable=True)  # unpaid, paid, deposit
    paid_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    ota_channel: Mapped[str | None] = mapped_column(String(500), nullable=True)
    confirmation_number: Mapped[str | None] = mapped_column(String(500), nullable=True, index=True)
    guest_details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    locked_until: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (Index("ix_bookings_room_check_in", "room_number", "check_in"),)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, room_number={self.room_number}, status={self.status})>"

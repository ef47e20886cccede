"""Transaction model — income and expense records for daily reconciliation."""

import datetime as dt
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, Date, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, TimestampMixin


class Transaction(TimestampMixin, Base):
    """A single financial record, optionally tied to a guest stay."""

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(10), index=True)  # INCOME, EXPENSE
    category: Mapped[str] = mapped_column(String(500), index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_reconciled: Mapped[bool] = mapped_column(Boolean, default=False)
    pms_reference_id: Mapped[str | None] = mapped_column(String(500), nullable=True)
    guest_data: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    customer_type: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Check-in extras captured at the front desk
    room: Mapped[str | None] = mapped_column(String(500), nullable=True)
    check_in: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    check_out: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    nights: Mapped[int | None] = mapped_column(Integer, nullable=True)
    scan_timestamp: Mapped[dt.datetime | None] = mapped_column(nullable=True)
    key_deposit: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    grand_total: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, type={self.type}, amount={self.amount})>"

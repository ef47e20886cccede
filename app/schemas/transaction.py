"""Pydantic v2 request/response schemas for transaction endpoints."""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.guest import CustomerType, GuestData


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class _TransactionFields(CamelModel):
    # Checked by validate_transaction
    date: Any = None
    type: Any = None
    category: Any = None
    amount: Any = None

    description: str | None = None
    image_url: str | None = None
    pms_reference_id: str | None = None
    guest_data: GuestData | None = None
    customer_type: CustomerType | None = None
    room: str | None = None
    check_in: dt.date | None = None
    check_out: dt.date | None = None
    nights: int | None = Field(None, ge=0)
    scan_timestamp: dt.datetime | None = None
    key_deposit: Decimal | None = Field(None, ge=0)
    grand_total: Decimal | None = Field(None, ge=0)


class TransactionCreate(_TransactionFields):
    """Schema for recording a transaction. ``id`` may be supplied by an offline client."""

    id: str | None = Field(None, max_length=32)
    is_reconciled: bool = False


class TransactionUpdate(_TransactionFields):
    """Schema for partially updating a transaction."""

    is_reconciled: bool | None = None


class ReconcileRequest(CamelModel):
    pms_reference_id: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransactionResponse(CamelModel):
    id: str
    date: dt.date
    type: TransactionType
    category: str
    amount: float
    description: str | None = None
    image_url: str | None = None
    is_reconciled: bool = False
    pms_reference_id: str | None = None
    guest_data: GuestData | None = None
    customer_type: CustomerType | None = None
    room: str | None = None
    check_in: dt.date | None = None
    check_out: dt.date | None = None
    nights: int | None = None
    scan_timestamp: dt.datetime | None = None
    key_deposit: float | None = None
    grand_total: float | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class TransactionListResponse(CamelModel):
    success: bool = True
    data: list[TransactionResponse]
    count: int

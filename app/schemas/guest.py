"""Guest identity data captured from an ID card or entered at the desk."""

from enum import Enum

from pydantic import Field

from app.schemas.common import CamelModel


class CustomerType(str, Enum):
    WALK_IN = "Walk-in"
    BOOKING = "Booking"
    CHECK_IN = "Check-in"


class GuestData(CamelModel):
    """Embedded guest details. Only the UI enforces required identity fields."""

    id_number: str | None = None
    title: str | None = None
    first_name_th: str | None = Field(None, alias="firstNameTH")
    last_name_th: str | None = Field(None, alias="lastNameTH")
    first_name_en: str | None = Field(None, alias="firstNameEN")
    last_name_en: str | None = Field(None, alias="lastNameEN")
    address: str | None = None
    dob: str | None = None
    issue_date: str | None = None
    expiry_date: str | None = None
    religion: str | None = None
    nationality: str | None = None
    occupation: str | None = None
    customer_type: CustomerType | None = None
    phone: str | None = None

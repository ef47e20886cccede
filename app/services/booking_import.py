"""Booking-email import — turns an OTA confirmation email into booking fields.

Text understanding is delegated to the configured LLM via LiteLLM. This
module only builds the prompt and checks the JSON that comes back. Parsed
bookings are returned to the caller, who creates them through the booking
gateway like any other booking.
"""

import json
import logging
import os

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_litellm import ChatLiteLLM
from pydantic import ValidationError

from app.config import settings
from app.schemas.booking import EmailBookingData, ParsedBooking
from app.services.rooms import calculate_nights
from app.services.validation import parse_date

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an assistant for a Thai resort. Extract booking information \
from Booking.com confirmation emails.

Extract the following fields:
- guestName: full name of the guest
- roomNumber: room number if the email states one
- checkIn: check-in date (YYYY-MM-DD)
- checkOut: check-out date (YYYY-MM-DD)
- totalAmount: total booking amount as a number, without currency symbols
- confirmationNumber: booking reference / confirmation number
- otaChannel: always "Booking.com"
- phone: guest phone number if available
- email: guest email if available
- nights: number of nights

If a field is missing use these defaults:
- totalAmount: 0
- confirmationNumber: taken from the subject line, or "UNKNOWN"

Return ONLY a JSON object with these keys."""


class BookingImportError(Exception):
    """The LLM call failed or returned something that is not a booking."""


def create_llm() -> ChatLiteLLM:
    if settings.gemini_api_key:
        os.environ["GEMINI_API_KEY"] = settings.gemini_api_key
    return ChatLiteLLM(model=settings.default_llm_model, temperature=0)


def is_from_booking_com(sender: str) -> bool:
    return "booking.com" in sender.lower()


def _extract_json(content: str) -> dict:
    """Parse the model reply, tolerating a ```json fenced block."""
    text = content.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    data = json.loads(text or "{}")
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


async def parse_booking_email(email: EmailBookingData, llm: ChatLiteLLM | None = None) -> ParsedBooking:
    """Ask the LLM to extract booking fields from ``email``.

    Args:
        email: The forwarded confirmation email.
        llm: Chat model to use; built from settings when omitted.

    Raises:
        BookingImportError: If the model call fails or its reply cannot be
            read as a booking.
    """
    llm = llm or create_llm()
    content = f"Subject: {email.subject}\nFrom: {email.sender}\nDate: {email.date}\n\nBody:\n{email.body}"

    try:
        response = await llm.ainvoke(
            [
                SystemMessage(content=SYSTEM_PROMPT),
                HumanMessage(content=content),
                HumanMessage(content="Extract booking information as JSON."),
            ]
        )
    except Exception as e:
        logger.exception("LLM call failed while parsing booking email")
        raise BookingImportError("Failed to parse booking email") from e

    try:
        booking = ParsedBooking.model_validate(_extract_json(str(response.content)))
    except (ValueError, ValidationError) as e:
        logger.warning("LLM reply was not a valid booking: %s", e)
        raise BookingImportError("Failed to parse booking email") from e

    if booking.nights is None:
        check_in = parse_date(booking.check_in)
        check_out = parse_date(booking.check_out)
        if check_in is not None and check_out is not None:
            booking.nights = calculate_nights(check_in, check_out)

    return booking

"""JSON envelopes shared by the routers.

Successful writes return ``{success: true, data, message}``; rejections
return ``{success: false, error, ...}`` where ``error`` names the kind of
failure.
"""

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from app.schemas.booking import BookingResponse
from app.services.booking_gateway import GatewayOutcome, GatewayResult

_STATUS_CODES = {
    GatewayOutcome.CREATED: status.HTTP_201_CREATED,
    GatewayOutcome.UPDATED: status.HTTP_200_OK,
    GatewayOutcome.DELETED: status.HTTP_200_OK,
    GatewayOutcome.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    GatewayOutcome.CONFLICT: status.HTTP_409_CONFLICT,
    GatewayOutcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def serialize_booking(record: dict[str, Any]) -> dict[str, Any]:
    return BookingResponse.model_validate(record).model_dump(mode="json", by_alias=True)


def validation_error(errors: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": "Validation failed", "errors": errors},
    )


def not_found(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"success": False, "error": "not found", "message": message},
    )


def render_gateway_result(result: GatewayResult) -> JSONResponse:
    """Map a gateway outcome to its HTTP status and body."""
    body: dict[str, Any] = {"success": result.success}
    match result.outcome:
        case GatewayOutcome.CREATED | GatewayOutcome.UPDATED:
            body["data"] = serialize_booking(result.data)
            body["message"] = result.message
        case GatewayOutcome.DELETED:
            body["message"] = result.message
        case GatewayOutcome.VALIDATION_FAILED:
            body["error"] = result.error
            body["errors"] = result.errors
        case GatewayOutcome.CONFLICT:
            body["error"] = result.error
            body["message"] = result.message
            body["conflictingBooking"] = serialize_booking(result.conflicting_booking)
        case GatewayOutcome.NOT_FOUND:
            body["error"] = result.error
            body["message"] = result.message
    return JSONResponse(status_code=_STATUS_CODES[result.outcome], content=body)

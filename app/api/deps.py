"""Shared API dependencies — single import point for all routers::

    from app.api.deps import get_booking_gateway, get_uow, require_api_key
"""

from collections.abc import AsyncIterator

from fastapi import Depends, Request

from app.auth.dependencies import enforce_rate_limit, require_api_key, require_import_secret
from app.repositories.base import Storage, UnitOfWork
from app.services.booking_gateway import BookingGateway


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    """Yield repositories from the storage strategy chosen at startup.

    With database storage the session commits when the request succeeds and
    rolls back if it raises.
    """
    storage: Storage = request.app.state.storage
    async with storage.unit_of_work() as uow:
        yield uow


async def get_booking_gateway(uow: UnitOfWork = Depends(get_uow)) -> BookingGateway:
    return BookingGateway(uow.bookings)


# Applied to every POST / PUT / DELETE route
WRITE_GUARDS = [Depends(require_api_key), Depends(enforce_rate_limit)]

__all__ = [
    "WRITE_GUARDS",
    "enforce_rate_limit",
    "get_booking_gateway",
    "get_uow",
    "require_api_key",
    "require_import_secret",
]

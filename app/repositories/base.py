"""Repository contracts shared by every storage strategy.

Repositories hand out detached plain-dict records keyed by snake_case field
name. Callers may mutate what they receive without touching stored state.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

Record = dict[str, Any]

MAX_BOOKING_ROWS = 1000


class BookingRepository(Protocol):
    async def list(
        self,
        *,
        status: str | None = None,
        room_number: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = MAX_BOOKING_ROWS,
    ) -> list[Record]: ...

    async def list_for_room(self, room_number: str) -> list[Record]: ...

    async def get(self, booking_id: str) -> Record | None: ...

    async def add(self, record: Record) -> Record: ...

    async def update(self, booking_id: str, fields: Record) -> Record | None: ...

    async def delete(self, booking_id: str) -> bool: ...

    def room_lock(self, room_number: str) -> AbstractAsyncContextManager[None]:
        """Serialize read-check-write sequences for one room."""
        ...


class TransactionRepository(Protocol):
    async def list(
        self,
        *,
        type: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 100,
    ) -> list[Record]: ...

    async def get(self, transaction_id: str) -> Record | None: ...

    async def add(self, record: Record) -> Record: ...

    async def update(self, transaction_id: str, fields: Record) -> Record | None: ...

    async def delete(self, transaction_id: str) -> bool: ...


@dataclass
class UnitOfWork:
    """Repositories sharing one storage session."""

    bookings: BookingRepository
    transactions: TransactionRepository


class Storage(Protocol):
    def unit_of_work(self) -> AbstractAsyncContextManager[UnitOfWork]: ...

    async def startup(self) -> None: ...

    async def dispose(self) -> None: ...

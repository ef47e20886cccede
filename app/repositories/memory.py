"""In-process storage strategy, used for local development and tests."""

from __future__ import annotations

import asyncio
import copy
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from app.repositories.base import MAX_BOOKING_ROWS, Record, UnitOfWork


def _in_window(value: date | None, start_date: date | None, end_date: date | None) -> bool:
    if start_date is None and end_date is None:
        return True
    if value is None:
        return False
    if start_date is not None and value < start_date:
        return False
    if end_date is not None and value > end_date:
        return False
    return True


class MemoryBookingRepository:
    def __init__(self, storage: MemoryStorage) -> None:
        self._rows = storage.bookings
        self._locks = storage.room_locks

    async def list(
        self,
        *,
        status: str | None = None,
        room_number: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = MAX_BOOKING_ROWS,
    ) -> list[Record]:
        rows = [
            row
            for row in self._rows.values()
            if (status is None or row.get("status") == status)
            and (room_number is None or row.get("room_number") == room_number)
            and _in_window(row.get("check_in"), start_date, end_date)
        ]
        rows.sort(key=lambda row: row["check_in"], reverse=True)
        return copy.deepcopy(rows[:limit])

    async def list_for_room(self, room_number: str) -> list[Record]:
        return [copy.deepcopy(row) for row in self._rows.values() if row.get("room_number") == room_number]

    async def get(self, booking_id: str) -> Record | None:
        row = self._rows.get(booking_id)
        return copy.deepcopy(row) if row is not None else None

    async def add(self, record: Record) -> Record:
        self._rows[record["id"]] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def update(self, booking_id: str, fields: Record) -> Record | None:
        row = self._rows.get(booking_id)
        if row is None:
            return None
        row.update(copy.deepcopy(fields))
        return copy.deepcopy(row)

    async def delete(self, booking_id: str) -> bool:
        return self._rows.pop(booking_id, None) is not None

    @asynccontextmanager
    async def room_lock(self, room_number: str) -> AsyncIterator[None]:
        async with self._locks[room_number]:
            yield


class MemoryTransactionRepository:
    def __init__(self, storage: MemoryStorage) -> None:
        self._rows = storage.transactions

    async def list(
        self,
        *,
        type: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 100,
    ) -> list[Record]:
        rows = [
            row
            for row in self._rows.values()
            if (type is None or row.get("type") == type)
            and (category is None or row.get("category") == category)
            and _in_window(row.get("date"), start_date, end_date)
        ]
        rows.sort(key=lambda row: (row["date"], row["created_at"]), reverse=True)
        return copy.deepcopy(rows[:limit])

    async def get(self, transaction_id: str) -> Record | None:
        row = self._rows.get(transaction_id)
        return copy.deepcopy(row) if row is not None else None

    async def add(self, record: Record) -> Record:
        self._rows[record["id"]] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def update(self, transaction_id: str, fields: Record) -> Record | None:
        row = self._rows.get(transaction_id)
        if row is None:
            return None
        row.update(copy.deepcopy(fields))
        return copy.deepcopy(row)

    async def delete(self, transaction_id: str) -> bool:
        return self._rows.pop(transaction_id, None) is not None


class MemoryStorage:
    """Keeps bookings and transactions in dicts owned by this instance."""

    def __init__(self) -> None:
        self.bookings: dict[str, Record] = {}
        self.transactions: dict[str, Record] = {}
        self.room_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[UnitOfWork]:
        yield UnitOfWork(
            bookings=MemoryBookingRepository(self),
            transactions=MemoryTransactionRepository(self),
        )

    async def startup(self) -> None:
        pass

    async def dispose(self) -> None:
        self.bookings.clear()
        self.transactions.clear()

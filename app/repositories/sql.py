"""PostgreSQL storage strategy backed by the async SQLAlchemy ORM."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import Base, create_engine, create_session_factory
from app.models import Booking, Transaction
from app.repositories.base import MAX_BOOKING_ROWS, Record, UnitOfWork

logger = logging.getLogger(__name__)


def _to_record(row: Booking | Transaction) -> Record:
    """Detach an ORM row into a plain dict keyed by column name."""
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


class SqlBookingRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list(
        self,
        *,
        status: str | None = None,
        room_number: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = MAX_BOOKING_ROWS,
    ) -> list[Record]:
        query = select(Booking)
        if status is not None:
            query = query.where(Booking.status == status)
        if room_number is not None:
            query = query.where(Booking.room_number == room_number)
        if start_date is not None:
            query = query.where(Booking.check_in >= start_date)
        if end_date is not None:
            query = query.where(Booking.check_in <= end_date)

        result = await self._session.execute(query.order_by(Booking.check_in.desc()).limit(limit))
        return [_to_record(row) for row in result.scalars().all()]

    async def list_for_room(self, room_number: str) -> list[Record]:
        result = await self._session.execute(select(Booking).where(Booking.room_number == room_number))
        return [_to_record(row) for row in result.scalars().all()]

    async def get(self, booking_id: str) -> Record | None:
        booking = await self._session.get(Booking, booking_id)
        return _to_record(booking) if booking is not None else None

    async def add(self, record: Record) -> Record:
        booking = Booking(**record)
        self._session.add(booking)
        await self._session.flush()
        await self._session.refresh(booking)
        return _to_record(booking)

    async def update(self, booking_id: str, fields: Record) -> Record | None:
        booking = await self._session.get(Booking, booking_id)
        if booking is None:
            return None
        for field, value in fields.items():
            setattr(booking, field, value)
        await self._session.flush()
        await self._session.refresh(booking)
        return _to_record(booking)

    async def delete(self, booking_id: str) -> bool:
        booking = await self._session.get(Booking, booking_id)
        if booking is None:
            return False
        await self._session.delete(booking)
        await self._session.flush()
        return True

    @asynccontextmanager
    async def room_lock(self, room_number: str) -> AsyncIterator[None]:
        # Transaction-scoped: released on commit or rollback of this session
        await self._session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:room))"),
            {"room": f"room:{room_number}"},
        )
        yield


class SqlTransactionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list(
        self,
        *,
        type: str | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int = 100,
    ) -> list[Record]:
        query = select(Transaction)
        if type is not None:
            query = query.where(Transaction.type == type)
        if category is not None:
            query = query.where(Transaction.category == category)
        if start_date is not None:
            query = query.where(Transaction.date >= start_date)
        if end_date is not None:
            query = query.where(Transaction.date <= end_date)

        query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc()).limit(limit)
        result = await self._session.execute(query)
        return [_to_record(row) for row in result.scalars().all()]

    async def get(self, transaction_id: str) -> Record | None:
        transaction = await self._session.get(Transaction, transaction_id)
        return _to_record(transaction) if transaction is not None else None

    async def add(self, record: Record) -> Record:
        transaction = Transaction(**record)
        self._session.add(transaction)
        await self._session.flush()
        await self._session.refresh(transaction)
        return _to_record(transaction)

    async def update(self, transaction_id: str, fields: Record) -> Record | None:
        transaction = await self._session.get(Transaction, transaction_id)
        if transaction is None:
            return None
        for field, value in fields.items():
            setattr(transaction, field, value)
        await self._session.flush()
        await self._session.refresh(transaction)
        return _to_record(transaction)

    async def delete(self, transaction_id: str) -> bool:
        transaction = await self._session.get(Transaction, transaction_id)
        if transaction is None:
            return False
        await self._session.delete(transaction)
        await self._session.flush()
        return True


class DatabaseStorage:
    """Opens one session per unit of work; commits on success, rolls back on error."""

    def __init__(self, settings: Settings) -> None:
        self.engine = create_engine(settings)
        self.session_factory = create_session_factory(self.engine)

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[UnitOfWork]:
        async with self.session_factory() as session:
            try:
                yield UnitOfWork(
                    bookings=SqlBookingRepository(session),
                    transactions=SqlTransactionRepository(session),
                )
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def startup(self) -> None:
        """Create missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    async def dispose(self) -> None:
        await self.engine.dispose()

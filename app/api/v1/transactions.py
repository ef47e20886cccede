"""Transactions API router — income and expense records and their reconciliation."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.api.deps import WRITE_GUARDS, get_uow
from app.api.responses import not_found, validation_error
from app.repositories.base import UnitOfWork
from app.schemas.transaction import (
    ReconcileRequest,
    TransactionCreate,
    TransactionListResponse,
    TransactionResponse,
    TransactionType,
    TransactionUpdate,
)
from app.services.booking_gateway import utcnow
from app.services.validation import parse_date, sanitize, to_number, validate_transaction

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])

# Changing any of these re-runs validate_transaction on the merged record
VALIDATED_FIELDS = ("date", "type", "category", "amount")
# Stored columns that may not be cleared with an explicit null
NON_NULLABLE_FIELDS = ("is_reconciled",)
FREE_TEXT_FIELDS = ("category", "description", "pms_reference_id", "room")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _new_transaction_id() -> str:
    return f"TX{uuid.uuid4().hex[:12].upper()}"


def _sanitized(payload: dict[str, Any]) -> dict[str, Any]:
    record = dict(payload)
    for field in FREE_TEXT_FIELDS:
        if record.get(field) is not None:
            record[field] = sanitize(record[field])
    return record


def _normalized(record: dict[str, Any]) -> dict[str, Any]:
    normalized = dict(record)
    if "date" in normalized:
        normalized["date"] = parse_date(normalized["date"])
    if "amount" in normalized:
        normalized["amount"] = Decimal(str(to_number(normalized["amount"])))
    return normalized


def _serialize(record: dict[str, Any]) -> dict[str, Any]:
    return TransactionResponse.model_validate(record).model_dump(mode="json", by_alias=True)


def _ok(record: dict[str, Any], message: str, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": _serialize(record), "message": message},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=TransactionListResponse,
    summary="List transactions",
)
async def list_transactions(
    type_filter: TransactionType | None = Query(None, alias="type", description="INCOME or EXPENSE"),
    category: str | None = Query(None, description="Filter by category"),
    start_date: date | None = Query(None, alias="startDate", description="Transactions on or after this date"),
    end_date: date | None = Query(None, alias="endDate", description="Transactions on or before this date"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of rows"),
    uow: UnitOfWork = Depends(get_uow),
) -> dict:
    """Return transactions, newest first."""
    items = await uow.transactions.list(
        type=type_filter.value if type_filter else None,
        category=category,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )
    return {"success": True, "data": items, "count": len(items)}


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get a transaction",
)
async def get_transaction(
    transaction_id: str,
    uow: UnitOfWork = Depends(get_uow),
) -> dict | JSONResponse:
    transaction = await uow.transactions.get(transaction_id)
    if transaction is None:
        return not_found("Transaction not found")
    return transaction


@router.post(
    "",
    summary="Record a transaction",
    dependencies=WRITE_GUARDS,
    responses={400: {"description": "Validation failed"}},
)
async def create_transaction(
    body: TransactionCreate,
    uow: UnitOfWork = Depends(get_uow),
) -> JSONResponse:
    """Validate and store a transaction. It starts unreconciled unless stated."""
    record = _sanitized(body.model_dump(exclude_unset=True))

    validation = validate_transaction(record)
    if not validation.valid:
        logger.info("Transaction rejected: %s", "; ".join(validation.errors))
        return validation_error(validation.errors)

    if record.get("id") and await uow.transactions.get(record["id"]) is not None:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"success": False, "error": "Transaction already exists", "message": record["id"]},
        )

    record = _normalized(record)
    now = utcnow()
    record["id"] = record.get("id") or _new_transaction_id()
    record.setdefault("is_reconciled", False)
    record["created_at"] = now
    record["updated_at"] = now

    stored = await uow.transactions.add(record)
    logger.info("Recorded %s transaction %s (%s)", stored["type"], stored["id"], stored["amount"])
    return _ok(stored, "Transaction created successfully", status.HTTP_201_CREATED)


@router.put(
    "/{transaction_id}",
    summary="Update a transaction",
    dependencies=WRITE_GUARDS,
    responses={400: {"description": "Validation failed"}, 404: {"description": "Transaction not found"}},
)
async def update_transaction(
    transaction_id: str,
    body: TransactionUpdate,
    uow: UnitOfWork = Depends(get_uow),
) -> JSONResponse:
    """Partially update a transaction.

    The merged record is re-validated only when date, type, category or
    amount change, so older records can still be edited for reconciliation.
    """
    current = await uow.transactions.get(transaction_id)
    if current is None:
        return not_found("Transaction not found")

    changes = _sanitized(body.model_dump(exclude_unset=True))
    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]
    if any(field in changes for field in VALIDATED_FIELDS):
        validation = validate_transaction({**current, **changes})
        if not validation.valid:
            return validation_error(validation.errors)
        changes = _normalized(changes)

    changes["updated_at"] = utcnow()
    updated = await uow.transactions.update(transaction_id, changes)
    if updated is None:
        return not_found("Transaction not found")
    return _ok(updated, "Transaction updated successfully")


@router.post(
    "/{transaction_id}/reconcile",
    summary="Mark a transaction as reconciled",
    dependencies=WRITE_GUARDS,
    responses={404: {"description": "Transaction not found"}},
)
async def reconcile_transaction(
    transaction_id: str,
    body: ReconcileRequest,
    uow: UnitOfWork = Depends(get_uow),
) -> JSONResponse:
    """Flag the transaction as matched, optionally recording the PMS reference."""
    changes: dict[str, Any] = {"is_reconciled": True, "updated_at": utcnow()}
    if body.pms_reference_id:
        changes["pms_reference_id"] = sanitize(body.pms_reference_id)

    updated = await uow.transactions.update(transaction_id, changes)
    if updated is None:
        return not_found("Transaction not found")
    logger.info("Reconciled transaction %s", transaction_id)
    return _ok(updated, "Transaction reconciled")


@router.delete(
    "/{transaction_id}",
    summary="Delete a transaction",
    dependencies=WRITE_GUARDS,
    responses={404: {"description": "Transaction not found"}},
)
async def delete_transaction(
    transaction_id: str,
    uow: UnitOfWork = Depends(get_uow),
) -> JSONResponse:
    if not await uow.transactions.delete(transaction_id):
        return not_found("Transaction not found")
    logger.info("Deleted transaction %s", transaction_id)
    return JSONResponse(content={"success": True, "message": "Transaction deleted successfully"})

"""/v1/transactions - income and expense CRUD"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_current_user, get_request_id
from finance_tracker.api.errors import domain_errors
from finance_tracker.api.v1.schemas import TransactionCreate, TransactionResponse, TransactionUpdate
from finance_tracker.domain.normalize import normalize_transaction_type, signed_amount
from finance_tracker.infrastructure.clients.auth import AuthenticatedUser
from finance_tracker.infrastructure.database.models import TransactionRecord
from finance_tracker.infrastructure.database.repositories import TransactionRepository, convert_all, to_transaction
from finance_tracker.infrastructure.database.session import get_db

router = APIRouter()


def transaction_response(record: TransactionRecord) -> TransactionResponse:
    txn = to_transaction(record)
    return TransactionResponse(
        id=txn.id,
        date=txn.date,
        month=record.month,
        account_id=txn.account_id,
        type=txn.type,
        category=txn.category,
        description=txn.description,
        total=txn.total,
        signed_total=signed_amount(txn.type, txn.total),
        notes=txn.notes,
    )


@router.get("/transactions", response_model=List[TransactionResponse])
def list_transactions(
    request: Request,
    type: Optional[str] = Query(None, description="income | expense"),
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="YYYY-MM"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List transactions newest first, optionally filtered by type and month"""
    with domain_errors(db, get_request_id(request)):
        txn_type = normalize_transaction_type(type) if type else None
        records = TransactionRepository(db, user.id).list_filtered(txn_type=txn_type, month=month, limit=limit)
        return convert_all(records, transaction_response)


@router.post("/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(
    payload: TransactionCreate,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Record a transaction.

    `type` is accepted in any case and `total` with either sign; the stored
    total is always the magnitude and the direction comes from `type`.
    """
    with domain_errors(db, get_request_id(request)):
        record = TransactionRepository(db, user.id).create(**payload.model_dump())
        db.commit()
        return transaction_response(record)


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        return transaction_response(TransactionRepository(db, user.id).get(transaction_id))


@router.put("/transactions/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        record = TransactionRepository(db, user.id).update(
            transaction_id, **payload.model_dump(exclude_unset=True)
        )
        db.commit()
        return transaction_response(record)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        TransactionRepository(db, user.id).delete(transaction_id)
        db.commit()
    return Response(status_code=204)

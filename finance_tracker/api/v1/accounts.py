"""/v1/accounts - account CRUD with running balances and net worth"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_current_user, get_request_id
from finance_tracker.api.errors import domain_errors
from finance_tracker.api.v1.schemas import (
    AccountBalanceSchema,
    AccountCreate,
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
    NetWorthSchema,
)
from finance_tracker.domain.metrics import calculate_account_balances, calculate_current_net_worth
from finance_tracker.infrastructure.clients.auth import AuthenticatedUser
from finance_tracker.infrastructure.database.models import AccountRecord
from finance_tracker.infrastructure.database.repositories import (
    AccountRepository,
    DebtRepository,
    convert_all,
    TransactionRepository,
    to_account,
    to_debt,
    to_transaction,
)
from finance_tracker.infrastructure.database.session import get_db

router = APIRouter()


def account_response(record: AccountRecord) -> AccountResponse:
    return AccountResponse(**asdict(to_account(record)))


@router.get("/accounts", response_model=AccountListResponse)
def list_accounts(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List accounts with their running balances.

    Net worth includes outstanding debts so it matches the dashboard figure.
    """
    with domain_errors(db, get_request_id(request)):
        records = AccountRepository(db, user.id).list()
        transactions = convert_all(TransactionRepository(db, user.id).list_filtered(), to_transaction)
        debts = convert_all(DebtRepository(db, user.id).list(), to_debt)

    accounts = [to_account(r) for r in records]
    balances = calculate_account_balances(accounts, transactions)
    net_worth = calculate_current_net_worth(accounts, transactions, sum(d.amount for d in debts))

    return AccountListResponse(
        accounts=[
            AccountBalanceSchema(
                account=account_response(record),
                initial_value=balance.initial_value,
                transaction_total=balance.transaction_total,
                current_value=balance.current_value,
            )
            for record, balance in zip(records, balances)
        ],
        net_worth=NetWorthSchema(**asdict(net_worth)),
    )


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    payload: AccountCreate,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        record = AccountRepository(db, user.id).create(**payload.model_dump())
        db.commit()
        return account_response(record)


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        return account_response(AccountRepository(db, user.id).get(account_id))


@router.put("/accounts/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    payload: AccountUpdate,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        record = AccountRepository(db, user.id).update(account_id, **payload.model_dump(exclude_unset=True))
        db.commit()
        return account_response(record)


@router.delete("/accounts/{account_id}", status_code=204)
def delete_account(
    account_id: str,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete an account together with the transactions booked to it"""
    with domain_errors(db, get_request_id(request)):
        AccountRepository(db, user.id).delete(account_id)
        db.commit()
    return Response(status_code=204)

"""/v1/debts - debt CRUD, strategy ordering and payoff projections"""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_as_of, get_current_user, get_request_id
from finance_tracker.api.errors import domain_errors
from finance_tracker.api.v1.schemas import (
    AggregatePayoffSchema,
    DebtCreate,
    DebtDetailResponse,
    DebtListResponse,
    DebtResponse,
    DebtSummarySchema,
    DebtUpdate,
    PayoffSchema,
)
from finance_tracker.config import settings
from finance_tracker.domain.metrics import summarize_debts, summarize_month
from finance_tracker.domain.normalize import normalize_strategy
from finance_tracker.domain.payoff import estimate_aggregate_payoff, order_debts, project_debt
from finance_tracker.infrastructure.clients.auth import AuthenticatedUser
from finance_tracker.infrastructure.database.repositories import (
    DebtRepository,
    TransactionRepository,
    convert_all,
    to_debt,
    to_transaction,
)
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.utils.date_utils import month_key

router = APIRouter()


@router.get("/debts", response_model=DebtListResponse)
def list_debts(
    request: Request,
    strategy: str = Query("avalanche", description="avalanche | snowball"),
    as_of: date = Depends(get_as_of),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Debts in payoff order for the chosen strategy, with totals.

    Debt-to-income uses income recorded in as_of's month.
    """
    with domain_errors(db, get_request_id(request)):
        payoff_strategy = normalize_strategy(strategy)
        debts = convert_all(DebtRepository(db, user.id).list(), to_debt)
        month_txns = convert_all(TransactionRepository(db, user.id).list_filtered(month=month_key(as_of)), to_transaction)

    income = summarize_month(month_txns, as_of.year, as_of.month).income
    summary = summarize_debts(debts, income)
    estimate = estimate_aggregate_payoff(debts, as_of)

    return DebtListResponse(
        strategy=payoff_strategy,
        debts=[DebtResponse(**asdict(d)) for d in order_debts(debts, payoff_strategy)],
        summary=DebtSummarySchema(**asdict(summary)),
        estimated_payoff=(
            AggregatePayoffSchema(**asdict(estimate)) if estimate else None
        ),
    )


@router.post("/debts", response_model=DebtResponse, status_code=201)
def create_debt(
    payload: DebtCreate,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        record = DebtRepository(db, user.id).create(**payload.model_dump())
        db.commit()
        return DebtResponse(**asdict(to_debt(record)))


@router.get("/debts/{debt_id}", response_model=DebtDetailResponse)
def get_debt(
    debt_id: str,
    request: Request,
    as_of: date = Depends(get_as_of),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Debt details with a month-by-month payoff projection at the minimum payment.

    Returns:
        Months to payoff, payoff date and total interest, or an unpayable status
    """
    with domain_errors(db, get_request_id(request)):
        debt = to_debt(DebtRepository(db, user.id).get(debt_id))

    result = project_debt(debt, as_of, settings.payoff_max_months)

    return DebtDetailResponse(
        debt=DebtResponse(**asdict(debt)),
        payoff=PayoffSchema(**asdict(result.projection)),
    )


@router.put("/debts/{debt_id}", response_model=DebtResponse)
def update_debt(
    debt_id: str,
    payload: DebtUpdate,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        record = DebtRepository(db, user.id).update(debt_id, **payload.model_dump(exclude_unset=True))
        db.commit()
        return DebtResponse(**asdict(to_debt(record)))


@router.delete("/debts/{debt_id}", status_code=204)
def delete_debt(
    debt_id: str,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        DebtRepository(db, user.id).delete(debt_id)
        db.commit()
    return Response(status_code=204)

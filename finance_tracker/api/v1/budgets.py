"""/v1/budgets - budget CRUD with current-month progress"""

from datetime import date

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_as_of, get_current_user, get_request_id
from finance_tracker.api.errors import domain_errors
from finance_tracker.api.v1.schemas import (
    BudgetCreate,
    BudgetListResponse,
    BudgetProgressSchema,
    BudgetResponse,
    BudgetUpdate,
)
from finance_tracker.domain.metrics import calculate_budget_progress, summarize_budgets
from finance_tracker.domain.models import BudgetProgress, TransactionType
from finance_tracker.infrastructure.clients.auth import AuthenticatedUser
from finance_tracker.infrastructure.database.repositories import (
    BudgetRepository,
    TransactionRepository,
    convert_all,
    to_budget,
    to_transaction,
)
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.utils.date_utils import month_key

router = APIRouter()


def budget_progress_schema(progress: BudgetProgress) -> BudgetProgressSchema:
    return BudgetProgressSchema(
        id=progress.budget.id,
        category=progress.budget.category,
        budget_amount=progress.budget.budget_amount,
        start_date=progress.budget.start_date,
        end_date=progress.budget.end_date,
        spent_amount=progress.spent_amount,
        percentage=progress.percentage,
    )


@router.get("/budgets", response_model=BudgetListResponse)
def list_budgets(
    request: Request,
    as_of: date = Depends(get_as_of),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Budgets with spend for as_of's month, most consumed first.

    Returns:
        Per-budget spent amount and percentage plus overall totals
    """
    month = month_key(as_of)
    with domain_errors(db, get_request_id(request)):
        budgets = [to_budget(r) for r in BudgetRepository(db, user.id).list()]
        expenses = convert_all(
            TransactionRepository(db, user.id).list_filtered(txn_type=TransactionType.EXPENSE, month=month),
            to_transaction,
        )

    progress = calculate_budget_progress(budgets, expenses, as_of.year, as_of.month)
    totals = summarize_budgets(progress)

    return BudgetListResponse(
        month=month,
        budgets=[budget_progress_schema(p) for p in progress],
        total_budget=totals.total_budget,
        total_spent=totals.total_spent,
    )


@router.post("/budgets", response_model=BudgetResponse, status_code=201)
def create_budget(
    payload: BudgetCreate,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        record = BudgetRepository(db, user.id).create(**payload.model_dump())
        db.commit()
        return BudgetResponse.model_validate(record)


@router.get("/budgets/{budget_id}", response_model=BudgetResponse)
def get_budget(
    budget_id: str,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        return BudgetResponse.model_validate(BudgetRepository(db, user.id).get(budget_id))


@router.put("/budgets/{budget_id}", response_model=BudgetResponse)
def update_budget(
    budget_id: str,
    payload: BudgetUpdate,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        record = BudgetRepository(db, user.id).update(budget_id, **payload.model_dump(exclude_unset=True))
        db.commit()
        return BudgetResponse.model_validate(record)


@router.delete("/budgets/{budget_id}", status_code=204)
def delete_budget(
    budget_id: str,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        BudgetRepository(db, user.id).delete(budget_id)
        db.commit()
    return Response(status_code=204)

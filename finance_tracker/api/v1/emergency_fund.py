"""/v1/emergency-fund - single emergency fund per user and its coverage"""

from dataclasses import asdict
from datetime import date

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_as_of, get_current_user, get_request_id
from finance_tracker.api.errors import domain_errors
from finance_tracker.api.v1.schemas import EmergencyFundCoverageSchema, EmergencyFundResponse, EmergencyFundUpsert
from finance_tracker.config import settings
from finance_tracker.domain.metrics import (
    average_monthly_expenses,
    calculate_emergency_fund_coverage,
    suggest_emergency_goal,
)
from finance_tracker.domain.models import TransactionType
from finance_tracker.infrastructure.clients.auth import AuthenticatedUser
from finance_tracker.infrastructure.database.models import EmergencyFundRecord
from finance_tracker.infrastructure.database.repositories import (
    EmergencyFundRepository,
    TransactionRepository,
    convert_all,
    to_emergency_fund,
    to_transaction,
)
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.utils.date_utils import month_start

router = APIRouter()

DEFAULT_TARGET_MONTHS = 3


def _average_expenses(db: Session, user_id: str, as_of: date) -> float:
    lookback = settings.emergency_fund_lookback_months
    since = month_start(as_of) - relativedelta(months=lookback)
    expenses = TransactionRepository(db, user_id).list_filtered(txn_type=TransactionType.EXPENSE, since=since)
    return average_monthly_expenses(convert_all(expenses, to_transaction), as_of, lookback)


def _fund_response(record: EmergencyFundRecord | None, monthly_expenses: float) -> EmergencyFundResponse:
    fund = to_emergency_fund(record) if record is not None else None
    coverage = calculate_emergency_fund_coverage(fund, monthly_expenses)
    target_months = fund.target_months if fund is not None else DEFAULT_TARGET_MONTHS

    return EmergencyFundResponse(
        configured=coverage is not None,
        coverage=EmergencyFundCoverageSchema(**asdict(coverage)) if coverage else None,
        notes=fund.notes if fund is not None else None,
        average_monthly_expenses=monthly_expenses,
        suggested_goal=suggest_emergency_goal(monthly_expenses, target_months),
    )


@router.get("/emergency-fund", response_model=EmergencyFundResponse)
def get_emergency_fund(
    request: Request,
    as_of: date = Depends(get_as_of),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Emergency fund progress and months of expenses covered.

    `configured` is false and `coverage` null until the user sets a fund up.
    """
    with domain_errors(db, get_request_id(request)):
        record = EmergencyFundRepository(db, user.id).get()
        monthly_expenses = _average_expenses(db, user.id, as_of)
        return _fund_response(record, monthly_expenses)


@router.put("/emergency-fund", response_model=EmergencyFundResponse)
def upsert_emergency_fund(
    payload: EmergencyFundUpsert,
    request: Request,
    as_of: date = Depends(get_as_of),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create or replace the fund; a missing goal defaults to target_months of average expenses"""
    with domain_errors(db, get_request_id(request)):
        monthly_expenses = _average_expenses(db, user.id, as_of)
        fields = payload.model_dump()
        if fields["goal_amount"] is None:
            fields["goal_amount"] = suggest_emergency_goal(monthly_expenses, payload.target_months)

        record = EmergencyFundRepository(db, user.id).upsert(**fields)
        db.commit()
        return _fund_response(record, monthly_expenses)


@router.delete("/emergency-fund", status_code=204)
def delete_emergency_fund(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with domain_errors(db, get_request_id(request)):
        EmergencyFundRepository(db, user.id).delete()
        db.commit()
    return Response(status_code=204)

"""GET /v1/dashboard - every derived figure for the signed-in user"""

import time
import logging
from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finance_tracker.api.dependencies import get_as_of, get_current_user, get_request_id
from finance_tracker.api.v1.budgets import budget_progress_schema
from finance_tracker.api.v1.schemas import (
    AggregatePayoffSchema,
    CategoryExpenseSchema,
    DashboardResponse,
    DebtProjectionSchema,
    DebtSummarySchema,
    EmergencyFundCoverageSchema,
    MonthlySummarySchema,
    MonthlyTrendPointSchema,
    NetWorthSchema,
    PayoffSchema,
    RecentTransactionSchema,
)
from finance_tracker.config import settings
from finance_tracker.domain.exceptions import StorageError
from finance_tracker.domain.metrics import build_dashboard
from finance_tracker.domain.models import DashboardSummary, PayoffStatus
from finance_tracker.infrastructure.clients.auth import AuthenticatedUser
from finance_tracker.infrastructure.database.repositories import SnapshotRepository
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.observability.logging import log_dashboard
from finance_tracker.infrastructure.observability.metrics import (
    dashboard_counter,
    record_dashboard,
    snapshot_fetch_failures_counter,
)

router = APIRouter()


def dashboard_response(summary: DashboardSummary) -> DashboardResponse:
    return DashboardResponse(
        as_of=summary.as_of,
        net_worth=NetWorthSchema(**asdict(summary.net_worth)),
        current_month=MonthlySummarySchema(**asdict(summary.current_month)),
        monthly_trend=[MonthlyTrendPointSchema(**asdict(p)) for p in summary.monthly_trend],
        expense_categories=[CategoryExpenseSchema(**asdict(c)) for c in summary.expense_categories],
        budget_progress=[budget_progress_schema(p) for p in summary.budget_progress],
        total_budget=summary.budget_totals.total_budget,
        total_spent=summary.budget_totals.total_spent,
        debt_summary=DebtSummarySchema(**asdict(summary.debt_summary)),
        debt_projections=[
            DebtProjectionSchema(
                debt_id=p.debt.id,
                name=p.debt.name,
                payoff=PayoffSchema(**asdict(p.projection)),
            )
            for p in summary.debt_projections
        ],
        estimated_payoff=(
            AggregatePayoffSchema(**asdict(summary.aggregate_payoff)) if summary.aggregate_payoff else None
        ),
        emergency_fund=(
            EmergencyFundCoverageSchema(**asdict(summary.emergency_fund)) if summary.emergency_fund else None
        ),
        recent_transactions=[
            RecentTransactionSchema(
                id=t.id,
                date=t.date,
                account_id=t.account_id,
                type=t.type,
                category=t.category,
                description=t.description,
                total=t.total,
            )
            for t in summary.recent_transactions
        ],
    )


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    request: Request,
    as_of: date = Depends(get_as_of),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Compute the dashboard for the signed-in user.

    Flow:
    1. Load every record into an immutable snapshot
    2. Derive net worth, monthly figures, budgets, debts and emergency fund
    3. Record metrics and logs

    If the snapshot cannot be loaded the request fails with 503; the
    calculator never runs on partial data.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        snapshot = SnapshotRepository(db).load_snapshot(user.id)

    except (StorageError, SQLAlchemyError) as e:
        snapshot_fetch_failures_counter.inc()
        dashboard_counter.labels(outcome="storage_error").inc()
        db.rollback()
        logging.error(f"Snapshot fetch failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Storage service unavailable")

    summary = build_dashboard(
        snapshot,
        as_of,
        trend_months=settings.trend_months,
        payoff_max_months=settings.payoff_max_months,
        emergency_lookback_months=settings.emergency_fund_lookback_months,
    )

    statuses = [p.projection.status.value for p in summary.debt_projections]
    duration_ms = (time.time() - start_time) * 1000
    record_dashboard(summary.current_month.savings_rate, statuses)
    log_dashboard(
        request_id,
        user.id,
        transaction_count=len(snapshot.transactions),
        debt_count=len(snapshot.debts),
        unpayable_debts=statuses.count(PayoffStatus.UNPAYABLE.value),
        duration_ms=duration_ms,
    )

    return dashboard_response(summary)

"""Debt payoff projections: month-by-month amortization and aggregate estimates"""

import math
from datetime import date
from typing import List, Optional, Sequence

from finance_tracker.domain.models import (
    AggregatePayoffEstimate,
    Debt,
    DebtProjection,
    DebtStrategy,
    PayoffProjection,
    PayoffStatus,
)
from finance_tracker.domain.normalize import to_number
from finance_tracker.utils.date_utils import add_months

DEFAULT_MAX_MONTHS = 1200


def simulate_payoff(
    balance: float,
    annual_rate_percent: float,
    monthly_payment: float,
    start: date,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> PayoffProjection:
    """
    Simulate paying a debt down with a fixed monthly payment.

    Each month accrues simple monthly interest (annual rate / 12) on the
    remaining balance, then applies the payment. The final payment is capped at
    balance + interest so nothing is overpaid.

    Returns:
        PAID_OFF with months, payoff date and total interest paid;
        UNPAYABLE if a payment ever fails to cover that month's interest;
        EXCEEDS_HORIZON if the balance is still open after max_months.
    """
    remaining = max(to_number(balance), 0.0)
    monthly_rate = max(to_number(annual_rate_percent), 0.0) / 100 / 12
    payment = to_number(monthly_payment)

    months = 0
    total_interest = 0.0

    while remaining > 0 and months < max_months:
        interest = remaining * monthly_rate

        # Balance would grow (or stand still) forever
        if payment <= interest:
            return PayoffProjection(
                status=PayoffStatus.UNPAYABLE,
                months=0,
                payoff_date=None,
                total_interest=0.0,
            )

        total_interest += interest
        if payment >= remaining + interest:
            remaining = 0.0
        else:
            remaining -= payment - interest
        months += 1

    if remaining > 0:
        return PayoffProjection(
            status=PayoffStatus.EXCEEDS_HORIZON,
            months=months,
            payoff_date=None,
            total_interest=round(total_interest, 2),
        )

    return PayoffProjection(
        status=PayoffStatus.PAID_OFF,
        months=months,
        payoff_date=add_months(start, months),
        total_interest=round(total_interest, 2),
    )


def project_debt(debt: Debt, start: date, max_months: int = DEFAULT_MAX_MONTHS) -> DebtProjection:
    """Payoff projection for a single debt paying only its minimum"""
    projection = simulate_payoff(debt.amount, debt.interest_rate, debt.min_payment, start, max_months)
    return DebtProjection(debt=debt, projection=projection)


def estimate_aggregate_payoff(debts: Sequence[Debt], start: date) -> Optional[AggregatePayoffEstimate]:
    """
    Rough payoff estimate for all debts combined.

    Uses the annuity formula n = log(1 / (1 - B*r/P)) / log(1 + r) with the
    average monthly rate across debts. Falls back to B / P when the formula is
    undefined (zero rate, payment not covering interest) or negative.

    Returns None when there are no debts or no scheduled payments.
    """
    if not debts:
        return None

    total = sum(to_number(d.amount) for d in debts)
    payments = sum(to_number(d.min_payment) for d in debts)
    if payments <= 0:
        return None

    avg_rate = sum(to_number(d.interest_rate) for d in debts) / len(debts) / 100 / 12

    try:
        months = math.log(1 / (1 - (total * avg_rate / payments))) / math.log(1 + avg_rate)
    except (ValueError, ZeroDivisionError):
        months = math.nan

    used_fallback = False
    if not math.isfinite(months) or months < 0:
        months = total / payments
        used_fallback = True

    return AggregatePayoffEstimate(
        months=months,
        payoff_date=add_months(start, math.ceil(months)),
        used_fallback=used_fallback,
    )


def order_debts(debts: Sequence[Debt], strategy: DebtStrategy) -> List[Debt]:
    """
    Order debts in the sequence they should receive extra payments.

    - Avalanche: highest interest rate first
    - Snowball: smallest balance first
    """
    if strategy == DebtStrategy.SNOWBALL:
        return sorted(debts, key=lambda d: (to_number(d.amount), d.name))
    return sorted(debts, key=lambda d: (-to_number(d.interest_rate), d.name))

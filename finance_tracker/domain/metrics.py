"""Financial metrics calculator - derives dashboard figures from a read-only snapshot"""

import math
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from finance_tracker.domain.models import (
    Account,
    AccountBalance,
    Budget,
    BudgetProgress,
    BudgetTotals,
    CategoryExpense,
    DashboardSummary,
    Debt,
    DebtSummary,
    EmergencyFund,
    EmergencyFundCoverage,
    FinancialSnapshot,
    MonthlySummary,
    MonthlyTrendPoint,
    NetWorth,
    Transaction,
    TransactionType,
)
from finance_tracker.domain.normalize import category_key, normalize_category, signed_amount, to_number
from finance_tracker.domain.payoff import DEFAULT_MAX_MONTHS, estimate_aggregate_payoff, project_debt
from finance_tracker.utils.date_utils import in_month, month_label, month_start, trailing_months

# Debt-to-income bands (percent of monthly income going to minimum payments)
DTI_HEALTHY_MAX = 36.0
DTI_MODERATE_MAX = 43.0


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round .5 away from zero for positive values (round() would round to even)"""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def _in_month(transactions: Sequence[Transaction], year: int, month: int) -> List[Transaction]:
    return [t for t in transactions if in_month(t.date, year, month)]


def _sum_by_type(transactions: Sequence[Transaction], txn_type: TransactionType) -> float:
    return sum(abs(to_number(t.total)) for t in transactions if t.type == txn_type)


def calculate_net_worth(accounts: Sequence[Account], total_debt_amount: float = 0.0) -> NetWorth:
    """
    Net worth = assets - (negative account balances + outstanding debts).

    Account sign decides classification; zero-value accounts count for neither side.
    """
    values = [to_number(a.value) for a in accounts]
    total_assets = sum(v for v in values if v > 0)
    liabilities_from_accounts = sum(abs(v) for v in values if v < 0)
    total_debt = to_number(total_debt_amount)
    total_liabilities = liabilities_from_accounts + total_debt

    return NetWorth(
        total_assets=total_assets,
        liabilities_from_accounts=liabilities_from_accounts,
        total_debt=total_debt,
        total_liabilities=total_liabilities,
        net_worth=total_assets - total_liabilities,
    )


def summarize_month(transactions: Sequence[Transaction], year: int, month: int) -> MonthlySummary:
    """
    Income, expenses and savings rate for one calendar month.

    Savings rate is clamped at 0 so overspending never shows as a negative
    rate; net_savings keeps the signed difference.
    """
    month_txns = _in_month(transactions, year, month)
    income = _sum_by_type(month_txns, TransactionType.INCOME)
    expenses = _sum_by_type(month_txns, TransactionType.EXPENSE)

    savings_rate = max(0.0, (income - expenses) / income * 100) if income > 0 else 0.0

    return MonthlySummary(
        year=year,
        month=month,
        income=income,
        expenses=expenses,
        net_savings=income - expenses,
        savings_rate=savings_rate,
    )


def build_monthly_trend(
    transactions: Sequence[Transaction], as_of: date, months: int = 6
) -> List[MonthlyTrendPoint]:
    """Income/expense/savings per month for the trailing window, oldest first"""
    buckets: Dict[Tuple[int, int], List[float]] = {
        key: [0.0, 0.0] for key in trailing_months(as_of, months)
    }

    for txn in transactions:
        key = (txn.date.year, txn.date.month)
        if key not in buckets:
            continue
        if txn.type == TransactionType.INCOME:
            buckets[key][0] += abs(to_number(txn.total))
        elif txn.type == TransactionType.EXPENSE:
            buckets[key][1] += abs(to_number(txn.total))

    return [
        MonthlyTrendPoint(
            year=year,
            month=month,
            label=month_label(month),
            income=income,
            expenses=expenses,
            savings=income - expenses,
        )
        for (year, month), (income, expenses) in buckets.items()
    ]


def expense_breakdown(transactions: Sequence[Transaction], year: int, month: int) -> List[CategoryExpense]:
    """Expenses for the month grouped by category, largest first"""
    totals: Dict[str, float] = {}
    labels: Dict[str, str] = {}

    for txn in _in_month(transactions, year, month):
        if txn.type != TransactionType.EXPENSE:
            continue
        key = category_key(txn.category)
        labels.setdefault(key, normalize_category(txn.category))
        totals[key] = totals.get(key, 0.0) + abs(to_number(txn.total))

    breakdown = [CategoryExpense(category=labels[key], amount=amount) for key, amount in totals.items()]
    breakdown.sort(key=lambda c: c.amount, reverse=True)
    return breakdown


def calculate_budget_progress(
    budgets: Sequence[Budget], transactions: Sequence[Transaction], year: int, month: int
) -> List[BudgetProgress]:
    """
    Spend against each budget for the month, most consumed first.

    Budgets match expense transactions by case-insensitive category. Every
    budget is evaluated on its own, so two budgets sharing a category both see
    the same spend.
    """
    spend_by_category: Dict[str, float] = {}
    for txn in _in_month(transactions, year, month):
        if txn.type == TransactionType.EXPENSE:
            key = category_key(txn.category)
            spend_by_category[key] = spend_by_category.get(key, 0.0) + abs(to_number(txn.total))

    progress = []
    for budget in budgets:
        spent = spend_by_category.get(category_key(budget.category), 0.0)
        amount = to_number(budget.budget_amount)
        percentage = int(round_half_up(spent / amount * 100)) if amount > 0 else 0
        progress.append(BudgetProgress(budget=budget, spent_amount=spent, percentage=percentage))

    progress.sort(key=lambda p: p.percentage, reverse=True)
    return progress


def summarize_budgets(progress: Sequence[BudgetProgress]) -> BudgetTotals:
    return BudgetTotals(
        total_budget=sum(to_number(p.budget.budget_amount) for p in progress),
        total_spent=sum(p.spent_amount for p in progress),
    )


def classify_debt_to_income(ratio: float) -> str:
    if ratio <= DTI_HEALTHY_MAX:
        return "Healthy"
    elif ratio <= DTI_MODERATE_MAX:
        return "Moderate"
    else:
        return "High"


def summarize_debts(debts: Sequence[Debt], monthly_income: float) -> DebtSummary:
    """
    Aggregate debt figures.

    Monthly interest is the sum of each debt's simple monthly accrual
    (rate / 100 / 12 * balance), not compounded.
    """
    total_amount = sum(to_number(d.amount) for d in debts)
    monthly_interest = sum(to_number(d.interest_rate) / 100 / 12 * to_number(d.amount) for d in debts)
    monthly_payments = sum(to_number(d.min_payment) for d in debts)

    income = to_number(monthly_income)
    ratio = monthly_payments / income * 100 if income > 0 else 0.0

    return DebtSummary(
        total_amount=total_amount,
        monthly_interest=monthly_interest,
        yearly_interest=monthly_interest * 12,
        monthly_payments=monthly_payments,
        debt_to_income_ratio=ratio,
        debt_to_income_band=classify_debt_to_income(ratio),
    )


def average_monthly_expenses(transactions: Sequence[Transaction], as_of: date, months: int = 3) -> float:
    """Mean monthly expenses over the `months` complete months before as_of's month"""
    if months <= 0:
        return 0.0

    window_end = month_start(as_of)
    window_start = window_end - relativedelta(months=months)
    total = sum(
        abs(to_number(t.total))
        for t in transactions
        if t.type == TransactionType.EXPENSE and window_start <= t.date < window_end
    )
    return total / months


def suggest_emergency_goal(avg_monthly_expenses: float, target_months: int) -> float:
    """Goal amount covering target_months of average expenses, rounded to whole units"""
    return round_half_up(max(to_number(avg_monthly_expenses), 0.0) * max(target_months, 0))


def calculate_emergency_fund_coverage(
    fund: Optional[EmergencyFund], monthly_expenses: float
) -> Optional[EmergencyFundCoverage]:
    """
    Progress toward the emergency fund goal.

    Returns None when no fund is set up so callers can render that state
    instead of a row of zeros.
    """
    if fund is None:
        return None

    current = to_number(fund.current_amount)
    goal = to_number(fund.goal_amount)
    expenses = to_number(monthly_expenses)

    progress = int(min(round_half_up(current / goal * 100), 100)) if goal > 0 else 0
    months_covered = round_half_up(current / expenses, 1) if expenses > 0 else 0.0

    return EmergencyFundCoverage(
        current_amount=current,
        goal_amount=goal,
        target_months=fund.target_months,
        progress_percentage=progress,
        months_covered=months_covered,
        remaining_to_goal=max(goal - current, 0.0),
        monthly_expenses=expenses,
    )


def calculate_account_balances(
    accounts: Sequence[Account], transactions: Sequence[Transaction]
) -> List[AccountBalance]:
    """Running balance per account: opening value plus every signed transaction booked to it"""
    movement: Dict[str, float] = {}
    for txn in transactions:
        movement[txn.account_id] = movement.get(txn.account_id, 0.0) + signed_amount(txn.type, to_number(txn.total))

    balances = []
    for account in accounts:
        initial = to_number(account.value)
        transaction_total = movement.get(account.id, 0.0)
        balances.append(
            AccountBalance(
                account=account,
                initial_value=initial,
                transaction_total=transaction_total,
                current_value=initial + transaction_total,
            )
        )
    return balances


def calculate_current_net_worth(
    accounts: Sequence[Account], transactions: Sequence[Transaction], total_debt_amount: float = 0.0
) -> NetWorth:
    """Net worth from running balances, so every recorded transaction moves it"""
    balances = calculate_account_balances(accounts, transactions)
    current = [replace(b.account, value=b.current_value) for b in balances]
    return calculate_net_worth(current, total_debt_amount)


def build_dashboard(
    snapshot: FinancialSnapshot,
    as_of: date,
    trend_months: int = 6,
    payoff_max_months: int = DEFAULT_MAX_MONTHS,
    emergency_lookback_months: int = 3,
    recent_limit: int = 5,
) -> DashboardSummary:
    """
    Main entry point: every figure the dashboard shows, from one snapshot.

    Pure and deterministic for a given snapshot and as_of date.
    """
    year, month = as_of.year, as_of.month

    current_month = summarize_month(snapshot.transactions, year, month)
    debt_summary = summarize_debts(snapshot.debts, current_month.income)
    budget_progress = calculate_budget_progress(snapshot.budgets, snapshot.transactions, year, month)

    monthly_expenses = average_monthly_expenses(snapshot.transactions, as_of, emergency_lookback_months)

    recent = sorted(snapshot.transactions, key=lambda t: t.date, reverse=True)[:recent_limit]

    return DashboardSummary(
        as_of=as_of,
        net_worth=calculate_current_net_worth(snapshot.accounts, snapshot.transactions, debt_summary.total_amount),
        current_month=current_month,
        monthly_trend=build_monthly_trend(snapshot.transactions, as_of, trend_months),
        expense_categories=expense_breakdown(snapshot.transactions, year, month),
        budget_progress=budget_progress,
        budget_totals=summarize_budgets(budget_progress),
        debt_summary=debt_summary,
        debt_projections=[project_debt(d, as_of, payoff_max_months) for d in snapshot.debts],
        aggregate_payoff=estimate_aggregate_payoff(snapshot.debts, as_of),
        emergency_fund=calculate_emergency_fund_coverage(snapshot.emergency_fund, monthly_expenses),
        recent_transactions=recent,
    )

"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class DebtStrategy(str, Enum):
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"
    INVESTMENT = "investment"
    CASH = "cash"
    OTHER = "other"


class PayoffStatus(str, Enum):
    PAID_OFF = "paid_off"
    UNPAYABLE = "unpayable"  # payment never outruns interest
    EXCEEDS_HORIZON = "exceeds_horizon"  # still owing after max_months


@dataclass(frozen=True)
class Account:
    """User account; positive value is an asset, negative a liability"""

    id: str
    name: str
    type: AccountType
    value: float
    currency: str = "USD"
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Income or expense booked against one account.

    `total` is always a non-negative magnitude; the direction comes from `type`.
    """

    id: str
    date: date
    account_id: str
    type: TransactionType
    category: str
    total: float
    description: str = ""
    notes: Optional[str] = None


@dataclass(frozen=True)
class Budget:
    """Monthly spending cap for a category"""

    id: str
    category: str
    budget_amount: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class Debt:
    id: str
    name: str
    amount: float
    interest_rate: float  # annual percent
    min_payment: float
    strategy: DebtStrategy = DebtStrategy.AVALANCHE
    due_date: Optional[date] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class EmergencyFund:
    current_amount: float
    goal_amount: float
    target_months: int
    notes: Optional[str] = None


@dataclass(frozen=True)
class FinancialSnapshot:
    """Read-only view of everything a user owns, assembled after all fetches resolve"""

    accounts: Tuple[Account, ...] = ()
    transactions: Tuple[Transaction, ...] = ()
    budgets: Tuple[Budget, ...] = ()
    debts: Tuple[Debt, ...] = ()
    emergency_fund: Optional[EmergencyFund] = None


@dataclass
class NetWorth:
    total_assets: float
    liabilities_from_accounts: float
    total_debt: float
    total_liabilities: float
    net_worth: float


@dataclass
class MonthlySummary:
    """Income and expense totals for one calendar month"""

    year: int
    month: int
    income: float
    expenses: float
    net_savings: float
    savings_rate: float  # percent, clamped at 0


@dataclass
class MonthlyTrendPoint:
    year: int
    month: int
    label: str
    income: float
    expenses: float
    savings: float


@dataclass
class CategoryExpense:
    category: str
    amount: float


@dataclass
class BudgetProgress:
    budget: Budget
    spent_amount: float
    percentage: int


@dataclass
class BudgetTotals:
    total_budget: float
    total_spent: float


@dataclass
class DebtSummary:
    """Aggregate debt load and its weight against monthly income"""

    total_amount: float
    monthly_interest: float
    yearly_interest: float
    monthly_payments: float
    debt_to_income_ratio: float
    debt_to_income_band: str


@dataclass
class PayoffProjection:
    status: PayoffStatus
    months: int
    payoff_date: Optional[date]
    total_interest: float


@dataclass
class DebtProjection:
    debt: Debt
    projection: PayoffProjection


@dataclass
class AggregatePayoffEstimate:
    months: float
    payoff_date: date
    used_fallback: bool


@dataclass
class EmergencyFundCoverage:
    current_amount: float
    goal_amount: float
    target_months: int
    progress_percentage: int
    months_covered: float
    remaining_to_goal: float
    monthly_expenses: float


@dataclass
class AccountBalance:
    account: Account
    initial_value: float
    transaction_total: float
    current_value: float


@dataclass
class DashboardSummary:
    """Everything the dashboard renders, derived from a single snapshot"""

    as_of: date
    net_worth: NetWorth
    current_month: MonthlySummary
    monthly_trend: List[MonthlyTrendPoint]
    expense_categories: List[CategoryExpense]
    budget_progress: List[BudgetProgress]
    budget_totals: BudgetTotals
    debt_summary: DebtSummary
    debt_projections: List[DebtProjection]
    aggregate_payoff: Optional[AggregatePayoffEstimate]
    emergency_fund: Optional[EmergencyFundCoverage]
    recent_transactions: List[Transaction] = field(default_factory=list)

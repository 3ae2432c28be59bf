"""Pydantic schemas for API request/response validation"""

import datetime as dt
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finance_tracker.domain.models import AccountType, DebtStrategy, PayoffStatus, TransactionType


def reject_null(value):
    """Partial updates may omit a required column but never null it"""
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


# Accounts

class AccountCreate(BaseModel):
    """Request body for POST /v1/accounts"""

    name: str = Field(..., min_length=1)
    type: str = Field("other", description="checking | savings | credit | investment | cash | other")
    value: float = Field(0.0, description="Positive for assets, negative for liabilities")
    currency: str = Field("USD", min_length=3, max_length=3)
    notes: Optional[str] = None


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = None
    value: Optional[float] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    notes: Optional[str] = None

    @field_validator("name", "type", "value", "currency")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class AccountResponse(BaseModel):
    id: str
    name: str
    type: AccountType
    value: float
    currency: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class AccountBalanceSchema(BaseModel):
    account: AccountResponse
    initial_value: float
    transaction_total: float
    current_value: float


class NetWorthSchema(BaseModel):
    total_assets: float
    liabilities_from_accounts: float
    total_debt: float
    total_liabilities: float
    net_worth: float


class AccountListResponse(BaseModel):
    """Response for GET /v1/accounts"""

    accounts: List[AccountBalanceSchema]
    net_worth: NetWorthSchema


# Transactions

class TransactionCreate(BaseModel):
    """Request body for POST /v1/transactions. `total` may be signed; only its magnitude is stored."""

    date: date
    account_id: str = Field(..., min_length=1)
    type: str = Field(..., description="income | expense (any case)")
    category: str = ""
    description: str = ""
    total: float
    notes: Optional[str] = None


class TransactionUpdate(BaseModel):
    # dt.date: a bare `date` annotation would resolve to this field's own default
    date: Optional[dt.date] = None
    account_id: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    total: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("date", "account_id", "type", "category", "description", "total")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    date: date
    month: str
    account_id: str
    type: TransactionType
    category: str
    description: str
    total: float
    signed_total: float
    notes: Optional[str] = None


# Budgets

class BudgetCreate(BaseModel):
    """Request body for POST /v1/budgets"""

    category: str = Field(..., min_length=1)
    budget_amount: float = Field(..., ge=0, description="Monthly cap")
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class BudgetUpdate(BaseModel):
    category: Optional[str] = Field(None, min_length=1)
    budget_amount: Optional[float] = Field(None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator("category", "budget_amount")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class BudgetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category: str
    budget_amount: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class BudgetProgressSchema(BudgetResponse):
    spent_amount: float
    percentage: int


class BudgetListResponse(BaseModel):
    """Response for GET /v1/budgets"""

    month: str
    budgets: List[BudgetProgressSchema]
    total_budget: float
    total_spent: float


# Debts

class DebtCreate(BaseModel):
    """Request body for POST /v1/debts"""

    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    interest_rate: float = Field(0.0, ge=0, description="Annual percent")
    min_payment: float = Field(0.0, ge=0)
    due_date: Optional[date] = None
    strategy: str = "avalanche"
    notes: Optional[str] = None


class DebtUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, ge=0)
    interest_rate: Optional[float] = Field(None, ge=0)
    min_payment: Optional[float] = Field(None, ge=0)
    due_date: Optional[date] = None
    strategy: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name", "amount", "interest_rate", "min_payment", "strategy")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class DebtResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    amount: float
    interest_rate: float
    min_payment: float
    due_date: Optional[date] = None
    strategy: DebtStrategy
    notes: Optional[str] = None


class PayoffSchema(BaseModel):
    status: PayoffStatus
    months: int
    payoff_date: Optional[date] = None
    total_interest: float


class DebtDetailResponse(BaseModel):
    """Response for GET /v1/debts/{debt_id}"""

    debt: DebtResponse
    payoff: PayoffSchema


class DebtSummarySchema(BaseModel):
    total_amount: float
    monthly_interest: float
    yearly_interest: float
    monthly_payments: float
    debt_to_income_ratio: float
    debt_to_income_band: str


class AggregatePayoffSchema(BaseModel):
    months: float
    payoff_date: date
    used_fallback: bool


class DebtListResponse(BaseModel):
    """Response for GET /v1/debts"""

    strategy: DebtStrategy
    debts: List[DebtResponse]
    summary: DebtSummarySchema
    estimated_payoff: Optional[AggregatePayoffSchema] = None


# Emergency fund

class EmergencyFundUpsert(BaseModel):
    """Request body for PUT /v1/emergency-fund. Omit goal_amount to use the suggested goal."""

    current_amount: float = Field(0.0, ge=0)
    goal_amount: Optional[float] = Field(None, ge=0)
    target_months: int = Field(3, ge=1)
    notes: Optional[str] = None


class EmergencyFundCoverageSchema(BaseModel):
    current_amount: float
    goal_amount: float
    target_months: int
    progress_percentage: int
    months_covered: float
    remaining_to_goal: float
    monthly_expenses: float


class EmergencyFundResponse(BaseModel):
    """Response for GET/PUT /v1/emergency-fund; coverage is null until a fund is set up"""

    configured: bool
    coverage: Optional[EmergencyFundCoverageSchema] = None
    notes: Optional[str] = None
    average_monthly_expenses: float
    suggested_goal: float


# Dashboard

class MonthlySummarySchema(BaseModel):
    year: int
    month: int
    income: float
    expenses: float
    net_savings: float
    savings_rate: float


class MonthlyTrendPointSchema(BaseModel):
    year: int
    month: int
    label: str
    income: float
    expenses: float
    savings: float


class CategoryExpenseSchema(BaseModel):
    category: str
    amount: float


class DebtProjectionSchema(BaseModel):
    debt_id: str
    name: str
    payoff: PayoffSchema


class RecentTransactionSchema(BaseModel):
    id: str
    date: date
    account_id: str
    type: TransactionType
    category: str
    description: str
    total: float


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    as_of: date
    net_worth: NetWorthSchema
    current_month: MonthlySummarySchema
    monthly_trend: List[MonthlyTrendPointSchema]
    expense_categories: List[CategoryExpenseSchema]
    budget_progress: List[BudgetProgressSchema]
    total_budget: float
    total_spent: float
    debt_summary: DebtSummarySchema
    debt_projections: List[DebtProjectionSchema]
    estimated_payoff: Optional[AggregatePayoffSchema] = None
    emergency_fund: Optional[EmergencyFundCoverageSchema] = None
    recent_transactions: List[RecentTransactionSchema]

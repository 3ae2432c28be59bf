"""SQLAlchemy ORM models for user-owned finance records"""

import uuid
from sqlalchemy import Column, String, Float, DateTime, Date, Integer, ForeignKey, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class AccountRecord(Base):
    """Bank, card, investment or cash account"""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="other")
    value = Column(Float, nullable=False, default=0.0)
    currency = Column(String(3), nullable=False, default="USD")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    transactions = relationship("TransactionRecord", back_populates="account", cascade="all, delete-orphan")


class TransactionRecord(Base):
    """Income or expense; total is stored as a non-negative magnitude"""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False, index=True)
    month = Column(String(7), nullable=False, index=True)  # YYYY-MM
    type = Column(String(10), nullable=False)
    category = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    total = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    account = relationship("AccountRecord", back_populates="transactions")


class BudgetRecord(Base):
    """Monthly spending cap for a category"""

    __tablename__ = "budgets"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    category = Column(Text, nullable=False)
    budget_amount = Column(Float, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DebtRecord(Base):
    """Outstanding loan or card balance"""

    __tablename__ = "debts"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False, default=0.0)
    min_payment = Column(Float, nullable=False, default=0.0)
    due_date = Column(Date, nullable=True)
    strategy = Column(String(10), nullable=False, default="avalanche")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class EmergencyFundRecord(Base):
    """Emergency savings goal; one row per user"""

    __tablename__ = "emergency_fund"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, unique=True)
    current_amount = Column(Float, nullable=False, default=0.0)
    goal_amount = Column(Float, nullable=False, default=0.0)
    target_months = Column(Integer, nullable=False, default=3)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

"""Data access layer for user-owned finance records"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from finance_tracker.domain.exceptions import InvalidRecordError, RecordNotFoundError, StorageError
from finance_tracker.domain.models import (
    Account,
    Budget,
    Debt,
    EmergencyFund,
    FinancialSnapshot,
    Transaction,
    TransactionType,
)
from finance_tracker.domain.normalize import (
    normalize_account_type,
    normalize_category,
    normalize_magnitude,
    normalize_strategy,
    normalize_transaction_type,
    to_number,
)
from finance_tracker.infrastructure.database.models import (
    AccountRecord,
    BudgetRecord,
    DebtRecord,
    EmergencyFundRecord,
    TransactionRecord,
)
from finance_tracker.infrastructure.observability.metrics import invalid_records_counter
from finance_tracker.utils.date_utils import month_key

T = TypeVar("T")


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Surface constraint violations as InvalidRecordError and other driver/ORM failures as StorageError"""
    try:
        yield
    except IntegrityError as e:
        raise InvalidRecordError(f"Failed to {action}: {e.orig}") from e
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to {action}: {e}") from e


# Record -> domain conversion. Legacy rows may carry "Income" or signed totals,
# so every read goes through the same normalisation as writes.

def to_account(record: AccountRecord) -> Account:
    return Account(
        id=record.id,
        name=record.name,
        type=normalize_account_type(record.type),
        value=to_number(record.value),
        currency=record.currency,
        notes=record.notes,
        created_at=record.created_at,
    )


def to_transaction(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=record.id,
        date=record.date,
        account_id=record.account_id,
        type=normalize_transaction_type(record.type),
        category=normalize_category(record.category),
        total=normalize_magnitude(record.total),
        description=record.description or "",
        notes=record.notes,
    )


def to_budget(record: BudgetRecord) -> Budget:
    return Budget(
        id=record.id,
        category=normalize_category(record.category),
        budget_amount=to_number(record.budget_amount),
        start_date=record.start_date,
        end_date=record.end_date,
    )


def to_debt(record: DebtRecord) -> Debt:
    return Debt(
        id=record.id,
        name=record.name,
        amount=to_number(record.amount),
        interest_rate=to_number(record.interest_rate),
        min_payment=to_number(record.min_payment),
        strategy=normalize_strategy(record.strategy),
        due_date=record.due_date,
        notes=record.notes,
    )


def to_emergency_fund(record: EmergencyFundRecord) -> EmergencyFund:
    return EmergencyFund(
        current_amount=to_number(record.current_amount),
        goal_amount=to_number(record.goal_amount),
        target_months=record.target_months,
        notes=record.notes,
    )


def convert_all(records: Iterable[Any], converter: Callable[[Any], T]) -> List[T]:
    """Convert stored rows, skipping any that fail normalisation so one bad row cannot sink a whole read"""
    converted = []
    for record in records:
        try:
            converted.append(converter(record))
        except InvalidRecordError as e:
            invalid_records_counter.labels(table=record.__tablename__).inc()
            logging.warning(f"Skipping stored {record.__tablename__} row {record.id}: {e}")
    return converted


class OwnedRepository:
    """CRUD scoped to one user's rows. Subclasses set `model` and may normalise fields."""

    model: Any = None
    name = "record"

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def _query(self):
        return self.db.query(self.model).filter(self.model.user_id == self.user_id)

    def normalize(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return fields

    def list(self) -> List[Any]:
        with storage_errors(f"list {self.name}s"):
            return self._query().order_by(self.model.created_at.desc()).all()

    def get(self, record_id: str) -> Any:
        with storage_errors(f"fetch {self.name}"):
            record = self._query().filter(self.model.id == record_id).first()
        if record is None:
            raise RecordNotFoundError(f"{self.name} {record_id} not found")
        return record

    def create(self, **fields: Any) -> Any:
        record = self.model(user_id=self.user_id, **self.normalize(fields))
        with storage_errors(f"create {self.name}"):
            self.db.add(record)
            self.db.flush()  # Get ID without committing
        return record

    def update(self, record_id: str, **fields: Any) -> Any:
        record = self.get(record_id)
        for key, value in self.normalize(fields).items():
            setattr(record, key, value)
        with storage_errors(f"update {self.name}"):
            self.db.flush()
        return record

    def delete(self, record_id: str) -> None:
        record = self.get(record_id)
        with storage_errors(f"delete {self.name}"):
            self.db.delete(record)
            self.db.flush()


class AccountRepository(OwnedRepository):
    model = AccountRecord
    name = "account"

    def normalize(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        if "type" in fields:
            fields["type"] = normalize_account_type(fields["type"]).value
        if "currency" in fields and fields["currency"]:
            fields["currency"] = fields["currency"].upper()
        return fields


class TransactionRepository(OwnedRepository):
    model = TransactionRecord
    name = "transaction"

    def normalize(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        if "type" in fields:
            fields["type"] = normalize_transaction_type(fields["type"]).value
        if "category" in fields:
            fields["category"] = normalize_category(fields["category"])
        if "total" in fields:
            fields["total"] = normalize_magnitude(fields["total"])
        if fields.get("date") is not None:
            fields["month"] = month_key(fields["date"])
        if fields.get("account_id") is not None:
            # Transactions may only be booked against the caller's own accounts
            AccountRepository(self.db, self.user_id).get(fields["account_id"])
        return fields

    def list_filtered(
        self,
        txn_type: Optional[TransactionType] = None,
        month: Optional[str] = None,
        since: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[TransactionRecord]:
        query = self._query()
        if txn_type is not None:
            # Older rows may carry "Income"/"EXPENSE"
            query = query.filter(func.lower(func.trim(TransactionRecord.type)) == txn_type.value)
        if month is not None:
            query = query.filter(TransactionRecord.month == month)
        if since is not None:
            query = query.filter(TransactionRecord.date >= since)
        query = query.order_by(TransactionRecord.date.desc(), TransactionRecord.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        with storage_errors("list transactions"):
            return query.all()


class BudgetRepository(OwnedRepository):
    model = BudgetRecord
    name = "budget"

    def normalize(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        if "category" in fields:
            fields["category"] = normalize_category(fields["category"])
        return fields


class DebtRepository(OwnedRepository):
    model = DebtRecord
    name = "debt"

    def normalize(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        if "strategy" in fields:
            fields["strategy"] = normalize_strategy(fields["strategy"]).value
        return fields


class EmergencyFundRepository:
    """Single emergency fund per user with upsert semantics"""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def get(self) -> Optional[EmergencyFundRecord]:
        with storage_errors("fetch emergency fund"):
            return (
                self.db.query(EmergencyFundRecord)
                .filter(EmergencyFundRecord.user_id == self.user_id)
                .first()
            )

    def upsert(self, **fields: Any) -> EmergencyFundRecord:
        record = self.get()
        if record is None:
            record = EmergencyFundRecord(user_id=self.user_id)
            self.db.add(record)
        for key, value in fields.items():
            setattr(record, key, value)
        with storage_errors("save emergency fund"):
            self.db.flush()
        return record

    def delete(self) -> None:
        record = self.get()
        if record is None:
            raise RecordNotFoundError("emergency fund not set up")
        with storage_errors("delete emergency fund"):
            self.db.delete(record)
            self.db.flush()


class SnapshotRepository:
    """Assembles the read-only snapshot the metrics calculator works from"""

    def __init__(self, db: Session):
        self.db = db

    def load_snapshot(self, user_id: str) -> FinancialSnapshot:
        """
        Fetch every record the user owns and convert to domain objects.

        Raises:
            StorageError: if any fetch fails; no partial snapshot is returned.
            Rows that fail normalisation are skipped and logged instead.
        """
        accounts = AccountRepository(self.db, user_id).list()
        transactions = TransactionRepository(self.db, user_id).list_filtered()
        budgets = BudgetRepository(self.db, user_id).list()
        debts = DebtRepository(self.db, user_id).list()
        fund = EmergencyFundRepository(self.db, user_id).get()

        return FinancialSnapshot(
            accounts=tuple(convert_all(accounts, to_account)),
            transactions=tuple(convert_all(transactions, to_transaction)),
            budgets=tuple(convert_all(budgets, to_budget)),
            debts=tuple(convert_all(debts, to_debt)),
            emergency_fund=to_emergency_fund(fund) if fund is not None else None,
        )


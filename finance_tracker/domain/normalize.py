"""Storage-boundary adapter: canonical enums, categories and amounts"""

import math
from typing import Any

from finance_tracker.domain.exceptions import InvalidRecordError
from finance_tracker.domain.models import AccountType, DebtStrategy, TransactionType

UNCATEGORIZED = "Uncategorized"


def _clean(raw: Any) -> str:
    return str(raw or "").strip().lower()


def normalize_transaction_type(raw: Any) -> TransactionType:
    """Map "Income"/"income"/" INCOME " to TransactionType.INCOME, same for expense"""
    value = raw.value if isinstance(raw, TransactionType) else _clean(raw)
    try:
        return TransactionType(value)
    except ValueError as e:
        raise InvalidRecordError(f"Unknown transaction type: {raw!r}") from e


def normalize_strategy(raw: Any) -> DebtStrategy:
    value = raw.value if isinstance(raw, DebtStrategy) else _clean(raw)
    try:
        return DebtStrategy(value)
    except ValueError as e:
        raise InvalidRecordError(f"Unknown debt strategy: {raw!r}") from e


def normalize_account_type(raw: Any) -> AccountType:
    """Unknown account types fall back to OTHER rather than rejecting the account"""
    value = raw.value if isinstance(raw, AccountType) else _clean(raw)
    try:
        return AccountType(value)
    except ValueError:
        return AccountType.OTHER


def normalize_category(raw: Any) -> str:
    """Trim and collapse whitespace; blank categories become "Uncategorized" """
    category = " ".join(str(raw or "").split())
    return category or UNCATEGORIZED


def category_key(category: Any) -> str:
    """Case-folded key used whenever budgets and transactions are matched"""
    return normalize_category(category).casefold()


def to_number(raw: Any) -> float:
    """Coerce upstream values to a finite float; None, NaN and junk become 0.0"""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def normalize_magnitude(raw: Any) -> float:
    """Strip any stored sign; transaction totals are kept as magnitudes"""
    return abs(to_number(raw))


def signed_amount(txn_type: TransactionType, magnitude: float) -> float:
    """Balance effect of a transaction: inflow positive, outflow negative"""
    magnitude = abs(magnitude)
    return magnitude if txn_type == TransactionType.INCOME else -magnitude

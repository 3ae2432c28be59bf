"""Unit tests for record normalisation"""

import pytest
from finance_tracker.domain.exceptions import InvalidRecordError
from finance_tracker.domain.models import AccountType, DebtStrategy, TransactionType
from finance_tracker.domain.normalize import (
    UNCATEGORIZED,
    category_key,
    normalize_account_type,
    normalize_category,
    normalize_magnitude,
    normalize_strategy,
    normalize_transaction_type,
    signed_amount,
    to_number,
)


@pytest.mark.parametrize("raw", ["Income", "income", " INCOME ", TransactionType.INCOME])
def test_transaction_type_is_case_insensitive(raw):
    assert normalize_transaction_type(raw) == TransactionType.INCOME


def test_unknown_transaction_type_rejected():
    with pytest.raises(InvalidRecordError):
        normalize_transaction_type("transfer")

    with pytest.raises(InvalidRecordError):
        normalize_transaction_type(None)


def test_strategy_normalisation():
    assert normalize_strategy("Snowball") == DebtStrategy.SNOWBALL
    assert normalize_strategy("AVALANCHE") == DebtStrategy.AVALANCHE

    with pytest.raises(InvalidRecordError):
        normalize_strategy("fastest")


def test_unknown_account_type_falls_back_to_other():
    assert normalize_account_type("Savings") == AccountType.SAVINGS
    assert normalize_account_type("crypto") == AccountType.OTHER
    assert normalize_account_type(None) == AccountType.OTHER


def test_category_cleanup():
    assert normalize_category("  Eating   Out ") == "Eating Out"
    assert normalize_category("") == UNCATEGORIZED
    assert normalize_category(None) == UNCATEGORIZED
    assert category_key("Groceries") == category_key(" GROCERIES")


@pytest.mark.parametrize(
    "raw,expected",
    [
        (12.5, 12.5),
        ("42", 42.0),
        (None, 0.0),
        ("abc", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
    ],
)
def test_to_number(raw, expected):
    assert to_number(raw) == expected


def test_magnitude_and_signed_amount():
    assert normalize_magnitude(-75) == 75
    assert signed_amount(TransactionType.INCOME, 100) == 100
    assert signed_amount(TransactionType.EXPENSE, 100) == -100
    assert signed_amount(TransactionType.EXPENSE, -100) == -100

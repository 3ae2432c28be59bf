"""Unit tests for debt payoff projections"""

import pytest
from datetime import date
from finance_tracker.domain.models import Debt, DebtStrategy, PayoffStatus
from finance_tracker.domain.payoff import (
    DEFAULT_MAX_MONTHS,
    estimate_aggregate_payoff,
    order_debts,
    project_debt,
    simulate_payoff,
)
from finance_tracker.utils.date_utils import add_months

START = date(2024, 5, 15)


def test_simulate_payoff_credit_card():
    """$5000 at 18.99% paying $150/month clears in four years"""
    result = simulate_payoff(5000, 18.99, 150, START)

    assert result.status == PayoffStatus.PAID_OFF
    assert result.months == 48
    assert result.total_interest > 0
    assert result.payoff_date == add_months(START, 48)


def test_simulate_payoff_payment_below_interest_is_unpayable():
    result = simulate_payoff(5000, 18.99, 50, START)

    assert result.status == PayoffStatus.UNPAYABLE
    assert result.payoff_date is None


def test_simulate_payoff_payment_equal_to_interest_is_unpayable():
    # 1200 at 12% accrues exactly 12/month
    result = simulate_payoff(1200, 12, 12, START)

    assert result.status == PayoffStatus.UNPAYABLE


def test_simulate_payoff_marginal_payment_terminates():
    """A payment barely above interest still finishes inside the month cap"""
    result = simulate_payoff(5000, 18.99, 79.13, START)

    assert result.status == PayoffStatus.PAID_OFF
    assert 600 < result.months <= DEFAULT_MAX_MONTHS


def test_simulate_payoff_exceeds_horizon():
    result = simulate_payoff(5000, 18.99, 79.13, START, max_months=360)

    assert result.status == PayoffStatus.EXCEEDS_HORIZON
    assert result.months == 360
    assert result.payoff_date is None


def test_simulate_payoff_zero_rate():
    result = simulate_payoff(1000, 0, 100, START)

    assert result.status == PayoffStatus.PAID_OFF
    assert result.months == 10
    assert result.total_interest == 0


def test_simulate_payoff_final_payment_is_capped():
    result = simulate_payoff(1000, 0, 300, START)

    assert result.months == 4
    assert result.payoff_date == date(2024, 9, 15)


def test_simulate_payoff_zero_balance():
    result = simulate_payoff(0, 18.99, 150, START)

    assert result.status == PayoffStatus.PAID_OFF
    assert result.months == 0
    assert result.payoff_date == START


def test_simulate_payoff_junk_inputs():
    """NaN balance is treated as nothing owed; missing payment cannot cover interest"""
    assert simulate_payoff(float("nan"), 10, 100, START).months == 0
    assert simulate_payoff(1000, 10, None, START).status == PayoffStatus.UNPAYABLE


def test_project_debt_uses_minimum_payment():
    debt = Debt(id="d1", name="Visa", amount=5000, interest_rate=18.99, min_payment=150)

    projection = project_debt(debt, START)

    assert projection.debt is debt
    assert projection.projection.months == 48


def test_aggregate_payoff_none_without_debts():
    assert estimate_aggregate_payoff([], START) is None


def test_aggregate_payoff_none_without_payments():
    debts = [Debt(id="d1", name="Visa", amount=5000, interest_rate=18.99, min_payment=0)]

    assert estimate_aggregate_payoff(debts, START) is None


def test_aggregate_payoff_formula():
    debts = [Debt(id="d1", name="Visa", amount=5000, interest_rate=18.99, min_payment=150)]

    estimate = estimate_aggregate_payoff(debts, START)

    assert estimate.used_fallback is False
    assert estimate.months == pytest.approx(47.75, abs=0.1)
    assert estimate.payoff_date == add_months(START, 48)


def test_aggregate_payoff_zero_rate_falls_back():
    debts = [Debt(id="d1", name="Family loan", amount=1000, interest_rate=0, min_payment=100)]

    estimate = estimate_aggregate_payoff(debts, START)

    assert estimate.used_fallback is True
    assert estimate.months == 10
    assert estimate.payoff_date == add_months(START, 10)


def test_aggregate_payoff_payment_below_interest_falls_back():
    debts = [Debt(id="d1", name="Visa", amount=5000, interest_rate=18.99, min_payment=50)]

    estimate = estimate_aggregate_payoff(debts, START)

    assert estimate.used_fallback is True
    assert estimate.months == 100


def test_order_debts_strategies():
    debts = [
        Debt(id="d1", name="Car loan", amount=8000, interest_rate=5, min_payment=300),
        Debt(id="d2", name="Visa", amount=5000, interest_rate=18.99, min_payment=150),
        Debt(id="d3", name="Store card", amount=600, interest_rate=24.9, min_payment=25),
        Debt(id="d4", name="Medical", amount=1200, interest_rate=0, min_payment=100),
    ]

    avalanche = order_debts(debts, DebtStrategy.AVALANCHE)
    snowball = order_debts(debts, DebtStrategy.SNOWBALL)

    assert [d.id for d in avalanche] == ["d3", "d2", "d1", "d4"]
    assert [d.id for d in snowball] == ["d3", "d4", "d2", "d1"]

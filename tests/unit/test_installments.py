"""Unit tests for installment schedule generation"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from lendtrack.domain.installments import (
    calculate_installments,
    calculate_total_amount,
    calculate_total_repayment,
)
from lendtrack.domain.models import Frequency, InterestType, PlanConfig
from lendtrack.utils.money import round2


def plan(
    amount="1200",
    frequency=Frequency.MONTHLY,
    duration=12,
    rate="0",
    interest_type=InterestType.SIMPLE,
    start=date(2024, 1, 1),
) -> PlanConfig:
    return PlanConfig(
        amount=Decimal(amount),
        frequency=frequency,
        duration=duration,
        interest_rate=Decimal(rate),
        interest_type=interest_type,
        start_date=start,
    )


def test_calculate_installments_equal_monthly_split():
    """1200 over 12 months at 0% -> twelve 100.00 payments from Feb 2024 to Jan 2025"""
    installments = calculate_installments(plan())

    assert len(installments) == 12
    assert [inst.number for inst in installments] == list(range(1, 13))
    assert all(inst.amount == Decimal("100.00") for inst in installments)
    assert sum(inst.amount for inst in installments) == Decimal("1200.00")
    assert installments[0].due_date == date(2024, 2, 1)
    assert installments[-1].due_date == date(2025, 1, 1)
    assert installments[0].balance == Decimal("1100.00")
    assert installments[-1].balance == Decimal("0.00")


def test_calculate_installments_last_absorbs_remainder():
    """1000.00 / 3 -> 333.33, 333.33, 333.34"""
    installments = calculate_installments(plan(amount="1000", duration=3))

    assert [inst.amount for inst in installments] == [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")]
    assert sum(inst.amount for inst in installments) == Decimal("1000.00")


def test_calculate_installments_rounds_half_up():
    """100.01 / 2 = 50.005 rounds up to 50.01; the last installment gives the cent back"""
    installments = calculate_installments(plan(amount="100.01", duration=2))

    assert installments[0].amount == Decimal("50.01")
    assert installments[1].amount == Decimal("50.00")
    assert sum(inst.amount for inst in installments) == Decimal("100.01")


def test_calculate_installments_tiny_amount_keeps_total():
    """0.05 over 10 rounds each slot up to 0.01, so the last one goes negative to keep the sum"""
    installments = calculate_installments(plan(amount="0.05", duration=10))

    assert [inst.amount for inst in installments[:-1]] == [Decimal("0.01")] * 9
    assert installments[-1].amount == Decimal("-0.04")
    assert sum(inst.amount for inst in installments) == Decimal("0.05")


@pytest.mark.parametrize(
    "amount, duration",
    [("1200", 0), ("0", 12), ("-50", 12), ("1200", -1)],
)
def test_calculate_installments_degenerate_input(amount, duration):
    assert calculate_installments(plan(amount=amount, duration=duration)) == []


def test_calculate_installments_single_installment():
    """One installment carries the whole simple-interest total: 1200 + 1200*12%*(1/12)"""
    installments = calculate_installments(plan(duration=1, rate="12"))

    assert len(installments) == 1
    assert installments[0].amount == Decimal("1212.00")
    assert installments[0].balance == Decimal("0.00")


def test_calculate_installments_simple_interest():
    """1200 at 12% simple over 12 months -> 144 interest, 112.00 per month"""
    installments = calculate_installments(plan(rate="12"))

    assert all(inst.amount == Decimal("112.00") for inst in installments)
    assert calculate_total_repayment(plan(rate="12")) == Decimal("1344.00")


def test_calculate_installments_compound_interest():
    """1000 at 12% compounded monthly for 2 periods -> 1000 * 1.01^2 = 1020.10"""
    config = plan(amount="1000", duration=2, rate="12", interest_type=InterestType.COMPOUND)
    installments = calculate_installments(config)

    assert [inst.amount for inst in installments] == [Decimal("510.05"), Decimal("510.05")]
    assert calculate_total_amount(config) == Decimal("1020.1")


@pytest.mark.parametrize("interest_type", [InterestType.SIMPLE, InterestType.COMPOUND])
def test_calculate_installments_zero_rate_is_principal_only(interest_type):
    config = plan(amount="999.99", duration=7, interest_type=interest_type)
    installments = calculate_installments(config)

    assert calculate_total_amount(config) == Decimal("999.99")
    assert sum(inst.amount for inst in installments) == Decimal("999.99")


@pytest.mark.parametrize(
    "config",
    [
        plan(amount="1000", frequency=Frequency.WEEKLY, duration=10, rate="7.5", interest_type=InterestType.COMPOUND),
        plan(amount="2500.55", frequency=Frequency.BI_WEEKLY, duration=9, rate="18", interest_type=InterestType.SIMPLE),
        plan(amount="333", frequency=Frequency.MONTHLY, duration=7, rate="29.99", interest_type=InterestType.COMPOUND),
    ],
)
def test_calculate_installments_sum_matches_rounded_total(config):
    """No rounding drift: schedule sums to the rounded total, due dates strictly increase"""
    installments = calculate_installments(config)

    assert sum(inst.amount for inst in installments) == round2(calculate_total_amount(config))
    assert installments[0].due_date > config.start_date
    for current, following in zip(installments, installments[1:]):
        assert current.due_date < following.due_date
    assert installments[-1].balance == Decimal("0.00")


def test_calculate_installments_weekly_and_bi_weekly_dates():
    weekly = calculate_installments(plan(frequency=Frequency.WEEKLY, duration=3))
    bi_weekly = calculate_installments(plan(frequency=Frequency.BI_WEEKLY, duration=3))

    assert [inst.due_date for inst in weekly] == [date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]
    assert [inst.due_date for inst in bi_weekly] == [date(2024, 1, 15), date(2024, 1, 29), date(2024, 2, 12)]


def test_calculate_installments_month_end_clamping():
    """Jan 31 start -> Feb 29 (leap year), then Mar 31"""
    installments = calculate_installments(plan(duration=2, start=date(2024, 1, 31)))

    assert [inst.due_date for inst in installments] == [date(2024, 2, 29), date(2024, 3, 31)]


def test_calculate_installments_drops_time_of_day():
    installments = calculate_installments(plan(frequency=Frequency.WEEKLY, duration=1, start=datetime(2024, 1, 1, 15, 30)))

    assert installments[0].due_date == date(2024, 1, 8)


def test_calculate_installments_principal_interest_approximation():
    """Flat split: every installment carries amount/duration principal, the rest is interest"""
    installments = calculate_installments(plan(rate="12"))

    assert all(inst.principal == Decimal("100.00") for inst in installments)
    assert all(inst.interest == Decimal("12.00") for inst in installments)


def test_calculate_installments_is_idempotent():
    config = plan(amount="750.25", frequency=Frequency.BI_WEEKLY, duration=5, rate="9", interest_type=InterestType.COMPOUND)

    assert calculate_installments(config) == calculate_installments(config)


def test_calculate_installments_accepts_plain_numbers():
    config = PlanConfig(
        amount=1200,
        frequency="monthly",
        duration=12,
        interest_rate=0,
        interest_type="simple",
        start_date=date(2024, 1, 1),
    )

    assert calculate_total_repayment(config) == Decimal("1200.00")


def test_calculate_total_repayment_empty_plan():
    assert calculate_total_repayment(plan(duration=0)) == Decimal("0.00")

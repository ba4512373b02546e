"""Installment schedule generation for loan repayment plans"""

from decimal import Decimal
from typing import List
from lendtrack.domain.models import Frequency, Installment, InterestType, PlanConfig
from lendtrack.utils.date_utils import add_months, add_weeks, start_of_day
from lendtrack.utils.money import ZERO, round2, to_decimal

PERIODS_PER_YEAR = {
    Frequency.WEEKLY: 52,
    Frequency.BI_WEEKLY: 26,
    Frequency.MONTHLY: 12,
}


def calculate_total_amount(config: PlanConfig) -> Decimal:
    """
    Total repayment (principal + interest), unrounded.

    - simple:   P * r * (n / periods_per_year)
    - compound: P * (1 + r / periods_per_year) ^ n, one compounding per installment
    """
    amount = to_decimal(config.amount)
    annual_rate = to_decimal(config.interest_rate) / 100
    periods_per_year = PERIODS_PER_YEAR[Frequency(config.frequency)]

    if InterestType(config.interest_type) == InterestType.SIMPLE:
        total_interest = amount * annual_rate * (Decimal(config.duration) / periods_per_year)
        return amount + total_interest

    rate_per_period = annual_rate / periods_per_year
    return amount * (1 + rate_per_period) ** config.duration


def _due_date(config: PlanConfig, number: int):
    start = start_of_day(config.start_date)
    frequency = Frequency(config.frequency)
    if frequency == Frequency.WEEKLY:
        return add_weeks(start, number)
    if frequency == Frequency.BI_WEEKLY:
        return add_weeks(start, number * 2)
    return add_months(start, number)


def calculate_installments(config: PlanConfig) -> List[Installment]:
    """
    Build the repayment schedule for a plan.

    Requirements:
    - Equal installments of round2(total / duration)
    - Installment i is due i periods after the start date (never on it)
    - Last installment absorbs the rounding remainder so the schedule sums to round2(total)
    - Degenerate input (duration <= 0 or amount <= 0) yields an empty schedule

    The principal/interest split is a display approximation: every installment
    carries amount / duration of principal and the rest is labelled interest.
    It is not a declining-balance amortization table.

    Example:
        1000.00 at 0% over 3 months -> [333.33, 333.33, 333.34]
    """
    amount = to_decimal(config.amount)
    if config.duration <= 0 or amount <= 0:
        return []

    total_amount = calculate_total_amount(config)
    installment_amount = round2(total_amount / config.duration)
    principal_part = round2(amount / config.duration)

    installments = []
    scheduled = ZERO
    for number in range(1, config.duration + 1):
        if number == config.duration:
            current = round2(total_amount - scheduled)
        else:
            current = installment_amount

        scheduled += current

        installments.append(
            Installment(
                number=number,
                due_date=_due_date(config, number),
                amount=current,
                principal=principal_part,
                interest=current - principal_part,
                balance=max(ZERO, round2(total_amount - scheduled)),
            )
        )

    return installments


def calculate_total_repayment(config: PlanConfig) -> Decimal:
    """Sum of all scheduled installments (0.00 for an empty schedule)"""
    return sum((inst.amount for inst in calculate_installments(config)), ZERO)

"""Portfolio analytics - month-bucketed aggregation over a lender's loans"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional
from lendtrack.domain.models import (
    BorrowerExposure,
    CashFlowPoint,
    DefaultRateSummary,
    LoanRecord,
    LoanStatus,
    RepaymentRecord,
    StatusCount,
    TrendPoint,
)
from lendtrack.utils.date_utils import month_key, trailing_month_keys
from lendtrack.utils.money import ZERO, to_decimal

STATUS_LABELS = [
    (LoanStatus.ACTIVE, "Active"),
    (LoanStatus.COMPLETED, "Completed"),
    (LoanStatus.OVERDUE, "Overdue"),
    (LoanStatus.PENDING, "Pending"),
]

UNKNOWN_BORROWER = "Unknown"


def lending_trends(
    loans: List[LoanRecord],
    months: int = 6,
    as_of: Optional[date] = None,
) -> List[TrendPoint]:
    """Amount lent per calendar month for the trailing window, oldest month first"""
    as_of = as_of or date.today()
    buckets: Dict[str, Decimal] = {key: ZERO for key in trailing_month_keys(as_of, months)}

    for loan in loans:
        key = month_key(loan.created_at)
        # Loans outside the window have no bucket
        if key in buckets:
            buckets[key] += to_decimal(loan.amount)

    return [TrendPoint(name=name, amount=amount) for name, amount in buckets.items()]


def cash_flow(
    loans: List[LoanRecord],
    repayments: List[RepaymentRecord],
    months: int = 6,
    as_of: Optional[date] = None,
) -> List[CashFlowPoint]:
    """
    Money out (loans disbursed, by creation date) vs money in (repayments, by
    payment date) per calendar month for the trailing window.
    """
    as_of = as_of or date.today()
    buckets = {key: CashFlowPoint(name=key, inflow=ZERO, outflow=ZERO) for key in trailing_month_keys(as_of, months)}

    for loan in loans:
        point = buckets.get(month_key(loan.created_at))
        if point is not None:
            point.outflow += to_decimal(loan.amount)

    for repayment in repayments:
        point = buckets.get(month_key(repayment.date))
        if point is not None:
            point.inflow += to_decimal(repayment.amount)

    return list(buckets.values())


def is_overdue(loan: LoanRecord, as_of: date) -> bool:
    """Flagged overdue, or past due and not yet completed"""
    status = LoanStatus(loan.status)
    if status == LoanStatus.OVERDUE:
        return True
    return loan.due_date < as_of and status != LoanStatus.COMPLETED


def default_rate(loans: List[LoanRecord], as_of: Optional[date] = None) -> DefaultRateSummary:
    as_of = as_of or date.today()
    total = len(loans)
    overdue = sum(1 for loan in loans if is_overdue(loan, as_of))

    if total == 0:
        rate = Decimal("0.0")
    else:
        rate = (Decimal(overdue) / Decimal(total) * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    return DefaultRateSummary(total_loans=total, overdue_loans=overdue, default_rate=rate)


def status_distribution(loans: List[LoanRecord]) -> List[StatusCount]:
    """Loan counts per status, omitting statuses with no loans"""
    counts = {status: 0 for status, _ in STATUS_LABELS}
    for loan in loans:
        counts[LoanStatus(loan.status)] += 1

    return [StatusCount(name=label, value=counts[status]) for status, label in STATUS_LABELS if counts[status] > 0]


def borrower_concentration(loans: List[LoanRecord], limit: int = 5) -> List[BorrowerExposure]:
    """Top borrowers by total amount lent"""
    totals: Dict[str, Decimal] = {}
    for loan in loans:
        name = loan.borrower_name or UNKNOWN_BORROWER
        totals[name] = totals.get(name, ZERO) + to_decimal(loan.amount)

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [BorrowerExposure(name=name, amount=amount) for name, amount in ranked[:limit]]

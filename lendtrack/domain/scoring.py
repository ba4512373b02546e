"""Credit scoring engine - borrower score from loan and repayment history"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Protocol
from lendtrack.domain.models import (
    CreditFactors,
    CreditScoreResult,
    CreditTier,
    LoanRecord,
    LoanStatus,
    RepaymentRecord,
    Trend,
)
from lendtrack.utils.money import round_int, to_decimal

# Total loan volume at which the volume sub-score maxes out
VOLUME_SCALE = Decimal("10000")

# Relationship length (months) at which the duration sub-score maxes out
RELATIONSHIP_CAP_MONTHS = 24

DAYS_PER_MONTH = 30

# Used when a borrower has loans but has not repaid anything yet
NEUTRAL_ON_TIME_RATE = 50

WEIGHTS = {
    "on_time_payment_rate": Decimal("0.40"),
    "loan_completion_rate": Decimal("0.30"),
    "total_volume_normalized": Decimal("0.20"),
    "relationship_duration": Decimal("0.10"),
}

TIER_DESCRIPTIONS = {
    CreditTier.BRONZE: "Building credit history",
    CreditTier.SILVER: "Good payment track record",
    CreditTier.GOLD: "Excellent borrower standing",
    CreditTier.PLATINUM: "Outstanding credit performance",
}

TIER_COLORS = {
    CreditTier.BRONZE: "#CD7F32",
    CreditTier.SILVER: "#C0C0C0",
    CreditTier.GOLD: "#FFD700",
    CreditTier.PLATINUM: "#E5E4E2",
}

# Borrower ids that mean "no borrower" when they arrive from a client
EMPTY_BORROWER_IDS = {"", "null", "undefined"}


class LoanHistorySource(Protocol):
    """Anything that can fetch a borrower's loans and their repayments"""

    def get_loans_by_borrower(self, borrower_id: str) -> List[LoanRecord]: ...

    def get_repayments_by_loan_ids(self, loan_ids: List[str]) -> Dict[str, List[RepaymentRecord]]: ...


def _percent(part: int, whole: int) -> int:
    return round_int(Decimal(part) / Decimal(whole) * 100)


def empty_score() -> CreditScoreResult:
    """Result for a borrower with no loan history"""
    return CreditScoreResult(
        score=0,
        tier=CreditTier.BRONZE,
        trend=Trend.STABLE,
        factors=CreditFactors(),
        has_history=False,
    )


def on_time_payment_rate(
    loans: List[LoanRecord],
    repayments_by_loan_id: Dict[str, List[RepaymentRecord]],
) -> int:
    """Percentage of repayments made on or before their loan's due date (50 when none exist)"""
    total = 0
    on_time = 0
    for loan in loans:
        for repayment in repayments_by_loan_id.get(loan.id, []):
            total += 1
            if repayment.date <= loan.due_date:
                on_time += 1

    if total == 0:
        return NEUTRAL_ON_TIME_RATE

    return _percent(on_time, total)


def loan_completion_rate(loans: List[LoanRecord]) -> int:
    if not loans:
        return 0
    completed = sum(1 for loan in loans if LoanStatus(loan.status) == LoanStatus.COMPLETED)
    return _percent(completed, len(loans))


def volume_score(loans: List[LoanRecord], volume_scale: Decimal = VOLUME_SCALE) -> int:
    total_volume = sum((to_decimal(loan.amount) for loan in loans), Decimal(0))
    normalized = min(total_volume / Decimal(volume_scale) * 100, Decimal(100))
    return round_int(normalized)


def relationship_duration_score(
    loans: List[LoanRecord],
    as_of: date,
    cap_months: int = RELATIONSHIP_CAP_MONTHS,
) -> int:
    """Months since the earliest loan, on a 0-100 scale capped at cap_months"""
    if not loans:
        return 0

    first_loan_date = min(loan.created_at for loan in loans)
    months = Decimal((as_of - first_loan_date).days) / DAYS_PER_MONTH
    normalized = min(months / cap_months * 100, Decimal(100))
    return max(round_int(normalized), 0)


def determine_tier(score: int) -> CreditTier:
    """
    Map composite score to tier (inclusive lower bounds):
    - 85+: Platinum
    - 70-84: Gold
    - 50-69: Silver
    - below 50: Bronze
    """
    if score >= 85:
        return CreditTier.PLATINUM
    elif score >= 70:
        return CreditTier.GOLD
    elif score >= 50:
        return CreditTier.SILVER
    else:
        return CreditTier.BRONZE


def determine_trend(score: int) -> Trend:
    """
    Trend derived from the current score only.

    No score history is stored, so this is a static banding of the current
    value rather than a comparison against a previous score.
    """
    if score >= 70:
        return Trend.UP
    if score <= 40:
        return Trend.DOWN
    return Trend.STABLE


def calculate_credit_score(
    loans: List[LoanRecord],
    repayments_by_loan_id: Dict[str, List[RepaymentRecord]],
    as_of: Optional[date] = None,
    *,
    volume_scale: Decimal = VOLUME_SCALE,
    relationship_cap_months: int = RELATIONSHIP_CAP_MONTHS,
) -> CreditScoreResult:
    """
    Score a borrower from their full loan history.

    Scoring weights:
    - 40%: On-time payment rate (neutral 50 when nothing has been repaid yet)
    - 30%: Loan completion rate
    - 20%: Total volume, normalized against volume_scale
    - 10%: Relationship duration, normalized against relationship_cap_months

    All sub-scores and the composite are rounded half-up to integers.
    """
    if not loans:
        return empty_score()

    if as_of is None:
        as_of = date.today()

    factors = CreditFactors(
        on_time_payment_rate=on_time_payment_rate(loans, repayments_by_loan_id),
        loan_completion_rate=loan_completion_rate(loans),
        total_volume_normalized=volume_score(loans, volume_scale),
        relationship_duration=relationship_duration_score(loans, as_of, relationship_cap_months),
    )

    weighted = sum(
        (Decimal(getattr(factors, name)) * weight for name, weight in WEIGHTS.items()),
        Decimal(0),
    )
    score = round_int(weighted)

    return CreditScoreResult(
        score=score,
        tier=determine_tier(score),
        trend=determine_trend(score),
        factors=factors,
    )


def score_borrower(
    borrower_id: Optional[str],
    source: LoanHistorySource,
    as_of: Optional[date] = None,
    **options,
) -> CreditScoreResult:
    """
    Main entry point: fetch a borrower's history from the injected source and score it.

    A missing borrower id short-circuits to the empty score without touching storage.
    Storage failures raised by the source propagate to the caller.
    """
    if borrower_id is None or borrower_id.strip() in EMPTY_BORROWER_IDS:
        return empty_score()

    loans = source.get_loans_by_borrower(borrower_id)
    if not loans:
        return empty_score()

    repayments = source.get_repayments_by_loan_ids([loan.id for loan in loans])
    return calculate_credit_score(loans, repayments, as_of, **options)

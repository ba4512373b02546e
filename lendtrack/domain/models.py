"""Domain models - pure Python dataclasses representing lending entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class LoanStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class Frequency(str, Enum):
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"


class InterestType(str, Enum):
    SIMPLE = "simple"
    COMPOUND = "compound"


class CreditTier(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass
class LoanRecord:
    """One lending agreement as seen by the scoring and analytics engines"""

    id: str
    amount: Decimal
    status: LoanStatus
    due_date: date
    created_at: date
    borrower_id: Optional[str] = None
    borrower_name: Optional[str] = None


@dataclass
class RepaymentRecord:
    """Single payment event against a loan"""

    loan_id: str
    amount: Decimal
    date: date


@dataclass
class PlanConfig:
    """Inputs for one amortization run"""

    amount: Decimal
    frequency: Frequency
    duration: int  # number of installments
    interest_rate: Decimal  # annual, in percent
    interest_type: InterestType
    start_date: date


@dataclass
class Installment:
    """Single payment in a repayment schedule"""

    number: int
    due_date: date
    amount: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


@dataclass
class CreditFactors:
    """Normalized sub-scores (0-100) feeding the composite score"""

    on_time_payment_rate: int = 0
    loan_completion_rate: int = 0
    total_volume_normalized: int = 0
    relationship_duration: int = 0


@dataclass
class CreditScoreResult:
    """Output of borrower credit scoring"""

    score: int
    tier: CreditTier
    trend: Trend
    factors: CreditFactors = field(default_factory=CreditFactors)
    has_history: bool = True


@dataclass
class TrendPoint:
    name: str  # month bucket, e.g. "Jan 24"
    amount: Decimal


@dataclass
class CashFlowPoint:
    name: str
    inflow: Decimal  # repayments received
    outflow: Decimal  # loans disbursed


@dataclass
class DefaultRateSummary:
    total_loans: int
    overdue_loans: int
    default_rate: Decimal  # percent, one decimal place


@dataclass
class StatusCount:
    name: str
    value: int


@dataclass
class BorrowerExposure:
    name: str
    amount: Decimal

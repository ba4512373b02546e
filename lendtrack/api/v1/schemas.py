"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from lendtrack.domain.installments import calculate_installments
from lendtrack.domain.models import CreditTier, Frequency, InterestType, LoanStatus, PlanConfig, Trend


class PlanConfigSchema(BaseModel):
    """Amortization inputs; zero amount or duration previews as an empty schedule"""

    amount: Decimal = Field(..., ge=0, decimal_places=2, description="Principal lent")
    frequency: Frequency
    duration: int = Field(..., ge=0, description="Number of installments")
    interest_rate: Decimal = Field(Decimal("0"), ge=0, description="Annual interest rate in percent")
    interest_type: InterestType = InterestType.SIMPLE
    start_date: date

    def to_domain(self) -> PlanConfig:
        return PlanConfig(
            amount=self.amount,
            frequency=self.frequency,
            duration=self.duration,
            interest_rate=self.interest_rate,
            interest_type=self.interest_type,
            start_date=self.start_date,
        )


class InstallmentSchema(BaseModel):
    """Single installment in a repayment schedule"""

    model_config = ConfigDict(from_attributes=True)

    number: int
    due_date: date
    amount: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal
    status: str = "scheduled"


class PlanPreviewResponse(BaseModel):
    """Response for POST /v1/plans/preview"""

    total_amount: Decimal
    total_interest: Decimal
    installments: List[InstallmentSchema]


class CreateLoanRequest(BaseModel):
    """Request body for POST /v1/loans"""

    lender_id: str = Field(..., min_length=1, description="Lender identifier")
    borrower_id: Optional[str] = Field(None, description="Borrower identifier, if the borrower is a known customer")
    borrower_name: Optional[str] = None
    currency: str = Field("USD", min_length=3, max_length=3)
    plan: PlanConfigSchema

    @field_validator("plan")
    @classmethod
    def plan_must_produce_schedule(cls, plan: PlanConfigSchema) -> PlanConfigSchema:
        if plan.amount <= 0 or plan.duration <= 0:
            raise ValueError("a loan needs a positive amount and at least one installment")
        if any(inst.amount <= 0 for inst in calculate_installments(plan.to_domain())):
            raise ValueError("amount is too small to split into that many installments")
        return plan


class LoanResponse(BaseModel):
    """Response for POST /v1/loans and GET /v1/loans/{loan_id}/schedule"""

    loan_id: str
    lender_id: str
    borrower_id: Optional[str] = None
    status: LoanStatus
    amount: Decimal
    currency: str
    total_amount: Decimal
    due_date: date
    installments: List[InstallmentSchema]


class RepaymentRequest(BaseModel):
    """Request body for POST /v1/loans/{loan_id}/repayments"""

    amount: Decimal = Field(..., gt=0)
    paid_on: date = Field(default_factory=date.today)


class RepaymentResponse(BaseModel):
    repayment_id: str
    loan_id: str
    amount: Decimal
    paid_on: date
    loan_status: LoanStatus


class CreditFactorsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    on_time_payment_rate: int
    loan_completion_rate: int
    total_volume_normalized: int
    relationship_duration: int


class CreditScoreResponse(BaseModel):
    """Response for GET /v1/borrowers/{borrower_id}/credit-score"""

    borrower_id: Optional[str] = None
    score: int = Field(..., ge=0, le=100)
    tier: CreditTier
    trend: Trend
    has_history: bool
    description: str
    color: str
    factors: CreditFactorsSchema


class TrendPointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    amount: Decimal


class CashFlowPointSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    inflow: Decimal
    outflow: Decimal


class StatusCountSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    value: int


class BorrowerExposureSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    amount: Decimal


class LendingTrendsResponse(BaseModel):
    lender_id: str
    months: int
    points: List[TrendPointSchema]


class CashFlowResponse(BaseModel):
    lender_id: str
    months: int
    points: List[CashFlowPointSchema]


class DefaultRateResponse(BaseModel):
    lender_id: str
    total_loans: int
    overdue_loans: int
    default_rate: Decimal


class StatusDistributionResponse(BaseModel):
    lender_id: str
    statuses: List[StatusCountSchema]


class BorrowerConcentrationResponse(BaseModel):
    lender_id: str
    borrowers: List[BorrowerExposureSchema]

"""Repayment plan endpoints - schedule preview and persisted schedules"""

import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from lendtrack.api.v1.schemas import InstallmentSchema, LoanResponse, PlanConfigSchema, PlanPreviewResponse
from lendtrack.api.dependencies import get_loan_repository, get_request_id
from lendtrack.infrastructure.database.models import Loan
from lendtrack.infrastructure.database.repositories import LoanRepository
from lendtrack.infrastructure.observability.metrics import storage_failures_counter
from lendtrack.domain.installments import calculate_installments
from lendtrack.domain.exceptions import LoanNotFoundError, StorageError
from lendtrack.utils.money import ZERO, round2, to_decimal

router = APIRouter()


def parse_loan_id(loan_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(loan_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid loan ID format")


def loan_response(loan: Loan) -> LoanResponse:
    """Build the loan + schedule payload from a persisted loan"""
    return LoanResponse(
        loan_id=str(loan.id),
        lender_id=loan.lender_id,
        borrower_id=loan.borrower_id,
        status=loan.status,
        amount=round2(to_decimal(loan.amount)),
        currency=loan.currency,
        total_amount=round2(to_decimal(loan.total_amount)),
        due_date=loan.due_date,
        installments=[InstallmentSchema.model_validate(inst) for inst in loan.installments],
    )


@router.post("/plans/preview", response_model=PlanPreviewResponse)
def preview_plan(plan: PlanConfigSchema):
    """
    Calculate a repayment schedule without persisting anything.

    Zero amount or zero duration returns an empty schedule rather than an error.
    """
    installments = calculate_installments(plan.to_domain())
    total_amount = sum((inst.amount for inst in installments), ZERO)
    total_interest = total_amount - round2(plan.amount) if installments else ZERO

    return PlanPreviewResponse(
        total_amount=total_amount,
        total_interest=total_interest,
        installments=[InstallmentSchema.model_validate(inst) for inst in installments],
    )


@router.get("/loans/{loan_id}/schedule", response_model=LoanResponse)
def get_schedule(
    loan_id: str,
    request: Request,
    repo: LoanRepository = Depends(get_loan_repository),
):
    """
    Retrieve a loan with its persisted installment schedule.

    Returns:
        Loan details with installments in due-date order
    """
    loan_uuid = parse_loan_id(loan_id)

    try:
        loan = repo.get_loan(loan_uuid)
        return loan_response(loan)

    except LoanNotFoundError:
        raise HTTPException(status_code=404, detail="Loan not found")

    except StorageError as e:
        storage_failures_counter.inc()
        logging.error(f"Storage error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Loan storage unavailable")

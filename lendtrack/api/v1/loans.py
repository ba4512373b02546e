"""POST /v1/loans and /v1/loans/{loan_id}/repayments - loan creation and repayment recording"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from lendtrack.api.v1.plan import loan_response, parse_loan_id
from lendtrack.api.v1.schemas import CreateLoanRequest, LoanResponse, RepaymentRequest, RepaymentResponse
from lendtrack.api.dependencies import get_request_id
from lendtrack.infrastructure.database.session import get_db
from lendtrack.infrastructure.database.repositories import LoanRepository
from lendtrack.domain.installments import calculate_installments
from lendtrack.domain.exceptions import LoanNotFoundError, StorageError
from lendtrack.infrastructure.observability.metrics import (
    plan_created_counter,
    repayment_counter,
    storage_failures_counter,
)
from lendtrack.infrastructure.observability.logging import log_plan_created

router = APIRouter()


@router.post("/loans", response_model=LoanResponse, status_code=201)
def create_loan(
    request_body: CreateLoanRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Create a loan and persist its repayment schedule.

    Flow:
    1. Calculate the installment schedule from the plan config
    2. Persist loan + schedule rows (loan due date = last installment)
    3. Return the loan with its schedule
    """
    request_id = get_request_id(request)
    config = request_body.plan.to_domain()

    try:
        installments = calculate_installments(config)

        repo = LoanRepository(db)
        loan = repo.create_loan(
            lender_id=request_body.lender_id,
            borrower_id=request_body.borrower_id,
            borrower_name=request_body.borrower_name,
            config=config,
            installments=installments,
            currency=request_body.currency.upper(),
        )
        repo.commit(loan)

        plan_created_counter.labels(frequency=config.frequency.value).inc()
        log_plan_created(
            request_id,
            str(loan.id),
            config.frequency.value,
            len(installments),
            str(loan.total_amount),
        )

        return loan_response(loan)

    except StorageError as e:
        storage_failures_counter.inc()
        db.rollback()
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Loan storage unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/loans/{loan_id}/repayments", response_model=RepaymentResponse, status_code=201)
def add_repayment(
    loan_id: str,
    request_body: RepaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """Record a repayment; the loan is completed once repayments cover its scheduled total"""
    request_id = get_request_id(request)
    loan_uuid = parse_loan_id(loan_id)

    try:
        repo = LoanRepository(db)
        repayment = repo.add_repayment(loan_uuid, request_body.amount, request_body.paid_on)
        repo.commit(repayment)

        repayment_counter.inc()
        logging.info(
            "Repayment recorded",
            extra={"request_id": request_id, "loan_id": loan_id, "step": "repayment_recorded"},
        )

        return RepaymentResponse(
            repayment_id=str(repayment.id),
            loan_id=str(repayment.loan_id),
            amount=repayment.amount,
            paid_on=repayment.date,
            loan_status=repayment.loan.status,
        )

    except LoanNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Loan not found")

    except StorageError as e:
        storage_failures_counter.inc()
        db.rollback()
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Loan storage unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

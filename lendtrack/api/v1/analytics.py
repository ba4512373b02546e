"""GET /v1/lenders/{lender_id}/analytics/* - lender portfolio analytics"""

import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from lendtrack.api.v1.schemas import (
    BorrowerConcentrationResponse,
    BorrowerExposureSchema,
    CashFlowPointSchema,
    CashFlowResponse,
    DefaultRateResponse,
    LendingTrendsResponse,
    StatusCountSchema,
    StatusDistributionResponse,
    TrendPointSchema,
)
from lendtrack.api.dependencies import get_loan_repository, get_request_id
from lendtrack.config import settings
from lendtrack.infrastructure.database.repositories import LoanRepository
from lendtrack.domain import analytics
from lendtrack.domain.exceptions import InvalidLoanDataError, StorageError
from lendtrack.infrastructure.observability.metrics import storage_failures_counter

router = APIRouter()


def _fetch(fetch, request: Request):
    """Run a repository read, mapping storage failures to HTTP errors"""
    try:
        return fetch()
    except StorageError as e:
        storage_failures_counter.inc()
        logging.error(f"Storage error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Loan storage unavailable")
    except InvalidLoanDataError as e:
        logging.warning(f"Invalid loan data: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/lenders/{lender_id}/analytics/trends", response_model=LendingTrendsResponse)
def get_lending_trends(
    lender_id: str,
    request: Request,
    months: int = Query(settings.analytics_default_months, ge=1, le=36),
    as_of: Optional[date] = Query(None),
    repo: LoanRepository = Depends(get_loan_repository),
):
    """Amount lent per month over the trailing window"""
    loans = _fetch(lambda: repo.get_loans_by_lender(lender_id), request)
    points = analytics.lending_trends(loans, months, as_of)
    return LendingTrendsResponse(
        lender_id=lender_id,
        months=months,
        points=[TrendPointSchema.model_validate(p) for p in points],
    )


@router.get("/lenders/{lender_id}/analytics/cash-flow", response_model=CashFlowResponse)
def get_cash_flow(
    lender_id: str,
    request: Request,
    months: int = Query(settings.analytics_default_months, ge=1, le=36),
    as_of: Optional[date] = Query(None),
    repo: LoanRepository = Depends(get_loan_repository),
):
    """Loans disbursed vs repayments received per month"""
    loans = _fetch(lambda: repo.get_loans_by_lender(lender_id), request)
    repayments = _fetch(lambda: repo.get_repayments_by_lender(lender_id), request)
    points = analytics.cash_flow(loans, repayments, months, as_of)
    return CashFlowResponse(
        lender_id=lender_id,
        months=months,
        points=[CashFlowPointSchema.model_validate(p) for p in points],
    )


@router.get("/lenders/{lender_id}/analytics/default-rate", response_model=DefaultRateResponse)
def get_default_rate(
    lender_id: str,
    request: Request,
    as_of: Optional[date] = Query(None),
    repo: LoanRepository = Depends(get_loan_repository),
):
    loans = _fetch(lambda: repo.get_loans_by_lender(lender_id), request)
    summary = analytics.default_rate(loans, as_of)
    return DefaultRateResponse(
        lender_id=lender_id,
        total_loans=summary.total_loans,
        overdue_loans=summary.overdue_loans,
        default_rate=summary.default_rate,
    )


@router.get("/lenders/{lender_id}/analytics/status-distribution", response_model=StatusDistributionResponse)
def get_status_distribution(
    lender_id: str,
    request: Request,
    repo: LoanRepository = Depends(get_loan_repository),
):
    loans = _fetch(lambda: repo.get_loans_by_lender(lender_id), request)
    return StatusDistributionResponse(
        lender_id=lender_id,
        statuses=[StatusCountSchema.model_validate(s) for s in analytics.status_distribution(loans)],
    )


@router.get("/lenders/{lender_id}/analytics/borrower-concentration", response_model=BorrowerConcentrationResponse)
def get_borrower_concentration(
    lender_id: str,
    request: Request,
    limit: int = Query(settings.analytics_concentration_limit, ge=1, le=50),
    repo: LoanRepository = Depends(get_loan_repository),
):
    """Top borrowers by total amount lent"""
    loans = _fetch(lambda: repo.get_loans_by_lender(lender_id), request)
    return BorrowerConcentrationResponse(
        lender_id=lender_id,
        borrowers=[BorrowerExposureSchema.model_validate(b) for b in analytics.borrower_concentration(loans, limit)],
    )

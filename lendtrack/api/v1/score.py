"""GET /v1/borrowers/{borrower_id}/credit-score - borrower credit score endpoint"""

import time
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from lendtrack.api.v1.schemas import CreditFactorsSchema, CreditScoreResponse
from lendtrack.api.dependencies import get_loan_repository, get_request_id
from lendtrack.config import settings
from lendtrack.infrastructure.database.repositories import LoanRepository
from lendtrack.domain.scoring import TIER_COLORS, TIER_DESCRIPTIONS, score_borrower
from lendtrack.domain.exceptions import InvalidLoanDataError, StorageError
from lendtrack.infrastructure.observability.metrics import record_credit_score, storage_failures_counter
from lendtrack.infrastructure.observability.logging import log_credit_score

router = APIRouter()


@router.get("/borrowers/{borrower_id}/credit-score", response_model=CreditScoreResponse)
def get_credit_score(
    borrower_id: str,
    request: Request,
    as_of: Optional[date] = Query(None, description="Score as of this date (default: today)"),
    repo: LoanRepository = Depends(get_loan_repository),
):
    """
    Score a borrower from their loan and repayment history.

    Borrowers with no loans get a zero score with has_history=false.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = score_borrower(
            borrower_id,
            repo,
            as_of,
            volume_scale=settings.score_volume_scale,
            relationship_cap_months=settings.score_relationship_cap_months,
        )

    except StorageError as e:
        storage_failures_counter.inc()
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Loan storage unavailable")

    except InvalidLoanDataError as e:
        logging.warning(f"Invalid loan data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_credit_score(result.tier.value, result.has_history)
    log_credit_score(request_id, borrower_id, result.score, result.tier.value, duration_ms)

    return CreditScoreResponse(
        borrower_id=borrower_id,
        score=result.score,
        tier=result.tier,
        trend=result.trend,
        has_history=result.has_history,
        description=TIER_DESCRIPTIONS[result.tier],
        color=TIER_COLORS[result.tier],
        factors=CreditFactorsSchema.model_validate(result.factors),
    )

"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from lendtrack.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_credit_score(
    request_id: str,
    borrower_id: Optional[str],
    score: int,
    tier: str,
    duration_ms: float,
) -> None:
    """Log structured scoring outcome for analysis"""
    logging.info(
        "Credit score computed",
        extra={
            "request_id": request_id,
            "borrower_id": borrower_id,
            "step": "credit_score_complete",
            "score": score,
            "tier": tier,
            "duration_ms": duration_ms,
        },
    )


def log_plan_created(
    request_id: str,
    loan_id: str,
    frequency: str,
    installment_count: int,
    total_amount: str,
) -> None:
    logging.info(
        "Repayment plan created",
        extra={
            "request_id": request_id,
            "loan_id": loan_id,
            "step": "plan_created",
            "frequency": frequency,
            "installment_count": installment_count,
            "total_amount": total_amount,
        },
    )

"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from lendtrack.infrastructure.database.repositories import LoanRepository
from lendtrack.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_loan_repository(db: Session = Depends(get_db)) -> LoanRepository:
    """Provide a loan repository bound to the request's session"""
    return LoanRepository(db)

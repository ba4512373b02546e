"""Pytest fixtures for testing"""

import itertools
import pytest
from datetime import date, timedelta
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from lendtrack.api.main import create_app
from lendtrack.infrastructure.database.models import Base
from lendtrack.infrastructure.database.session import get_db
from lendtrack.domain.models import LoanRecord, LoanStatus, RepaymentRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_loan_ids = itertools.count(1)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def make_loan(
    amount="1000",
    status=LoanStatus.ACTIVE,
    due_date=date(2024, 6, 30),
    created_at=date(2024, 1, 1),
    borrower_name=None,
    loan_id=None,
) -> LoanRecord:
    """Build a LoanRecord with sensible defaults"""
    return LoanRecord(
        id=loan_id or f"loan_{next(_loan_ids)}",
        amount=Decimal(amount),
        status=status,
        due_date=due_date,
        created_at=created_at,
        borrower_id="borrower_1",
        borrower_name=borrower_name,
    )


def make_repayment(loan: LoanRecord, paid_on: date, amount="100") -> RepaymentRecord:
    return RepaymentRecord(loan_id=loan.id, amount=Decimal(amount), date=paid_on)


@pytest.fixture
def established_borrower():
    """
    Borrower with 4 loans (2 completed), 10 on-time repayments, $5000 volume,
    first loan 360 days (12 scoring months) before as_of.
    """
    as_of = date(2024, 12, 31)
    first = as_of - timedelta(days=360)
    loans = [
        make_loan("1000", LoanStatus.COMPLETED, due_date=as_of, created_at=first),
        make_loan("1000", LoanStatus.COMPLETED, due_date=as_of, created_at=first + timedelta(days=30)),
        make_loan("1500", LoanStatus.ACTIVE, due_date=as_of, created_at=first + timedelta(days=60)),
        make_loan("1500", LoanStatus.ACTIVE, due_date=as_of, created_at=first + timedelta(days=90)),
    ]

    repayments = {}
    for index, loan in enumerate(loans):
        count = 4 if index < 2 else 1
        repayments[loan.id] = [
            make_repayment(loan, loan.created_at + timedelta(days=30 * (n + 1)), "250") for n in range(count)
        ]

    return loans, repayments, as_of


@pytest.fixture
def loan_factory():
    return make_loan


@pytest.fixture
def repayment_factory():
    return make_repayment

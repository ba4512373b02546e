"""Data access layer for loans, schedules and repayments"""

import uuid
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from functools import wraps
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from lendtrack.domain.exceptions import InvalidLoanDataError, LoanNotFoundError, StorageError
from lendtrack.domain.models import Installment, LoanRecord, LoanStatus, PlanConfig, RepaymentRecord
from lendtrack.infrastructure.database.models import Loan, LoanInstallment, Repayment
from lendtrack.utils.money import ZERO, to_decimal


def _storage_call(method):
    """Translate SQLAlchemy failures into StorageError so callers see a domain error"""

    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except SQLAlchemyError as e:
            raise StorageError(f"Loan storage failure: {e}") from e

    return wrapper


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def to_loan_record(loan: Loan) -> LoanRecord:
    """Map an ORM row to the typed record consumed by scoring and analytics"""
    try:
        status = LoanStatus(loan.status.lower())
    except (AttributeError, ValueError) as e:
        raise InvalidLoanDataError(f"Loan {loan.id} has unknown status {loan.status!r}") from e

    if loan.amount is None or loan.due_date is None or loan.created_at is None:
        raise InvalidLoanDataError(f"Loan {loan.id} is missing amount, due date or creation date")

    return LoanRecord(
        id=str(loan.id),
        amount=to_decimal(loan.amount),
        status=status,
        due_date=_as_date(loan.due_date),
        created_at=_as_date(loan.created_at),
        borrower_id=loan.borrower_id,
        borrower_name=loan.borrower_name,
    )


def to_repayment_record(repayment: Repayment) -> RepaymentRecord:
    return RepaymentRecord(
        loan_id=str(repayment.loan_id),
        amount=to_decimal(repayment.amount),
        date=_as_date(repayment.date),
    )


class LoanRepository:
    """Repository for loans and everything hanging off them"""

    def __init__(self, db: Session):
        self.db = db

    @_storage_call
    def create_loan(
        self,
        lender_id: str,
        borrower_id: Optional[str],
        borrower_name: Optional[str],
        config: PlanConfig,
        installments: List[Installment],
        currency: str = "USD",
        created_at: Optional[datetime] = None,
    ) -> Loan:
        """Persist a loan together with its generated schedule"""
        total_amount = sum((inst.amount for inst in installments), ZERO)
        db_loan = Loan(
            lender_id=lender_id,
            borrower_id=borrower_id,
            borrower_name=borrower_name,
            amount=config.amount,
            currency=currency,
            status=LoanStatus.ACTIVE.value,
            frequency=config.frequency.value,
            duration=config.duration,
            interest_rate=config.interest_rate,
            interest_type=config.interest_type.value,
            start_date=config.start_date,
            total_amount=total_amount,
            due_date=installments[-1].due_date,
        )
        if created_at is not None:
            db_loan.created_at = created_at

        self.db.add(db_loan)
        self.db.flush()  # Get ID without committing

        for inst in installments:
            self.db.add(
                LoanInstallment(
                    loan_id=db_loan.id,
                    number=inst.number,
                    due_date=inst.due_date,
                    amount=inst.amount,
                    principal=inst.principal,
                    interest=inst.interest,
                    balance=inst.balance,
                )
            )

        return db_loan

    @_storage_call
    def get_loan(self, loan_id: uuid.UUID) -> Loan:
        """Fetch loan with its schedule"""
        loan = self.db.query(Loan).filter(Loan.id == loan_id).first()
        if loan is None:
            raise LoanNotFoundError(f"Loan {loan_id} not found")
        return loan

    @_storage_call
    def get_loans_by_borrower(self, borrower_id: str) -> List[LoanRecord]:
        rows = self.db.query(Loan).filter(Loan.borrower_id == borrower_id).order_by(Loan.created_at).all()
        return [to_loan_record(row) for row in rows]

    @_storage_call
    def get_loans_by_lender(self, lender_id: str) -> List[LoanRecord]:
        rows = self.db.query(Loan).filter(Loan.lender_id == lender_id).order_by(Loan.created_at).all()
        return [to_loan_record(row) for row in rows]

    @_storage_call
    def get_repayments_by_loan_ids(self, loan_ids: List[str]) -> Dict[str, List[RepaymentRecord]]:
        """Repayments grouped by loan id, oldest first"""
        if not loan_ids:
            return {}

        rows = (
            self.db.query(Repayment)
            .filter(Repayment.loan_id.in_([uuid.UUID(str(loan_id)) for loan_id in loan_ids]))
            .order_by(Repayment.date)
            .all()
        )

        grouped: Dict[str, List[RepaymentRecord]] = defaultdict(list)
        for row in rows:
            grouped[str(row.loan_id)].append(to_repayment_record(row))
        return dict(grouped)

    def get_repayments_by_lender(self, lender_id: str) -> List[RepaymentRecord]:
        loan_ids = [loan.id for loan in self.get_loans_by_lender(lender_id)]
        grouped = self.get_repayments_by_loan_ids(loan_ids)
        return [repayment for loan_id in loan_ids for repayment in grouped.get(loan_id, [])]

    @_storage_call
    def add_repayment(self, loan_id: uuid.UUID, amount: Decimal, paid_on: date) -> Repayment:
        """
        Append a repayment and complete the loan once repayments cover the scheduled total.

        Status only moves forward to completed here; overdue flagging belongs to
        whoever owns the calendar.
        """
        loan = self.get_loan(loan_id)

        repayment = Repayment(loan_id=loan.id, amount=amount, date=paid_on)
        self.db.add(repayment)
        self.db.flush()

        repaid = self.db.query(func.coalesce(func.sum(Repayment.amount), 0)).filter(Repayment.loan_id == loan.id).scalar()
        if to_decimal(repaid) >= to_decimal(loan.total_amount) and loan.status != LoanStatus.COMPLETED.value:
            loan.status = LoanStatus.COMPLETED.value

        return repayment

    @_storage_call
    def commit(self, *instances) -> None:
        """Commit the unit of work; pending schedule rows are only flushed here"""
        self.db.commit()
        for instance in instances:
            self.db.refresh(instance)

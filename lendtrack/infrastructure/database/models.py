"""SQLAlchemy ORM models for loans, repayments and repayment schedules"""

import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(14, 2)


class Loan(Base):
    """Lending agreement between a lender and a borrower"""

    __tablename__ = "loan"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    lender_id = Column(Text, nullable=False, index=True)
    borrower_id = Column(Text, nullable=True, index=True)
    borrower_name = Column(Text, nullable=True)
    amount = Column(Money, nullable=False)
    currency = Column(Text, nullable=False, default="USD")
    status = Column(Text, nullable=False, default="active")
    frequency = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)
    interest_rate = Column(Numeric(7, 3), nullable=False, default=0)
    interest_type = Column(Text, nullable=False, default="simple")
    start_date = Column(Date, nullable=False)
    total_amount = Column(Money, nullable=False)
    due_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    installments = relationship(
        "LoanInstallment",
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanInstallment.number",
    )
    repayments = relationship("Repayment", back_populates="loan", cascade="all, delete-orphan")


class LoanInstallment(Base):
    """Scheduled installment persisted from the amortization calculator"""

    __tablename__ = "loan_installment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_id = Column(UUID(as_uuid=True), ForeignKey("loan.id", ondelete="CASCADE"), nullable=False, index=True)
    number = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=False)
    amount = Column(Money, nullable=False)
    principal = Column(Money, nullable=False)
    interest = Column(Money, nullable=False)
    balance = Column(Money, nullable=False)
    status = Column(Text, nullable=False, default="scheduled")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loan = relationship("Loan", back_populates="installments")


class Repayment(Base):
    """Payment event against a loan (append-only)"""

    __tablename__ = "repayment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    loan_id = Column(UUID(as_uuid=True), ForeignKey("loan.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Money, nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    loan = relationship("Loan", back_populates="repayments")

"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class StorageError(DomainException):
    """Loan or repayment storage failed or is unavailable"""

    pass


class InvalidLoanDataError(DomainException):
    """Stored loan data is malformed and cannot be mapped to a record"""

    pass


class LoanNotFoundError(DomainException):
    """Requested loan does not exist"""

    pass

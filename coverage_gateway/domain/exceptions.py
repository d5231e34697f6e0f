"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class LedgerAPIError(DomainException):
    """Ledger API returned an error or is unavailable"""

    pass


class InvalidMonthKeyError(DomainException):
    """Reporting month key is not in YYYY-MM form"""

    pass


class InvalidPlannedPaymentError(DomainException):
    """Planned payment amount or day cannot be accepted"""

    pass


class InvalidTransactionDataError(LedgerAPIError):
    """Ledger returned an operation that cannot be parsed"""

    pass

"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnderwritingConfigurationError(DomainException):
    """No active underwriting rules were supplied to the engine"""

    pass


class InvalidLoanTermsError(DomainException):
    """Loan term or rate cannot be amortized (non-positive term, negative APR)"""

    pass


class OfferStatusError(DomainException):
    """Requested offer status transition is not allowed"""

    pass


class NotificationDispatchError(DomainException):
    """Notification dispatcher rejected the event or is unavailable"""

    pass

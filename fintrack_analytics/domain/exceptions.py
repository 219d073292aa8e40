"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException, ValueError):
    """A required argument is missing or structurally invalid"""

    pass


class StrategyNotFoundError(DomainException, LookupError):
    """No analysis strategy is registered for the requested KPI type"""

    pass


class StrategyConfigurationError(DomainException):
    """Strategy registry was built with no strategies or with duplicates"""

    pass


class TransactionSourceError(DomainException):
    """Transaction service returned an error or is unavailable"""

    pass

"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(DomainException):
    """A live stock-out was requested against a product without enough stock.

    Raised by callers of the ledger, never by the ledger itself: backdated
    and administrative corrections are allowed to take stock negative.
    """

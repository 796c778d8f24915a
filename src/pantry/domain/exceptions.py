"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from decimal import Decimal


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(ValidationError):
    """FIFO deduction cannot satisfy the requested quantity.

    Carries the figures of the first ingredient that fell short so callers
    can report them without parsing the message.
    """

    def __init__(self, ingredient_name: str, needed: Decimal, available: Decimal) -> None:
        self.ingredient_name = ingredient_name
        self.needed = needed
        self.available = available
        super().__init__(
            f"Insufficient stock for {ingredient_name} "
            f"(need {needed}, have {available} available)"
        )


class ConflictError(DomainException):
    """A concurrent modification was detected, or the store was busy.

    Nothing is retried automatically; the caller decides whether to retry.
    """

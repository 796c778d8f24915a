"""Value Objects and coercion helpers shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum

from pantry.domain.exceptions import ValidationError


class MovementType(Enum):
    IN = "in"
    OUT = "out"


class StockReason(Enum):
    ORDER = "order"
    MANUAL_ADJUSTMENT = "manual_adjustment"
    EXPIRED = "expired"
    NEW_STOCK = "new_stock"
    RESTOCK = "restock"
    NEW_BATCH = "new_batch"
    ORDER_CANCELLATION = "order_cancellation"


@dataclass(frozen=True)
class Quantity:
    """A strictly positive stock quantity.

    Uses Decimal so fractional amounts (0.25 kg) add up exactly across
    many batches.
    """

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Quantity must be a Decimal, got {type(self.value).__name__}"
            )
        if not self.value.is_finite():
            raise ValidationError(f"Quantity must be a finite number, got {self.value}")
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(amount: str | float | int | Decimal | None) -> Quantity:
        """Convenient factory that coerces to Decimal safely."""
        return Quantity(to_decimal(amount))


def to_decimal(amount: str | float | int | Decimal | None) -> Decimal:
    """Coerce *amount* into a finite Decimal or raise ValidationError."""
    if amount is None or (isinstance(amount, str) and not amount.strip()):
        raise ValidationError("Quantity is required")
    if isinstance(amount, bool):
        raise ValidationError(f"Invalid quantity: {amount!r}")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid quantity: {amount!r}") from exc
    if not value.is_finite():
        raise ValidationError(f"Invalid quantity: {amount!r}")
    return value


def to_non_negative_decimal(amount: str | float | int | Decimal | None) -> Decimal:
    value = to_decimal(amount)
    if value < 0:
        raise ValidationError("Quantity cannot be negative")
    return value


def parse_expiry_date(raw: str | date | datetime | None) -> date:
    """Return the calendar day of an expiry date.

    Accepts ``date``/``datetime`` objects (time of day is dropped) or an
    ISO ``YYYY-MM-DD`` string; an ISO datetime string is also accepted.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError("Expiry date is required")
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        raise ValidationError(
            f"Invalid expiry date {raw!r}, expected YYYY-MM-DD"
        ) from exc

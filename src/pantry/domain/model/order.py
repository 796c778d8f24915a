"""Order aggregate.

An order records which batches absorbed a fulfillment and how much each
gave.  That list is the authoritative input for cancelling the order
later, because by then the batches may have been pruned or modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from pantry.domain.exceptions import ValidationError


class OrderStatus(Enum):
    """Orders are recorded only once fulfilled; cancelling deletes them."""

    COMPLETED = "completed"


@dataclass(frozen=True)
class UsedIngredient:
    """Snapshot of one batch deduction made for an order."""

    ingredient_id: str
    batch_id: str
    quantity_used: Decimal
    ingredient_name: str  # snapshot at order time
    unit: str  # snapshot at order time
    expiry_date: date | None = None  # batch expiry at order time


@dataclass
class Order:
    """Aggregate root for fulfilled menu orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    menu_id: int
    menu_name: str
    quantity: int
    ingredients_used: list[UsedIngredient]
    status: OrderStatus = OrderStatus.COMPLETED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        menu_id: int,
        menu_name: str,
        quantity: int,
        ingredients_used: list[UsedIngredient],
        now: datetime | None = None,
    ) -> Order:
        """Create a completed order from the deductions that fulfilled it."""
        validate_order_quantity(quantity)
        if not ingredients_used:
            raise ValidationError("Order must use at least one ingredient batch")

        order = Order(
            id=None,
            menu_id=menu_id,
            menu_name=menu_name,
            quantity=quantity,
            ingredients_used=list(ingredients_used),
            status=OrderStatus.COMPLETED,
        )
        if now is not None:
            order.created_at = now
        return order

    # --- Computed properties --------------------------------------------------

    def total_used(self, ingredient_id: str) -> Decimal:
        return sum(
            (u.quantity_used for u in self.ingredients_used if u.ingredient_id == ingredient_id),
            Decimal("0"),
        )


def validate_order_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(
            f"Order quantity must be an integer, got {type(quantity).__name__}"
        )
    if quantity <= 0:
        raise ValidationError("Order quantity must be positive")

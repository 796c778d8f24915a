"""Ingredient aggregate — the batch ledger of one perishable ingredient.

An ingredient owns its batches exclusively.  Every stock mutation goes
through the aggregate so the ledger invariants hold after each call:

- batches are sorted ascending by expiry date (ties keep insertion order)
- no batch with a current quantity of zero or less is kept

Each mutation returns the ``StockMovement``(s) it caused so the history
recorder can append a matching audit entry.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal

from pantry.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from pantry.domain.model.stock_history import StockMovement
from pantry.domain.model.value_objects import (
    MovementType,
    Quantity,
    StockReason,
    parse_expiry_date,
    to_non_negative_decimal,
)


@dataclass
class Batch:
    """A quantity of an ingredient received on one occasion.

    ``current_quantity`` is not clamped to ``initial_quantity``: restocks
    and cancellations raise both, manual adjustments set both, and
    fulfillment lowers only the current quantity.
    """

    id: str
    initial_quantity: Decimal
    current_quantity: Decimal
    expiry_date: date
    entry_date: datetime

    @staticmethod
    def new(
        quantity: Decimal,
        expiry_date: date,
        now: datetime,
        batch_id: str | None = None,
    ) -> Batch:
        return Batch(
            id=batch_id or uuid.uuid4().hex,
            initial_quantity=quantity,
            current_quantity=quantity,
            expiry_date=expiry_date,
            entry_date=now,
        )


@dataclass
class Ingredient:
    """Aggregate root for one ingredient's stock.

    Use ``Ingredient.create()`` for new ingredients.  ``version`` is the
    optimistic-concurrency token; repositories bump it on every save.
    """

    id: str
    name: str
    unit: str
    category: str
    batches: list[Batch] = field(default_factory=list)
    has_received_stock: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0

    # --- Factory (used for NEW ingredients only) ------------------------------

    @staticmethod
    def create(name: str, unit: str, category: str, now: datetime) -> Ingredient:
        for label, value in (("name", name), ("unit", unit), ("category", category)):
            if not value or not value.strip():
                raise ValidationError(f"Ingredient {label} is required")
        return Ingredient(
            id=uuid.uuid4().hex,
            name=name.strip(),
            unit=unit.strip(),
            category=category.strip(),
            created_at=now,
        )

    # --- Ledger queries -------------------------------------------------------

    @property
    def total_quantity(self) -> Decimal:
        return sum((b.current_quantity for b in self.batches), Decimal("0"))

    def find_batch(self, batch_id: str) -> Batch | None:
        for batch in self.batches:
            if batch.id == batch_id:
                return batch
        return None

    def find_by_expiry(self, expiry_date: date | datetime) -> Batch | None:
        """Return the batch expiring on the same calendar day, if any."""
        day = parse_expiry_date(expiry_date)
        for batch in self.batches:
            if batch.expiry_date == day:
                return batch
        return None

    def normalize(self) -> None:
        """Prune empty batches and restore FIFO (expiry-ascending) order."""
        # sort() is stable, so equal expiry dates keep insertion order
        self.batches = sorted(
            (b for b in self.batches if b.current_quantity > 0),
            key=lambda b: b.expiry_date,
        )

    # --- Stock mutations ------------------------------------------------------

    def add_stock(
        self,
        quantity: Decimal | str | int | float,
        expiry_date: date | datetime | str,
        now: datetime,
    ) -> StockMovement:
        """Receive stock, merging into a same-day batch when one exists."""
        amount = Quantity.of(quantity).value
        day = parse_expiry_date(expiry_date)
        self.normalize()

        batch = self.find_by_expiry(day)
        if batch is not None:
            previous = batch.current_quantity
            batch.initial_quantity += amount
            batch.current_quantity += amount
            reason = StockReason.RESTOCK
        else:
            batch = Batch.new(amount, day, now)
            self.batches.append(batch)
            previous = Decimal("0")
            reason = StockReason.NEW_BATCH if self.has_received_stock else StockReason.NEW_STOCK

        self.has_received_stock = True
        movement = StockMovement(
            batch_id=batch.id,
            type=MovementType.IN,
            quantity=amount,
            previous_stock=previous,
            new_stock=batch.current_quantity,
            reason=reason,
        )
        self.normalize()
        return movement

    def consume(self, quantity: Decimal | str | int | float) -> list[StockMovement]:
        """Deduct *quantity* across batches, soonest expiry first.

        Availability is checked before any batch is touched, so a failed
        deduction leaves the ledger exactly as it was.
        """
        needed = Quantity.of(quantity).value
        self.normalize()

        available = self.total_quantity
        if needed > available:
            raise InsufficientStockError(self.name, needed, available)

        movements: list[StockMovement] = []
        remaining = needed
        for batch in self.batches:
            if remaining <= 0:
                break
            taken = min(remaining, batch.current_quantity)
            previous = batch.current_quantity
            batch.current_quantity -= taken
            remaining -= taken
            movements.append(
                StockMovement(
                    batch_id=batch.id,
                    type=MovementType.OUT,
                    quantity=taken,
                    previous_stock=previous,
                    new_stock=batch.current_quantity,
                    reason=StockReason.ORDER,
                )
            )

        self.normalize()
        return movements

    def restore(
        self,
        batch_id: str,
        quantity: Decimal | str | int | float,
        expiry_date: date | None,
        now: datetime,
    ) -> StockMovement | None:
        """Give back stock taken by a cancelled order.

        If the original batch was pruned, the stock goes into a batch
        expiring the same day, or the batch is recreated under its old id
        at the recorded expiry date.  Returns None only when the batch is
        gone and no expiry date was recorded.
        """
        amount = Quantity.of(quantity).value
        self.normalize()

        batch = self.find_batch(batch_id)
        if batch is None and expiry_date is not None:
            batch = self.find_by_expiry(expiry_date)
        if batch is None:
            if expiry_date is None:
                return None
            batch = Batch.new(Decimal("0"), expiry_date, now, batch_id=batch_id)
            self.batches.append(batch)

        previous = batch.current_quantity
        batch.initial_quantity += amount
        batch.current_quantity += amount
        self.has_received_stock = True
        movement = StockMovement(
            batch_id=batch.id,
            type=MovementType.IN,
            quantity=amount,
            previous_stock=previous,
            new_stock=batch.current_quantity,
            reason=StockReason.ORDER_CANCELLATION,
        )
        self.normalize()
        return movement

    def adjust_batch(
        self,
        batch_id: str,
        quantity: Decimal | str | int | float | None = None,
        expiry_date: date | datetime | str | None = None,
    ) -> StockMovement | None:
        """Manually set a batch's quantity and/or expiry date.

        Both quantities are set to the new value.  A movement is returned
        only when the quantity actually changed.
        """
        if quantity is None and expiry_date is None:
            raise ValidationError("Nothing to adjust: give a quantity or an expiry date")

        batch = self.find_batch(batch_id)
        if batch is None:
            raise EntityNotFoundError(f"Batch '{batch_id}' not found on {self.name}")

        new_quantity = to_non_negative_decimal(quantity) if quantity is not None else None
        new_expiry = parse_expiry_date(expiry_date) if expiry_date is not None else None

        movement = None
        if new_quantity is not None:
            previous = batch.current_quantity
            delta = new_quantity - previous
            batch.initial_quantity = new_quantity
            batch.current_quantity = new_quantity
            if delta != 0:
                movement = StockMovement(
                    batch_id=batch.id,
                    type=MovementType.IN if delta > 0 else MovementType.OUT,
                    quantity=abs(delta),
                    previous_stock=previous,
                    new_stock=new_quantity,
                    reason=StockReason.MANUAL_ADJUSTMENT,
                )

        if new_expiry is not None:
            batch.expiry_date = new_expiry

        self.normalize()
        return movement

    def discard_batch(self, batch_id: str) -> StockMovement:
        """Write off a whole batch as expired."""
        batch = self.find_batch(batch_id)
        if batch is None:
            raise EntityNotFoundError(f"Batch '{batch_id}' not found on {self.name}")

        previous = batch.current_quantity
        batch.current_quantity = Decimal("0")
        movement = StockMovement(
            batch_id=batch.id,
            type=MovementType.OUT,
            quantity=previous,
            previous_stock=previous,
            new_stock=Decimal("0"),
            reason=StockReason.EXPIRED,
        )
        self.normalize()
        return movement

    # --- Catalog details ------------------------------------------------------

    def update_details(
        self,
        name: str | None = None,
        unit: str | None = None,
        category: str | None = None,
    ) -> None:
        """Rename or re-label the ingredient.

        Menus and orders keep the name/unit snapshot they captured, so
        this never rewrites history.
        """
        if name is not None:
            if not name.strip():
                raise ValidationError("Ingredient name is required")
            self.name = name.strip()
        if unit is not None:
            if not unit.strip():
                raise ValidationError("Ingredient unit is required")
            self.unit = unit.strip()
        if category is not None:
            if not category.strip():
                raise ValidationError("Ingredient category is required")
            self.category = category.strip()
        self.normalize()

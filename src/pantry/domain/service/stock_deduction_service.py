"""Domain service: FIFO Stock Deduction.

This service coordinates the cross-aggregate operation of deducting
(or giving back) ingredient stock for a menu order.  It lives in the
domain layer because the logic is a core business rule, not just
orchestration.

The two-phase approach (validate-then-mutate) ensures no ingredient is
touched when any other ingredient of the same order falls short.  The
surrounding unit of work makes the final write atomic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from pantry.domain.exceptions import EntityNotFoundError, InsufficientStockError
from pantry.domain.model.ingredient import Ingredient
from pantry.domain.model.menu import Menu
from pantry.domain.model.order import Order, UsedIngredient
from pantry.domain.model.stock_history import StockMovement
from pantry.domain.repository.ingredient_repository import IngredientRepository

logger = logging.getLogger(__name__)


@dataclass
class StockChanges:
    """Everything one deduction or restoration did, ready for recording."""

    used: list[UsedIngredient] = field(default_factory=list)
    movements: list[tuple[Ingredient, StockMovement]] = field(default_factory=list)

    def by_ingredient(self) -> list[tuple[Ingredient, list[StockMovement]]]:
        grouped: dict[str, tuple[Ingredient, list[StockMovement]]] = {}
        for ingredient, movement in self.movements:
            grouped.setdefault(ingredient.id, (ingredient, []))[1].append(movement)
        return list(grouped.values())


class StockDeductionService:

    def __init__(
        self,
        ingredient_repo: IngredientRepository,
        clock: Callable[[], datetime],
    ) -> None:
        self._ingredient_repo = ingredient_repo
        self._clock = clock

    def deduct_for_menu(self, menu: Menu, quantity: int) -> StockChanges:
        """Consume stock for *quantity* servings of *menu*.

        Uses a two-phase approach:
          Phase 1 — load and validate: every ingredient exists and holds
                    enough stock in total.  Fails fast before any mutation.
          Phase 2 — mutate: ``consume()`` each requirement FIFO-wise and
                    save the ingredients.
        """
        # Phase 1: load all ingredients and validate availability
        ingredients: dict[str, Ingredient] = {}
        for ingredient_id, needed in menu.needed_per_ingredient(quantity).items():
            ingredient = self._ingredient_repo.get_by_id(ingredient_id)
            if ingredient is None:
                raise EntityNotFoundError(
                    f"Ingredient '{self._requirement_name(menu, ingredient_id)}' "
                    f"required by {menu.name} not found"
                )
            ingredient.normalize()
            if needed > ingredient.total_quantity:
                raise InsufficientStockError(
                    ingredient.name, needed, ingredient.total_quantity
                )
            ingredients[ingredient_id] = ingredient

        # Phase 2: mutate
        changes = StockChanges()
        for req in menu.requirements:
            ingredient = ingredients[req.ingredient_id]
            expiry_by_batch = {b.id: b.expiry_date for b in ingredient.batches}
            for movement in ingredient.consume(req.quantity * quantity):
                logger.debug(
                    "Took %s %s of %s from batch %s (%s -> %s)",
                    movement.quantity, ingredient.unit, ingredient.name,
                    movement.batch_id, movement.previous_stock, movement.new_stock,
                )
                changes.movements.append((ingredient, movement))
                changes.used.append(
                    UsedIngredient(
                        ingredient_id=ingredient.id,
                        batch_id=movement.batch_id,
                        quantity_used=movement.quantity,
                        ingredient_name=ingredient.name,
                        unit=ingredient.unit,
                        expiry_date=expiry_by_batch[movement.batch_id],
                    )
                )

        for ingredient in ingredients.values():
            self._ingredient_repo.save(ingredient)

        return changes

    def restore_for_order(self, order: Order) -> StockChanges:
        """Give back every batch deduction recorded on *order*.

        Entries whose ingredient has been deleted are skipped.
        """
        now = self._clock()
        touched: dict[str, Ingredient] = {}
        changes = StockChanges()

        for used in order.ingredients_used:
            ingredient = touched.get(used.ingredient_id)
            if ingredient is None:
                ingredient = self._ingredient_repo.get_by_id(used.ingredient_id)
            if ingredient is None:
                logger.warning(
                    "Order #%s: ingredient %s (%s) no longer exists, "
                    "%s %s not restored",
                    order.id, used.ingredient_name, used.ingredient_id,
                    used.quantity_used, used.unit,
                )
                continue
            touched[ingredient.id] = ingredient

            movement = ingredient.restore(
                used.batch_id, used.quantity_used, used.expiry_date, now
            )
            if movement is None:
                logger.warning(
                    "Order #%s: batch %s of %s is gone and has no recorded "
                    "expiry date, %s %s not restored",
                    order.id, used.batch_id, ingredient.name,
                    used.quantity_used, used.unit,
                )
                continue
            changes.used.append(used)
            changes.movements.append((ingredient, movement))

        for ingredient in touched.values():
            self._ingredient_repo.save(ingredient)

        return changes

    @staticmethod
    def _requirement_name(menu: Menu, ingredient_id: str) -> str:
        for req in menu.requirements:
            if req.ingredient_id == ingredient_id:
                return req.ingredient_name
        return ingredient_id

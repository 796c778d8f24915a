"""Menu aggregate.

A menu lists how much of each ingredient one serving needs.  Each
requirement captures the ingredient's name and unit when the menu is
saved, so renaming or deleting an ingredient later does not change how
the menu reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from pantry.domain.exceptions import ValidationError


@dataclass(frozen=True)
class MenuIngredientRequirement:
    ingredient_id: str
    quantity: Decimal  # per one unit of menu output
    ingredient_name: str  # snapshot
    unit: str  # snapshot

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValidationError(
                f"Required quantity of {self.ingredient_name} must be positive"
            )


@dataclass
class Menu:
    """Aggregate root for menu items.

    Use the ``Menu.create()`` factory for new menus.  The ``__init__`` is
    intentionally simple so the repository can reconstitute persisted
    menus without re-validating.
    """

    id: int | None
    name: str
    requirements: list[MenuIngredientRequirement]
    description: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        name: str,
        requirements: list[MenuIngredientRequirement],
        description: str = "",
        now: datetime | None = None,
    ) -> Menu:
        if not name or not name.strip():
            raise ValidationError("Menu name is required")
        if not requirements:
            raise ValidationError("Menu must require at least one ingredient")

        menu = Menu(
            id=None,
            name=name.strip(),
            requirements=list(requirements),
            description=(description or "").strip(),
        )
        if now is not None:
            menu.created_at = now
        return menu

    def update_details(
        self,
        name: str | None = None,
        requirements: list[MenuIngredientRequirement] | None = None,
        description: str | None = None,
    ) -> None:
        if name is not None:
            if not name.strip():
                raise ValidationError("Menu name is required")
            self.name = name.strip()
        if requirements is not None:
            if not requirements:
                raise ValidationError("Menu must require at least one ingredient")
            self.requirements = list(requirements)
        if description is not None:
            self.description = description.strip()

    def needed_per_ingredient(self, quantity: int) -> dict[str, Decimal]:
        """Total quantity needed per ingredient id for *quantity* servings.

        Requirements naming the same ingredient twice are summed.
        """
        totals: dict[str, Decimal] = {}
        for req in self.requirements:
            totals[req.ingredient_id] = (
                totals.get(req.ingredient_id, Decimal("0")) + req.quantity * quantity
            )
        return totals

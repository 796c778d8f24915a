"""Application service: Create Menu and List Menus use cases.

Creating or re-specifying a menu are the only places that copy
ingredient name/unit into menu requirements (snapshot).
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from pantry.application.dto import MenuDTO, RequirementSpec, menu_to_dto
from pantry.domain.clock import utc_now
from pantry.domain.exceptions import EntityNotFoundError, ValidationError
from pantry.domain.model.menu import Menu, MenuIngredientRequirement
from pantry.domain.model.value_objects import Quantity
from pantry.domain.repository.unit_of_work import UnitOfWork


class CreateMenuHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow = uow
        self._clock = clock

    def handle(
        self,
        name: str,
        requirement_specs: list[RequirementSpec],
        description: str = "",
    ) -> MenuDTO:
        """Create a menu.

        Steps:
        1. Resolve each requirement's ingredient (fail if not found).
        2. Build requirements with the *current* name and unit (snapshot).
        3. Let the Menu aggregate validate its own rules.
        4. Persist and return a DTO.
        """
        with self._uow as uow:
            requirements = resolve_requirements(uow, requirement_specs)

            menu = Menu.create(
                name=name,
                requirements=requirements,
                description=description,
                now=self._clock(),
            )
            if uow.menus.get_by_name(menu.name) is not None:
                raise ValidationError(f"Menu '{menu.name}' already exists")

            uow.menus.save(menu)
            uow.commit()

        return menu_to_dto(menu)


class ListMenusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[MenuDTO]:
        with self._uow as uow:
            return [menu_to_dto(m) for m in uow.menus.list_all()]


def resolve_requirements(
    uow: UnitOfWork, requirement_specs: list[RequirementSpec]
) -> list[MenuIngredientRequirement]:
    """Look up each ingredient and capture its current name and unit."""
    requirements: list[MenuIngredientRequirement] = []
    for spec in requirement_specs:
        ingredient = uow.ingredients.get_by_id(spec.ingredient_id)
        if ingredient is None:
            raise EntityNotFoundError(f"Ingredient '{spec.ingredient_id}' not found")
        requirements.append(
            MenuIngredientRequirement(
                ingredient_id=ingredient.id,
                quantity=Quantity.of(spec.quantity).value,
                ingredient_name=ingredient.name,  # <-- name snapshot
                unit=ingredient.unit,  # <-- unit snapshot
            )
        )
    return requirements

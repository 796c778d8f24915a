"""Application service: Update, Delete and Cleanup Ingredient use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pantry.application.dto import IngredientDTO, ingredient_to_dto
from pantry.domain.exceptions import EntityNotFoundError, ValidationError
from pantry.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateIngredientHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        ingredient_id: str,
        name: str | None = None,
        unit: str | None = None,
        category: str | None = None,
    ) -> IngredientDTO:
        """Rename or re-label an ingredient.

        This does NOT affect menus or orders — they captured a name/unit
        snapshot when they were saved.
        """
        with self._uow as uow:
            ingredient = uow.ingredients.get_by_id(ingredient_id)
            if ingredient is None:
                raise EntityNotFoundError(f"Ingredient '{ingredient_id}' not found")

            if name is not None:
                existing = uow.ingredients.get_by_name(name.strip())
                if existing is not None and existing.id != ingredient.id:
                    raise ValidationError(f"Ingredient '{name.strip()}' already exists")

            ingredient.update_details(name=name, unit=unit, category=category)
            uow.ingredients.save(ingredient)
            uow.commit()

        return ingredient_to_dto(ingredient)


class DeleteIngredientHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, ingredient_id: str) -> None:
        """Delete an ingredient; orders that used it can still be cancelled."""
        with self._uow as uow:
            ingredient = uow.ingredients.get_by_id(ingredient_id)
            if ingredient is None:
                raise EntityNotFoundError(f"Ingredient '{ingredient_id}' not found")
            uow.ingredients.delete(ingredient_id)
            uow.commit()

        logger.info("Ingredient %s (%s) deleted", ingredient.name, ingredient_id)


@dataclass(frozen=True)
class CleanupResultDTO:
    ingredient_id: str
    ingredient_name: str
    batches_removed: int


class CleanupEmptyBatchesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[CleanupResultDTO]:
        """Prune zero-stock batches left behind by older data."""
        results: list[CleanupResultDTO] = []
        with self._uow as uow:
            for ingredient in uow.ingredients.list_all():
                before = len(ingredient.batches)
                ingredient.normalize()
                removed = before - len(ingredient.batches)
                if removed > 0:
                    uow.ingredients.save(ingredient)
                    results.append(
                        CleanupResultDTO(
                            ingredient_id=ingredient.id,
                            ingredient_name=ingredient.name,
                            batches_removed=removed,
                        )
                    )
            uow.commit()
        return results

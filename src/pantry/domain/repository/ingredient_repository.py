"""Abstract repository for Ingredient aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live in the
infrastructure layer and the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pantry.domain.model.ingredient import Ingredient


class IngredientRepository(ABC):

    @abstractmethod
    def get_by_id(self, ingredient_id: str) -> Ingredient | None:
        """Return an ingredient by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Ingredient | None:
        """Return an ingredient by its name (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Ingredient]:
        """Return every ingredient."""

    @abstractmethod
    def save(self, ingredient: Ingredient) -> None:
        """Persist a new or updated ingredient."""

    @abstractmethod
    def delete(self, ingredient_id: str) -> None:
        """Remove an ingredient and its batches."""

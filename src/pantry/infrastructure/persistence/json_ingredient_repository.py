"""JSON-document-backed implementation of IngredientRepository.

Works on the working copy of a ``JsonUnitOfWork``; nothing reaches the
file until the unit of work commits.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pantry.domain.model.ingredient import Batch, Ingredient
from pantry.domain.repository.ingredient_repository import IngredientRepository
from pantry.infrastructure.persistence.json_store import ChangeSet


class JsonIngredientRepository(IngredientRepository):

    def __init__(self, state: dict, changes: ChangeSet) -> None:
        self._records: list[dict] = state["ingredients"]
        self._changes = changes

    # --- IngredientRepository interface ---------------------------------------

    def get_by_id(self, ingredient_id: str) -> Ingredient | None:
        raw = self._find_raw(ingredient_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_name(self, name: str) -> Ingredient | None:
        for raw in self._records:
            if raw["name"].lower() == name.strip().lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Ingredient]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, ingredient: Ingredient) -> None:
        existing = self._find_raw(ingredient.id)
        baseline = self._changes.ingredients.setdefault(
            ingredient.id,
            existing.get("version", 0) if existing is not None else None,
        )

        ingredient.version = (baseline or 0) + 1
        raw = self._to_raw(ingredient)
        # Upsert: replace if exists, otherwise append
        for i, record in enumerate(self._records):
            if record["id"] == ingredient.id:
                self._records[i] = raw
                return
        self._records.append(raw)

    def delete(self, ingredient_id: str) -> None:
        existing = self._find_raw(ingredient_id)
        if existing is None:
            return
        self._changes.ingredients.setdefault(ingredient_id, existing.get("version", 0))
        self._records.remove(existing)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(ingredient: Ingredient) -> dict:
        return {
            "id": ingredient.id,
            "name": ingredient.name,
            "unit": ingredient.unit,
            "category": ingredient.category,
            "has_received_stock": ingredient.has_received_stock,
            "created_at": ingredient.created_at.isoformat(),
            "version": ingredient.version,
            "batches": [
                {
                    "id": b.id,
                    "initial_quantity": str(b.initial_quantity),
                    "current_quantity": str(b.current_quantity),
                    "expiry_date": b.expiry_date.isoformat(),
                    "entry_date": b.entry_date.isoformat(),
                }
                for b in ingredient.batches
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Ingredient:
        batches = [
            Batch(
                id=b["id"],
                initial_quantity=Decimal(b["initial_quantity"]),
                current_quantity=Decimal(b["current_quantity"]),
                expiry_date=date.fromisoformat(b["expiry_date"]),
                entry_date=datetime.fromisoformat(b["entry_date"]),
            )
            for b in raw.get("batches", [])
        ]
        return Ingredient(
            id=raw["id"],
            name=raw["name"],
            unit=raw["unit"],
            category=raw["category"],
            batches=batches,
            has_received_stock=raw.get("has_received_stock", bool(batches)),
            created_at=datetime.fromisoformat(raw["created_at"]),
            version=raw.get("version", 0),
        )

    def _find_raw(self, ingredient_id: str) -> dict | None:
        for raw in self._records:
            if raw["id"] == ingredient_id:
                return raw
        return None

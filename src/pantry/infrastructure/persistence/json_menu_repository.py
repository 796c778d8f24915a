"""JSON-document-backed implementation of MenuRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pantry.domain.model.menu import Menu, MenuIngredientRequirement
from pantry.domain.repository.menu_repository import MenuRepository
from pantry.infrastructure.persistence.json_store import ChangeSet, next_sequence_value


class JsonMenuRepository(MenuRepository):

    def __init__(self, state: dict, changes: ChangeSet) -> None:
        self._state = state
        self._records: list[dict] = state["menus"]
        self._changes = changes

    # --- MenuRepository interface ---------------------------------------------

    def get_by_id(self, menu_id: int) -> Menu | None:
        for raw in self._records:
            if raw["id"] == menu_id:
                return self._to_domain(raw)
        return None

    def get_by_name(self, name: str) -> Menu | None:
        for raw in self._records:
            if raw["name"].lower() == name.strip().lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Menu]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, menu: Menu) -> None:
        if menu.id is None:
            menu.id = next_sequence_value(self._state, self._changes, "menus")
        self._changes.menus.add(menu.id)

        for i, raw in enumerate(self._records):
            if raw["id"] == menu.id:
                self._records[i] = self._to_raw(menu)
                return
        self._records.append(self._to_raw(menu))

    def delete(self, menu_id: int) -> None:
        for i, raw in enumerate(self._records):
            if raw["id"] == menu_id:
                self._changes.menus.add(menu_id)
                del self._records[i]
                return

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(menu: Menu) -> dict:
        return {
            "id": menu.id,
            "name": menu.name,
            "description": menu.description,
            "created_at": menu.created_at.isoformat(),
            "requirements": [
                {
                    "ingredient_id": req.ingredient_id,
                    "quantity": str(req.quantity),
                    "ingredient_name": req.ingredient_name,
                    "unit": req.unit,
                }
                for req in menu.requirements
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Menu:
        return Menu(
            id=raw["id"],
            name=raw["name"],
            description=raw.get("description", ""),
            created_at=datetime.fromisoformat(raw["created_at"]),
            requirements=[
                MenuIngredientRequirement(
                    ingredient_id=r["ingredient_id"],
                    quantity=Decimal(r["quantity"]),
                    ingredient_name=r["ingredient_name"],
                    unit=r["unit"],
                )
                for r in raw["requirements"]
            ],
        )

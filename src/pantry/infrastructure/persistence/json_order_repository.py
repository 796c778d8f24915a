"""JSON-document-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pantry.domain.model.order import Order, OrderStatus, UsedIngredient
from pantry.domain.repository.order_repository import OrderRepository
from pantry.infrastructure.persistence.json_store import ChangeSet, next_sequence_value


class JsonOrderRepository(OrderRepository):

    def __init__(self, state: dict, changes: ChangeSet) -> None:
        self._state = state
        self._records: list[dict] = state["orders"]
        self._changes = changes

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        raw = self._find_raw(order_id)
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = next_sequence_value(self._state, self._changes, "orders")
        existing = self._find_raw(order.id)
        self._changes.orders.setdefault(order.id, existing is not None)

        # Upsert: replace if exists, otherwise append
        if existing is not None:
            self._records[self._records.index(existing)] = self._to_raw(order)
        else:
            self._records.append(self._to_raw(order))

    def delete(self, order_id: int) -> None:
        existing = self._find_raw(order_id)
        if existing is None:
            return
        self._changes.orders.setdefault(order_id, True)
        self._records.remove(existing)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "menu_id": order.menu_id,
            "menu_name": order.menu_name,
            "quantity": order.quantity,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "ingredients_used": [
                {
                    "ingredient_id": u.ingredient_id,
                    "batch_id": u.batch_id,
                    "quantity_used": str(u.quantity_used),
                    "ingredient_name": u.ingredient_name,
                    "unit": u.unit,
                    "expiry_date": u.expiry_date.isoformat() if u.expiry_date else None,
                }
                for u in order.ingredients_used
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        used = [
            UsedIngredient(
                ingredient_id=u["ingredient_id"],
                batch_id=u["batch_id"],
                quantity_used=Decimal(u["quantity_used"]),
                ingredient_name=u.get("ingredient_name", ""),
                unit=u.get("unit", ""),
                expiry_date=date.fromisoformat(u["expiry_date"]) if u.get("expiry_date") else None,
            )
            for u in raw["ingredients_used"]
        ]
        return Order(
            id=raw["id"],
            menu_id=raw["menu_id"],
            menu_name=raw["menu_name"],
            quantity=raw["quantity"],
            ingredients_used=used,
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    def _find_raw(self, order_id: int) -> dict | None:
        for raw in self._records:
            if raw["id"] == order_id:
                return raw
        return None

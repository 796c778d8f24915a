"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals (or their mutability) to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from pantry.domain.model.ingredient import Batch, Ingredient
from pantry.domain.model.menu import Menu
from pantry.domain.model.order import Order
from pantry.domain.model.stock_history import StockHistoryEntry


@dataclass(frozen=True)
class RequirementSpec:
    """Input: how much of an ingredient one serving of a menu needs."""

    ingredient_id: str
    quantity: str | int | float | Decimal


@dataclass(frozen=True)
class BatchDTO:
    id: str
    initial_quantity: Decimal
    current_quantity: Decimal
    expiry_date: date
    entry_date: datetime


@dataclass(frozen=True)
class IngredientDTO:
    id: str
    name: str
    unit: str
    category: str
    total_quantity: Decimal
    batches: list[BatchDTO]


@dataclass(frozen=True)
class RequirementDTO:
    ingredient_id: str
    ingredient_name: str
    quantity: Decimal
    unit: str


@dataclass(frozen=True)
class MenuDTO:
    id: int
    name: str
    description: str
    requirements: list[RequirementDTO]


@dataclass(frozen=True)
class UsedIngredientDTO:
    ingredient_id: str
    ingredient_name: str
    batch_id: str
    quantity_used: Decimal
    unit: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    menu_id: int
    menu_name: str
    quantity: int
    status: str
    ingredients_used: list[UsedIngredientDTO]
    created_at: datetime


@dataclass(frozen=True)
class StockHistoryDTO:
    type: str
    ingredient_id: str
    ingredient_name: str
    batch_id: str
    quantity: Decimal
    previous_stock: Decimal
    new_stock: Decimal
    reason: str
    reference_id: int | None
    timestamp: datetime


# --- Mapping ------------------------------------------------------------------


def batch_to_dto(batch: Batch) -> BatchDTO:
    return BatchDTO(
        id=batch.id,
        initial_quantity=batch.initial_quantity,
        current_quantity=batch.current_quantity,
        expiry_date=batch.expiry_date,
        entry_date=batch.entry_date,
    )


def ingredient_to_dto(ingredient: Ingredient) -> IngredientDTO:
    return IngredientDTO(
        id=ingredient.id,
        name=ingredient.name,
        unit=ingredient.unit,
        category=ingredient.category,
        total_quantity=ingredient.total_quantity,
        batches=[batch_to_dto(b) for b in ingredient.batches],
    )


def menu_to_dto(menu: Menu) -> MenuDTO:
    return MenuDTO(
        id=menu.id,  # type: ignore[arg-type]
        name=menu.name,
        description=menu.description,
        requirements=[
            RequirementDTO(
                ingredient_id=req.ingredient_id,
                ingredient_name=req.ingredient_name,
                quantity=req.quantity,
                unit=req.unit,
            )
            for req in menu.requirements
        ],
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        menu_id=order.menu_id,
        menu_name=order.menu_name,
        quantity=order.quantity,
        status=order.status.value,
        ingredients_used=[
            UsedIngredientDTO(
                ingredient_id=u.ingredient_id,
                ingredient_name=u.ingredient_name,
                batch_id=u.batch_id,
                quantity_used=u.quantity_used,
                unit=u.unit,
            )
            for u in order.ingredients_used
        ],
        created_at=order.created_at,
    )


def history_to_dto(entry: StockHistoryEntry) -> StockHistoryDTO:
    return StockHistoryDTO(
        type=entry.type.value,
        ingredient_id=entry.ingredient_id,
        ingredient_name=entry.ingredient_name,
        batch_id=entry.batch_id,
        quantity=entry.quantity,
        previous_stock=entry.previous_stock,
        new_stock=entry.new_stock,
        reason=entry.reason.value,
        reference_id=entry.reference_id,
        timestamp=entry.timestamp,
    )

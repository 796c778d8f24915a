"""Builders for the ingredients and menus most tests start from."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pantry.domain.model.ingredient import Batch, Ingredient
from pantry.domain.model.menu import Menu, MenuIngredientRequirement
from tests.fakes import FIXED_NOW, FakeUnitOfWork


def make_batch(batch_id: str, qty: str, expiry: date) -> Batch:
    return Batch(batch_id, Decimal(qty), Decimal(qty), expiry, FIXED_NOW)


def make_flour() -> Ingredient:
    """Flour with [(5, 2024-01-10), (10, 2024-01-20)]."""
    return Ingredient(
        id="flour", name="Flour", unit="kg", category="Dry goods",
        batches=[
            make_batch("b1", "5", date(2024, 1, 10)),
            make_batch("b2", "10", date(2024, 1, 20)),
        ],
        has_received_stock=True,
    )


def make_eggs(qty: str = "6") -> Ingredient:
    return Ingredient(
        id="eggs", name="Eggs", unit="pcs", category="Dairy",
        batches=[make_batch("e1", qty, date(2024, 1, 8))],
        has_received_stock=True,
    )


def make_pancakes() -> Menu:
    """Menu #1: 4 kg flour and 2 eggs per serving."""
    return Menu(
        id=1,
        name="Pancakes",
        requirements=[
            MenuIngredientRequirement("flour", Decimal("4"), "Flour", "kg"),
            MenuIngredientRequirement("eggs", Decimal("2"), "Eggs", "pcs"),
        ],
        created_at=FIXED_NOW,
    )


def make_uow() -> FakeUnitOfWork:
    return FakeUnitOfWork(
        ingredients=[make_flour(), make_eggs()],
        menus=[make_pancakes()],
    )

"""Unit tests for the Menu and Order aggregates."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from pantry.domain.exceptions import ValidationError
from pantry.domain.model.menu import Menu, MenuIngredientRequirement
from pantry.domain.model.order import (
    Order,
    OrderStatus,
    UsedIngredient,
    validate_order_quantity,
)

NOW = datetime(2024, 1, 5, 9, 30, tzinfo=timezone.utc)


def _req(ingredient_id: str, qty: str, name: str = "X") -> MenuIngredientRequirement:
    return MenuIngredientRequirement(ingredient_id, Decimal(qty), name, "kg")


def _used(ingredient_id: str, batch_id: str, qty: str) -> UsedIngredient:
    return UsedIngredient(
        ingredient_id=ingredient_id,
        batch_id=batch_id,
        quantity_used=Decimal(qty),
        ingredient_name=ingredient_id.title(),
        unit="kg",
        expiry_date=date(2024, 1, 10),
    )


class TestMenu:

    def test_create(self):
        menu = Menu.create(" Bread ", [_req("flour", "0.5")], " Daily loaf ", now=NOW)
        assert menu.id is None
        assert menu.name == "Bread"
        assert menu.description == "Daily loaf"
        assert menu.created_at == NOW

    def test_name_required(self):
        with pytest.raises(ValidationError, match="Menu name is required"):
            Menu.create("", [_req("flour", "1")])

    def test_requirements_required(self):
        with pytest.raises(ValidationError, match="at least one ingredient"):
            Menu.create("Bread", [])

    def test_requirement_quantity_must_be_positive(self):
        with pytest.raises(ValidationError, match="Flour must be positive"):
            _req("flour", "0", name="Flour")

    def test_needed_per_ingredient_scales_by_servings(self):
        menu = Menu.create("Bread", [_req("flour", "0.5"), _req("yeast", "0.01")])
        assert menu.needed_per_ingredient(4) == {
            "flour": Decimal("2.0"),
            "yeast": Decimal("0.04"),
        }

    def test_needed_per_ingredient_sums_duplicates(self):
        menu = Menu.create("Bread", [_req("flour", "1"), _req("flour", "0.5")])
        assert menu.needed_per_ingredient(2) == {"flour": Decimal("3.0")}


class TestOrder:

    def test_create_is_completed(self):
        order = Order.create(1, "Bread", 2, [_used("flour", "b1", "1")], now=NOW)
        assert order.id is None
        assert order.status == OrderStatus.COMPLETED
        assert order.created_at == NOW

    def test_create_requires_used_batches(self):
        with pytest.raises(ValidationError, match="at least one ingredient batch"):
            Order.create(1, "Bread", 2, [])

    @pytest.mark.parametrize("bad", [0, -1])
    def test_non_positive_quantity_rejected(self, bad):
        with pytest.raises(ValidationError, match="must be positive"):
            Order.create(1, "Bread", bad, [_used("flour", "b1", "1")])

    @pytest.mark.parametrize("bad", [1.5, "2", True])
    def test_non_integer_quantity_rejected(self, bad):
        with pytest.raises(ValidationError, match="must be an integer"):
            validate_order_quantity(bad)

    def test_only_completed_orders_exist(self):
        assert [s.value for s in OrderStatus] == ["completed"]
        assert not hasattr(Order, "cancel")

    def test_total_used(self):
        order = Order.create(
            1, "Bread", 1,
            [_used("flour", "b1", "5"), _used("flour", "b2", "7"), _used("salt", "s1", "1")],
        )
        assert order.total_used("flour") == Decimal("12")
        assert order.total_used("sugar") == Decimal("0")

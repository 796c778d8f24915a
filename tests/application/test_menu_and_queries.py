"""Integration tests for menus and the read-only query use cases."""

from datetime import date
from decimal import Decimal

import pytest

from pantry.application.add_stock import AddStockHandler
from pantry.application.create_menu import CreateMenuHandler, ListMenusHandler
from pantry.application.dto import RequirementSpec
from pantry.application.fulfill_order import FulfillOrderHandler
from pantry.application.show_alerts import ShowAlertsHandler
from pantry.application.show_ingredient import ListIngredientsHandler, ShowIngredientHandler
from pantry.application.show_order import ListOrdersHandler, ShowOrderHandler
from pantry.application.stock_history import StockHistoryHandler
from pantry.application.update_ingredient import UpdateIngredientHandler
from pantry.application.update_menu import (
    DeleteMenuHandler,
    ShowMenuHandler,
    UpdateMenuHandler,
)
from pantry.domain.exceptions import EntityNotFoundError, ValidationError
from pantry.domain.model.ingredient import Ingredient
from pantry.domain.model.menu import Menu, MenuIngredientRequirement
from tests.factories import make_batch, make_eggs, make_flour, make_uow
from tests.fakes import FakeUnitOfWork, fixed_clock


class TestCreateMenu:

    def test_create_snapshots_ingredients(self):
        uow = FakeUnitOfWork(ingredients=[make_flour(), make_eggs()])

        dto = CreateMenuHandler(uow, fixed_clock).handle(
            "Crepes",
            [RequirementSpec("flour", "0.25"), RequirementSpec("eggs", 1)],
            description="Thin",
        )

        assert dto.id == 1
        assert [(r.ingredient_name, r.quantity, r.unit) for r in dto.requirements] == [
            ("Flour", Decimal("0.25"), "kg"),
            ("Eggs", Decimal("1"), "pcs"),
        ]
        assert uow.menus.get_by_id(1).description == "Thin"

    def test_unknown_ingredient_rejected(self):
        uow = make_uow()
        with pytest.raises(EntityNotFoundError, match="'saffron' not found"):
            CreateMenuHandler(uow, fixed_clock).handle("Paella", [RequirementSpec("saffron", 1)])

    def test_duplicate_name_rejected(self):
        uow = make_uow()
        with pytest.raises(ValidationError, match="'pancakes' already exists"):
            CreateMenuHandler(uow, fixed_clock).handle("pancakes", [RequirementSpec("flour", 1)])

    def test_zero_requirement_rejected(self):
        uow = make_uow()
        with pytest.raises(ValidationError, match="must be positive"):
            CreateMenuHandler(uow, fixed_clock).handle("Toast", [RequirementSpec("flour", "0")])
        assert len(uow.menus.list_all()) == 1

    def test_list_menus(self):
        menus = ListMenusHandler(make_uow()).handle()
        assert [m.name for m in menus] == ["Pancakes"]



class TestUpdateMenu:

    def test_rename_and_describe(self):
        uow = make_uow()

        dto = UpdateMenuHandler(uow).handle(1, name=" Crepes ", description="Thin")

        assert (dto.name, dto.description) == ("Crepes", "Thin")
        assert uow.menus.get_by_id(1).name == "Crepes"
        assert len(dto.requirements) == 2

    def test_new_requirements_take_fresh_snapshot(self):
        uow = make_uow()
        UpdateIngredientHandler(uow).handle("flour", name="Wheat Flour", unit="g")

        dto = UpdateMenuHandler(uow).handle(1, requirement_specs=[RequirementSpec("flour", "250")])

        assert [(r.ingredient_name, r.quantity, r.unit) for r in dto.requirements] == [
            ("Wheat Flour", Decimal("250"), "g"),
        ]

    def test_name_only_keeps_existing_snapshot(self):
        uow = make_uow()
        UpdateIngredientHandler(uow).handle("flour", name="Wheat Flour")

        dto = UpdateMenuHandler(uow).handle(1, name="Hotcakes")

        assert dto.requirements[0].ingredient_name == "Flour"

    def test_duplicate_name_rejected(self):
        uow = make_uow()
        CreateMenuHandler(uow, fixed_clock).handle("Toast", [RequirementSpec("flour", 1)])

        with pytest.raises(ValidationError, match="'toast' already exists"):
            UpdateMenuHandler(uow).handle(1, name="toast")
        assert uow.menus.get_by_id(1).name == "Pancakes"

    def test_keeping_own_name_is_allowed(self):
        uow = make_uow()
        dto = UpdateMenuHandler(uow).handle(1, name="PANCAKES")
        assert dto.name == "PANCAKES"

    def test_unknown_ingredient_rejected(self):
        uow = make_uow()
        with pytest.raises(EntityNotFoundError, match="'saffron' not found"):
            UpdateMenuHandler(uow).handle(1, requirement_specs=[RequirementSpec("saffron", 1)])
        assert len(uow.menus.get_by_id(1).requirements) == 2

    def test_empty_requirements_rejected(self):
        uow = make_uow()
        with pytest.raises(ValidationError, match="at least one ingredient"):
            UpdateMenuHandler(uow).handle(1, requirement_specs=[])

    def test_unknown_menu(self):
        with pytest.raises(EntityNotFoundError, match="Menu #9 not found"):
            UpdateMenuHandler(make_uow()).handle(9, name="Soup")

    def test_orders_keep_menu_name_after_rename(self):
        uow = make_uow()
        order = FulfillOrderHandler(uow, fixed_clock).handle(1, 1)

        UpdateMenuHandler(uow).handle(1, name="Hotcakes")

        assert ShowOrderHandler(uow).handle(order.id).menu_name == "Pancakes"


class TestDeleteAndShowMenu:

    def test_show(self):
        dto = ShowMenuHandler(make_uow()).handle(1)
        assert dto.name == "Pancakes"
        assert [r.ingredient_id for r in dto.requirements] == ["flour", "eggs"]

    def test_show_unknown(self):
        with pytest.raises(EntityNotFoundError, match="Menu #4 not found"):
            ShowMenuHandler(make_uow()).handle(4)

    def test_delete(self):
        uow = make_uow()

        DeleteMenuHandler(uow).handle(1)

        assert uow.menus.get_by_id(1) is None
        assert ListMenusHandler(uow).handle() == []

    def test_delete_unknown(self):
        with pytest.raises(EntityNotFoundError, match="Menu #2 not found"):
            DeleteMenuHandler(make_uow()).handle(2)

    def test_orders_survive_menu_deletion(self):
        uow = make_uow()
        order = FulfillOrderHandler(uow, fixed_clock).handle(1, 1)

        DeleteMenuHandler(uow).handle(1)

        shown = ShowOrderHandler(uow).handle(order.id)
        assert (shown.menu_id, shown.menu_name) == (1, "Pancakes")
        with pytest.raises(EntityNotFoundError, match="Menu #1 not found"):
            FulfillOrderHandler(uow, fixed_clock).handle(1, 1)

class TestStockHistoryQuery:

    def _uow_with_history(self):
        uow = make_uow()
        AddStockHandler(uow, fixed_clock).handle("eggs", 12, "2024-01-12")
        FulfillOrderHandler(uow, fixed_clock).handle(1, 1)
        return uow

    def test_newest_first(self):
        entries = StockHistoryHandler(self._uow_with_history()).handle()
        assert [e.reason for e in entries] == ["order", "order", "new_batch"]

    def test_filter_by_type(self):
        entries = StockHistoryHandler(self._uow_with_history()).handle(type="IN")
        assert [(e.ingredient_id, e.type) for e in entries] == [("eggs", "in")]

    def test_filter_by_ingredient(self):
        entries = StockHistoryHandler(self._uow_with_history()).handle(ingredient_id="flour")
        assert [(e.batch_id, e.quantity, e.reference_id) for e in entries] == [
            ("b1", Decimal("4"), 1),
        ]

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError, match="Unknown history type"):
            StockHistoryHandler(make_uow()).handle(type="sideways")


class TestShowAlerts:

    def _uow(self):
        stale = Ingredient(
            id="milk", name="Milk", unit="l", category="Dairy",
            batches=[make_batch("m1", "2", date(2024, 1, 3))],
            has_received_stock=True,
        )
        empty = Ingredient(id="salt", name="Salt", unit="kg", category="Dry")
        return FakeUnitOfWork(ingredients=[make_flour(), make_eggs(), stale, empty])

    def test_expiring_and_expired(self):
        dto = ShowAlertsHandler(self._uow(), expiry_window_days=7).handle(today=date(2024, 1, 5))

        assert [(a.ingredient_id, a.expiry_date) for a in dto.expiring_soon] == [
            ("eggs", date(2024, 1, 8)),
            ("flour", date(2024, 1, 10)),
        ]
        assert [(a.ingredient_id, a.quantity) for a in dto.expired] == [("milk", Decimal("2"))]

    def test_window_boundary_is_inclusive(self):
        dto = ShowAlertsHandler(self._uow(), expiry_window_days=5).handle(today=date(2024, 1, 5))
        assert [a.expiry_date for a in dto.expiring_soon] == [date(2024, 1, 8), date(2024, 1, 10)]

    def test_low_stock_skips_empty_ingredients(self):
        dto = ShowAlertsHandler(self._uow(), low_stock_threshold=10).handle(today=date(2024, 1, 5))
        assert sorted(a.ingredient_id for a in dto.low_stock) == ["eggs", "milk"]

    def test_defaults_to_clock_date(self):
        dto = ShowAlertsHandler(self._uow(), clock=fixed_clock).handle()
        assert [a.ingredient_id for a in dto.expired] == ["milk"]


class TestShowIngredient:

    def _uow(self):
        flour = make_flour()
        flour.batches.insert(0, make_batch("b0", "0", date(2024, 1, 1)))
        return FakeUnitOfWork(ingredients=[flour, make_eggs()])

    def test_list_batches_hides_empty(self):
        batches = ShowIngredientHandler(self._uow()).list_batches("flour")
        assert [b.id for b in batches] == ["b1", "b2"]

    def test_total_quantity(self):
        assert ShowIngredientHandler(self._uow()).total_quantity("flour") == Decimal("15")

    def test_show_unknown_rejected(self):
        with pytest.raises(EntityNotFoundError):
            ShowIngredientHandler(self._uow()).handle("nope")

    def test_list_ingredients(self):
        dtos = ListIngredientsHandler(self._uow()).handle()
        assert [(d.name, d.total_quantity) for d in dtos] == [
            ("Flour", Decimal("15")),
            ("Eggs", Decimal("6")),
        ]


class TestShowOrder:

    def test_show_and_list(self):
        uow = make_uow()
        FulfillOrderHandler(uow, fixed_clock).handle(1, 1)

        dto = ShowOrderHandler(uow).handle(1)
        assert dto.menu_name == "Pancakes"
        assert [o.id for o in ListOrdersHandler(uow).handle()] == [1]

    def test_show_unknown_rejected(self):
        with pytest.raises(EntityNotFoundError, match="Order #3 not found"):
            ShowOrderHandler(make_uow()).handle(3)

    def test_menu_snapshot_survives_rename(self):
        menu = Menu(
            id=1, name="Toast",
            requirements=[MenuIngredientRequirement("flour", Decimal("1"), "Old flour", "kg")],
        )
        uow = FakeUnitOfWork(ingredients=[make_flour()], menus=[menu])

        dto = FulfillOrderHandler(uow, fixed_clock).handle(1, 1)

        assert dto.ingredients_used[0].ingredient_name == "Flour"
        assert ListMenusHandler(uow).handle()[0].requirements[0].ingredient_name == "Old flour"

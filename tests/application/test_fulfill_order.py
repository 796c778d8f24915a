"""Integration tests for the FulfillOrder use case."""

from datetime import date
from decimal import Decimal

import pytest

from pantry.application.fulfill_order import FulfillOrderHandler
from pantry.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from pantry.domain.model.order import OrderStatus
from pantry.domain.model.value_objects import MovementType, StockReason
from tests.factories import make_eggs, make_flour, make_pancakes, make_uow
from tests.fakes import FIXED_NOW, FakeUnitOfWork, fixed_clock


class TestFulfillOrderHappyPath:

    def test_fulfill_deducts_fifo(self):
        uow = make_uow()
        dto = FulfillOrderHandler(uow, fixed_clock).handle(1, 3)

        assert dto.id == 1
        assert dto.status == "completed"
        assert dto.menu_name == "Pancakes"
        assert dto.created_at == FIXED_NOW
        assert [(u.ingredient_id, u.batch_id, u.quantity_used) for u in dto.ingredients_used] == [
            ("flour", "b1", Decimal("5")),
            ("flour", "b2", Decimal("7")),
            ("eggs", "e1", Decimal("6")),
        ]

        flour = uow.ingredients.get_by_id("flour")
        assert [(b.id, b.current_quantity) for b in flour.batches] == [("b2", Decimal("3"))]
        assert uow.ingredients.get_by_id("eggs").total_quantity == Decimal("0")
        assert uow.commits == 1

    def test_order_is_persisted_with_expiry_snapshots(self):
        uow = make_uow()
        FulfillOrderHandler(uow, fixed_clock).handle(1, 3)

        order = uow.orders.get_by_id(1)
        assert order.status == OrderStatus.COMPLETED
        assert order.quantity == 3
        assert order.ingredients_used[0].expiry_date == date(2024, 1, 10)
        assert order.total_used("flour") == Decimal("12")

    def test_history_entry_per_batch(self):
        uow = make_uow()
        FulfillOrderHandler(uow, fixed_clock).handle(1, 3)

        entries = uow.history.entries
        assert [(e.ingredient_id, e.batch_id, e.quantity) for e in entries] == [
            ("flour", "b1", Decimal("5")),
            ("flour", "b2", Decimal("7")),
            ("eggs", "e1", Decimal("6")),
        ]
        assert all(e.type == MovementType.OUT for e in entries)
        assert all(e.reason == StockReason.ORDER for e in entries)
        assert all(e.reference_id == 1 for e in entries)

    def test_order_ids_increase(self):
        uow = make_uow()
        first = FulfillOrderHandler(uow, fixed_clock).handle(1, 1)
        second = FulfillOrderHandler(uow, fixed_clock).handle(1, 1)
        assert (first.id, second.id) == (1, 2)


class TestFulfillOrderValidation:

    def test_insufficient_second_ingredient_changes_nothing(self):
        """Scenario E: flour would suffice, eggs do not."""
        uow = FakeUnitOfWork(
            ingredients=[make_flour(), make_eggs("1")],
            menus=[make_pancakes()],
        )

        with pytest.raises(InsufficientStockError, match="Eggs") as exc_info:
            FulfillOrderHandler(uow, fixed_clock).handle(1, 1)

        assert exc_info.value.needed == Decimal("2")
        assert exc_info.value.available == Decimal("1")
        assert uow.ingredients.get_by_id("flour").total_quantity == Decimal("15")
        assert uow.ingredients.get_by_id("eggs").total_quantity == Decimal("1")
        assert uow.orders.list_all() == []
        assert uow.history.entries == []
        assert uow.commits == 0

    def test_unknown_menu_rejected(self):
        uow = make_uow()
        with pytest.raises(EntityNotFoundError, match="Menu #99 not found"):
            FulfillOrderHandler(uow, fixed_clock).handle(99, 1)

    @pytest.mark.parametrize("bad", [0, -2])
    def test_non_positive_quantity_rejected(self, bad):
        uow = make_uow()
        with pytest.raises(ValidationError, match="must be positive"):
            FulfillOrderHandler(uow, fixed_clock).handle(1, bad)
        assert uow.commits == 0

    def test_deleted_ingredient_rejected(self):
        uow = FakeUnitOfWork(ingredients=[make_flour()], menus=[make_pancakes()])

        with pytest.raises(EntityNotFoundError, match="Eggs"):
            FulfillOrderHandler(uow, fixed_clock).handle(1, 1)
        assert uow.ingredients.get_by_id("flour").total_quantity == Decimal("15")


class TestFulfillOrderConcurrency:

    def test_concurrent_change_to_ingredient_conflicts(self):
        uow = make_uow()
        def racing_clock():
            # Another request commits a change to flour mid-transaction.
            uow.bump_committed_version("flour")
            return FIXED_NOW

        with pytest.raises(ConflictError, match="modified concurrently"):
            FulfillOrderHandler(uow, racing_clock).handle(1, 1)

        assert uow.ingredients.get_by_id("flour").total_quantity == Decimal("15")
        assert uow.orders.list_all() == []
        assert uow.history.entries == []

"""Application service: Show Order and List Orders use cases (queries)."""

from __future__ import annotations

from pantry.application.dto import OrderDTO, order_to_dto
from pantry.domain.exceptions import EntityNotFoundError
from pantry.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            return order_to_dto(order)


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[OrderDTO]:
        with self._uow as uow:
            return [order_to_dto(o) for o in uow.orders.list_all()]

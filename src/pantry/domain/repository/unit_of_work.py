"""Abstract Unit of Work — the transaction scope of one use case.

Repositories reached through a unit of work hand out working copies.
Nothing becomes visible outside the scope until ``commit()``; leaving
the ``with`` block without committing (including by an exception)
discards every staged change.

    with uow:
        ingredient = uow.ingredients.get_by_id(...)
        ...
        uow.commit()
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pantry.domain.repository.ingredient_repository import IngredientRepository
from pantry.domain.repository.menu_repository import MenuRepository
from pantry.domain.repository.order_repository import OrderRepository
from pantry.domain.repository.stock_history_repository import StockHistoryRepository


class UnitOfWork(ABC):

    ingredients: IngredientRepository
    menus: MenuRepository
    orders: OrderRepository
    history: StockHistoryRepository

    def __enter__(self) -> UnitOfWork:
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # A committed scope has nothing left to roll back.
        self.rollback()

    @abstractmethod
    def begin(self) -> None:
        """Open a fresh scope with clean working copies."""

    @abstractmethod
    def commit(self) -> None:
        """Publish every staged change atomically.

        Raises ConflictError if an ingredient changed since it was loaded
        or the store could not be locked in time.
        """

    @abstractmethod
    def rollback(self) -> None:
        """Discard every change staged since ``begin()`` or ``commit()``."""

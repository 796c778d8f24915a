"""JSON-file-backed implementation of UnitOfWork.

``begin()`` reads the whole document into a private working copy that
the repositories mutate.  ``commit()`` takes the store lock, re-reads
the file, checks that every ingredient written in this scope still has
the version it had when first read (optimistic concurrency), merges the
staged changes into the fresh document and replaces the file in one
atomic step.  A conflict aborts the commit with nothing written.
"""

from __future__ import annotations

import logging

from pantry.domain.exceptions import ConflictError
from pantry.domain.repository.unit_of_work import UnitOfWork
from pantry.infrastructure.persistence.json_ingredient_repository import (
    JsonIngredientRepository,
)
from pantry.infrastructure.persistence.json_menu_repository import JsonMenuRepository
from pantry.infrastructure.persistence.json_order_repository import JsonOrderRepository
from pantry.infrastructure.persistence.json_stock_history_repository import (
    JsonStockHistoryRepository,
)
from pantry.infrastructure.persistence.json_store import ChangeSet, JsonStore

logger = logging.getLogger(__name__)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, store: JsonStore) -> None:
        self._store = store
        self._state: dict | None = None
        self._changes = ChangeSet()
        self._history_base = 0

    # --- UnitOfWork interface -------------------------------------------------

    def begin(self) -> None:
        self._state = self._store.load()
        self._changes = ChangeSet()
        self._history_base = len(self._state["stock_history"])

        self.ingredients = JsonIngredientRepository(self._state, self._changes)
        self.menus = JsonMenuRepository(self._state, self._changes)
        self.orders = JsonOrderRepository(self._state, self._changes)
        self.history = JsonStockHistoryRepository(self._state, self._changes)

    def commit(self) -> None:
        if self._state is None:
            raise RuntimeError("commit() called outside of a unit of work scope")
        if self._changes.is_empty:
            self._discard()
            return

        with self._store.lock():
            current = self._store.load()
            self._check_conflicts(current)
            self._merge_into(current)
            self._store.write(current)

        logger.debug(
            "Committed %d ingredient(s), %d order(s), %d history entr(ies) to %s",
            len(self._changes.ingredients), len(self._changes.orders),
            self._changes.history_appended, self._store.file_path,
        )
        self._discard()

    def rollback(self) -> None:
        self._discard()

    # --- Commit helpers -------------------------------------------------------

    def _check_conflicts(self, current: dict) -> None:
        for ingredient_id, seen in self._changes.ingredients.items():
            raw = _find(current["ingredients"], ingredient_id)
            stored = raw.get("version", 0) if raw is not None else None
            if stored != seen:
                name = raw["name"] if raw is not None else ingredient_id
                logger.warning(
                    "Version conflict on ingredient %s: read %s, store has %s",
                    ingredient_id, seen, stored,
                )
                raise ConflictError(
                    f"Ingredient '{name}' was modified concurrently, please retry"
                )

        for order_id, existed in self._changes.orders.items():
            if (_find(current["orders"], order_id) is not None) != existed:
                raise ConflictError(
                    f"Order #{order_id} was modified concurrently, please retry"
                )

        for name, seen in self._changes.sequences.items():
            if current["sequences"][name] != seen:
                raise ConflictError(
                    f"Another {name[:-1]} was created concurrently, please retry"
                )

    def _merge_into(self, current: dict) -> None:
        if self._state is None:
            raise RuntimeError("commit() called outside of a unit of work scope")
        state = self._state

        for ingredient_id in self._changes.ingredients:
            _replace(current["ingredients"], ingredient_id, _find(state["ingredients"], ingredient_id))
        for menu_id in self._changes.menus:
            _replace(current["menus"], menu_id, _find(state["menus"], menu_id))
        for order_id in self._changes.orders:
            _replace(current["orders"], order_id, _find(state["orders"], order_id))

        current["stock_history"].extend(state["stock_history"][self._history_base:])
        for name in self._changes.sequences:
            current["sequences"][name] = state["sequences"][name]

    def _discard(self) -> None:
        self._state = None
        self._changes = ChangeSet()
        self._history_base = 0


def _find(records: list[dict], record_id) -> dict | None:
    for raw in records:
        if raw["id"] == record_id:
            return raw
    return None


def _replace(records: list[dict], record_id, new: dict | None) -> None:
    """Upsert *new* into *records*, or remove the record when *new* is None."""
    for i, raw in enumerate(records):
        if raw["id"] == record_id:
            if new is None:
                del records[i]
            else:
                records[i] = new
            return
    if new is not None:
        records.append(new)

"""Application service: Stock History use case (query)."""

from __future__ import annotations

from pantry.application.dto import StockHistoryDTO, history_to_dto
from pantry.domain.exceptions import ValidationError
from pantry.domain.model.value_objects import MovementType
from pantry.domain.repository.unit_of_work import UnitOfWork


class StockHistoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        ingredient_id: str | None = None,
        type: str | None = None,
    ) -> list[StockHistoryDTO]:
        """Return history entries, newest first, optionally filtered."""
        movement_type = None
        if type is not None:
            try:
                movement_type = MovementType(type.lower())
            except ValueError as exc:
                raise ValidationError(
                    f"Unknown history type {type!r}, expected 'in' or 'out'"
                ) from exc

        with self._uow as uow:
            entries = uow.history.find(ingredient_id=ingredient_id, type=movement_type)
        return [history_to_dto(e) for e in reversed(entries)]

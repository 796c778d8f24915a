"""Application service: Show Alerts use case (query).

A read-side projection computed on demand from the ledger: batches
about to expire, batches already past expiry, and ingredients running
low.  Nothing is stored.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal

from pantry.domain.clock import utc_now
from pantry.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class ExpiryAlertDTO:
    ingredient_id: str
    ingredient_name: str
    unit: str
    category: str
    expiry_date: date
    quantity: Decimal


@dataclass(frozen=True)
class LowStockAlertDTO:
    ingredient_id: str
    ingredient_name: str
    unit: str
    category: str
    total_quantity: Decimal


@dataclass(frozen=True)
class AlertsDTO:
    expiring_soon: list[ExpiryAlertDTO]
    expired: list[ExpiryAlertDTO]
    low_stock: list[LowStockAlertDTO]


class ShowAlertsHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        expiry_window_days: int = 7,
        low_stock_threshold: Decimal | int = 10,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow = uow
        self._window = timedelta(days=expiry_window_days)
        self._threshold = Decimal(str(low_stock_threshold))
        self._clock = clock

    def handle(self, today: date | None = None) -> AlertsDTO:
        today = today or self._clock().date()
        horizon = today + self._window

        expiring: list[ExpiryAlertDTO] = []
        expired: list[ExpiryAlertDTO] = []
        low: list[LowStockAlertDTO] = []

        with self._uow as uow:
            for ingredient in uow.ingredients.list_all():
                ingredient.normalize()
                for batch in ingredient.batches:
                    alert = ExpiryAlertDTO(
                        ingredient_id=ingredient.id,
                        ingredient_name=ingredient.name,
                        unit=ingredient.unit,
                        category=ingredient.category,
                        expiry_date=batch.expiry_date,
                        quantity=batch.current_quantity,
                    )
                    if batch.expiry_date < today:
                        expired.append(alert)
                    elif batch.expiry_date <= horizon:
                        expiring.append(alert)

                total = ingredient.total_quantity
                if 0 < total < self._threshold:
                    low.append(
                        LowStockAlertDTO(
                            ingredient_id=ingredient.id,
                            ingredient_name=ingredient.name,
                            unit=ingredient.unit,
                            category=ingredient.category,
                            total_quantity=total,
                        )
                    )

        expiring.sort(key=lambda a: a.expiry_date)
        expired.sort(key=lambda a: a.expiry_date)
        return AlertsDTO(expiring_soon=expiring, expired=expired, low_stock=low)

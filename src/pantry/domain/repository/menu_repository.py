"""Abstract repository for Menu aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pantry.domain.model.menu import Menu


class MenuRepository(ABC):

    @abstractmethod
    def get_by_id(self, menu_id: int) -> Menu | None:
        """Return a menu by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Menu | None:
        """Return a menu by its name (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Menu]:
        """Return every menu."""

    @abstractmethod
    def save(self, menu: Menu) -> None:
        """Persist a new or updated menu, assigning an ID if needed."""

    @abstractmethod
    def delete(self, menu_id: int) -> None:
        """Remove a menu; no-op if it does not exist."""

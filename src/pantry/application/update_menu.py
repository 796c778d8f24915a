"""Application service: Update, Delete and Show Menu use cases."""

from __future__ import annotations

import logging

from pantry.application.create_menu import resolve_requirements
from pantry.application.dto import MenuDTO, RequirementSpec, menu_to_dto
from pantry.domain.exceptions import EntityNotFoundError, ValidationError
from pantry.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateMenuHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        menu_id: int,
        name: str | None = None,
        requirement_specs: list[RequirementSpec] | None = None,
        description: str | None = None,
    ) -> MenuDTO:
        """Rename, re-describe or re-specify a menu.

        New requirements take a fresh name/unit snapshot of their
        ingredients.  Orders already placed keep the menu name they
        recorded.
        """
        with self._uow as uow:
            menu = uow.menus.get_by_id(menu_id)
            if menu is None:
                raise EntityNotFoundError(f"Menu #{menu_id} not found")

            if name is not None:
                existing = uow.menus.get_by_name(name.strip())
                if existing is not None and existing.id != menu.id:
                    raise ValidationError(f"Menu '{name.strip()}' already exists")

            requirements = None
            if requirement_specs is not None:
                requirements = resolve_requirements(uow, requirement_specs)

            menu.update_details(
                name=name, requirements=requirements, description=description
            )
            uow.menus.save(menu)
            uow.commit()

        return menu_to_dto(menu)


class DeleteMenuHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, menu_id: int) -> None:
        with self._uow as uow:
            menu = uow.menus.get_by_id(menu_id)
            if menu is None:
                raise EntityNotFoundError(f"Menu #{menu_id} not found")
            uow.menus.delete(menu_id)
            uow.commit()

        logger.info("Menu #%d (%s) deleted", menu_id, menu.name)


class ShowMenuHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, menu_id: int) -> MenuDTO:
        with self._uow as uow:
            menu = uow.menus.get_by_id(menu_id)
            if menu is None:
                raise EntityNotFoundError(f"Menu #{menu_id} not found")
            return menu_to_dto(menu)

"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pantry.infrastructure.config import Settings, settings
from pantry.infrastructure.persistence.json_store import JsonStore
from pantry.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


def unit_of_work(config: Settings | None = None) -> JsonUnitOfWork:
    config = config or settings
    store = JsonStore(
        config.store_path,
        lock_timeout=config.lock_timeout,
        stale_after=config.lock_stale_after,
    )
    return JsonUnitOfWork(store)

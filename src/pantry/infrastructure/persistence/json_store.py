"""Single-file JSON document store.

All collections live in one JSON document so a commit is one atomic
file replace: ingredients, menus, orders and stock history can never be
written half-way.  Writers serialize on an exclusive lock file and give
up after a timeout instead of queueing.
"""

from __future__ import annotations

import json
import logging
import os
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from pantry.domain.exceptions import ConflictError

logger = logging.getLogger(__name__)

COLLECTIONS = ("ingredients", "menus", "orders", "stock_history")
SEQUENCES = ("menus", "orders")

_LOCK_POLL_SECONDS = 0.05


@dataclass
class ChangeSet:
    """What a unit of work touched, and what it saw when it first did.

    ``ingredients`` maps an id to the version read from the store (None
    when the ingredient did not exist); ``sequences`` maps a sequence name
    to its value before this unit of work advanced it.
    """

    ingredients: dict[str, int | None] = field(default_factory=dict)
    menus: set[int] = field(default_factory=set)
    orders: dict[int, bool] = field(default_factory=dict)  # id -> existed before
    history_appended: int = 0
    sequences: dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (
            self.ingredients or self.menus or self.orders
            or self.history_appended or self.sequences
        )


def next_sequence_value(state: dict, changes: ChangeSet, name: str) -> int:
    sequences = state["sequences"]
    changes.sequences.setdefault(name, sequences[name])
    sequences[name] += 1
    return sequences[name]


def empty_document() -> dict:
    doc: dict = {name: [] for name in COLLECTIONS}
    doc["sequences"] = {name: 0 for name in SEQUENCES}
    return doc


class JsonStore:

    def __init__(
        self, file_path: Path, lock_timeout: float = 2.0, stale_after: float = 30.0
    ) -> None:
        self._file_path = file_path
        self._lock_path = file_path.with_name(file_path.name + ".lock")
        self._lock_timeout = lock_timeout
        self._stale_after = stale_after
        self._ensure_file()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> dict:
        """Return a fresh copy of the whole document."""
        doc = json.loads(self._file_path.read_text(encoding="utf-8"))
        # Tolerate documents written before a collection existed.
        for name in COLLECTIONS:
            doc.setdefault(name, [])
        sequences = doc.setdefault("sequences", {})
        for name in SEQUENCES:
            sequences.setdefault(name, 0)
        return doc

    def write(self, doc: dict) -> None:
        """Replace the document atomically (write temp file, then rename)."""
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(doc, indent=2) + "\n")
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, self._file_path)

    @contextmanager
    def lock(self) -> Iterator[None]:
        """Hold the exclusive writer lock, failing fast with ConflictError.

        A lock left behind by a writer that died (its pid is gone, or the
        file is older than ``stale_after`` seconds) is removed and retaken.
        """
        deadline = time.monotonic() + self._lock_timeout
        while True:
            try:
                fd = os.open(self._lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
                break
            except FileExistsError:
                if self._break_if_stale():
                    continue
                if time.monotonic() >= deadline:
                    logger.warning("Store lock %s still held after %.1fs", self._lock_path, self._lock_timeout)
                    raise ConflictError(
                        "The inventory store is busy, please retry"
                    ) from None
                time.sleep(_LOCK_POLL_SECONDS)
        try:
            os.write(fd, str(os.getpid()).encode("ascii"))
            os.close(fd)
            yield
        finally:
            try:
                os.remove(self._lock_path)
            except FileNotFoundError:
                pass

    def _break_if_stale(self) -> bool:
        try:
            owner = self._lock_path.read_text(encoding="ascii").strip()
            age = time.time() - self._lock_path.stat().st_mtime
        except FileNotFoundError:
            # Released between our open() and here; just retry.
            return True

        if owner.isdigit() and not _pid_alive(int(owner)):
            reason = f"owner pid {owner} is not running"
        elif age > self._stale_after:
            reason = f"lock is {age:.0f}s old"
        else:
            return False

        logger.warning("Breaking stale store lock %s: %s", self._lock_path, reason)
        try:
            os.remove(self._lock_path)
        except FileNotFoundError:
            pass
        return True

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps(empty_document(), indent=2) + "\n", encoding="utf-8"
            )


def _pid_alive(pid: int) -> bool:
    if os.name != "posix":
        # os.kill(pid, 0) terminates the process on Windows; rely on age there.
        return True
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True

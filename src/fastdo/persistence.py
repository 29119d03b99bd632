"""Persistence of tasks, categories and the selected category.

Each collection is a JSON array stored under its own key in a ``BlobStore``.
Reads that fail are treated as "no data"; writes that fail are logged and
dropped so the last good copy stays in storage.
"""

from __future__ import annotations

import logging
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from fastdo.blobstore import BlobStore
from fastdo.models import NIL_UUID, Category, Task

logger = logging.getLogger(__name__)

TASKS_KEY = "MenuTodos_SavedTodos"
CATEGORIES_KEY = "MenuTodos_SavedCategories"
SELECTED_CATEGORY_KEY = "MenuTodos_SelectedCategory"

_TASKS = TypeAdapter(list[Task])
_CATEGORIES = TypeAdapter(list[Category])


class PersistenceGateway:
    """Reads and writes store state through a blob store."""

    def __init__(self, blobs: BlobStore) -> None:
        self.blobs = blobs

    # ---- tasks ----

    def save_tasks(self, tasks: list[Task]) -> bool:
        try:
            payload = _TASKS.dump_json(tasks, by_alias=True)
        except (ValueError, TypeError):
            logger.warning("Could not encode %d tasks; keeping stored copy", len(tasks), exc_info=True)
            return False
        return self._write(TASKS_KEY, payload)

    def load_tasks(self) -> list[Task] | None:
        raw = self._read(TASKS_KEY)
        if raw is None:
            return None
        try:
            return _TASKS.validate_json(raw)
        except ValidationError:
            logger.warning("Stored tasks are unreadable; starting with an empty list", exc_info=True)
            return None

    # ---- categories ----

    def save_categories(self, categories: list[Category]) -> bool:
        try:
            payload = _CATEGORIES.dump_json(categories, by_alias=True)
        except (ValueError, TypeError):
            logger.warning("Could not encode categories; keeping stored copy", exc_info=True)
            return False
        return self._write(CATEGORIES_KEY, payload)

    def load_categories(self) -> list[Category] | None:
        raw = self._read(CATEGORIES_KEY)
        if raw is None:
            return None
        try:
            return _CATEGORIES.validate_json(raw)
        except ValidationError:
            logger.warning("Stored categories are unreadable; using defaults", exc_info=True)
            return None

    # ---- selection ----

    def save_selected_category(self, category_id: UUID | None) -> bool:
        if category_id is None:
            try:
                self.blobs.delete(SELECTED_CATEGORY_KEY)
            except OSError:
                logger.warning("Could not clear selected category", exc_info=True)
                return False
            return True
        return self._write(SELECTED_CATEGORY_KEY, str(category_id).upper().encode())

    def load_selected_category(self) -> UUID | None:
        raw = self._read(SELECTED_CATEGORY_KEY)
        if not raw:
            return None
        try:
            return UUID(raw.decode().strip())
        except (UnicodeDecodeError, ValueError):
            logger.warning("Stored selected category %r is not a UUID", raw)
            return None

    # ---- migration ----

    def migrate_legacy(self, tasks: list[Task], default_category_id: UUID) -> int:
        """Move tasks saved without a category into ``default_category_id``.

        Returns the number of tasks rewritten. Saves the task list only when
        something changed.
        """
        migrated = 0
        for task in tasks:
            if task.category_id == NIL_UUID:
                task.category_id = default_category_id
                migrated += 1

        if migrated:
            logger.info("Migrated %d legacy tasks to category %s", migrated, default_category_id)
            self.save_tasks(tasks)

        return migrated

    # ---- low-level helpers ----

    def _read(self, key: str) -> bytes | None:
        try:
            return self.blobs.get(key)
        except OSError:
            logger.warning("Could not read %s", key, exc_info=True)
            return None

    def _write(self, key: str, payload: bytes) -> bool:
        try:
            self.blobs.set(key, payload)
        except OSError:
            logger.warning("Could not write %s; keeping stored copy", key, exc_info=True)
            return False
        logger.debug("Saved %s (%d bytes)", key, len(payload))
        return True

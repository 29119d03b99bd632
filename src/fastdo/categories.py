"""Category registry.

Owns the ordered list of categories and the current selection. There is
always at least one category: the four defaults are seeded when nothing is
stored, and deleting the last remaining category is refused.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from uuid import UUID

from fastdo.hooks import ChangeNotifier
from fastdo.models import DEFAULT_ICON, Category, default_categories
from fastdo.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

DeleteHook = Callable[[UUID, UUID], None]


class CategoryRegistry(ChangeNotifier):
    """Categories plus the selected-category state."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        lock: threading.RLock | None = None,
    ) -> None:
        super().__init__()
        self._gateway = gateway
        self._lock = lock or threading.RLock()
        self._categories: list[Category] = []
        self._selected_id: UUID | None = None
        self._delete_hooks: list[DeleteHook] = []

    # ---- loading ----

    def load(self) -> None:
        """Load stored categories, seeding the defaults if there are none."""
        with self._lock:
            stored = self._gateway.load_categories()
            if stored:
                self._categories = stored
            else:
                self._categories = default_categories()
                self._gateway.save_categories(self._categories)
                logger.info("Seeded %d default categories", len(self._categories))

    def resolve_selection(self) -> None:
        """Restore the stored selection, or select the first category."""
        with self._lock:
            stored = self._gateway.load_selected_category()
            if stored is not None and self.get(stored) is not None:
                self._selected_id = stored
            else:
                self._selected_id = self.first.id if self._categories else None

    # ---- queries ----

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    @property
    def first(self) -> Category | None:
        return self._categories[0] if self._categories else None

    @property
    def selected_id(self) -> UUID | None:
        return self._selected_id

    @property
    def selected_category(self) -> Category | None:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    def get(self, category_id: UUID) -> Category | None:
        for category in self._categories:
            if category.id == category_id:
                return category
        return None

    def find_by_name(self, name: str) -> Category | None:
        """Case-insensitive lookup by display name."""
        wanted = name.strip().casefold()
        for category in self._categories:
            if category.name.casefold() == wanted:
                return category
        return None

    def __len__(self) -> int:
        return len(self._categories)

    # ---- mutations ----

    def on_delete(self, hook: DeleteHook) -> None:
        """Register ``hook(deleted_id, replacement_id)``, run before a category goes away."""
        self._delete_hooks.append(hook)

    def create(self, name: str, color: str = "blue", icon: str = DEFAULT_ICON) -> Category:
        """Append a new category.

        Raises:
            ValueError: If ``color`` is not a palette name or hex color.
        """
        with self._lock:
            category = Category(name=name, color=color, system_icon=icon)
            self._categories.append(category)
            self._gateway.save_categories(self._categories)
            logger.debug("Created category %s (%s)", category.name, category.id)
        self._notify("create_category")
        return category

    def delete(self, category_id: UUID) -> bool:
        """Delete a category, moving its tasks to the first remaining one.

        Returns False (and changes nothing) when the id is unknown or it is
        the only category left.
        """
        with self._lock:
            if len(self._categories) <= 1:
                logger.info("Cannot delete the last category")
                return False

            doomed = self.get(category_id)
            if doomed is None:
                return False

            replacement = next(c for c in self._categories if c.id != category_id)
            for hook in self._delete_hooks:
                hook(category_id, replacement.id)

            self._categories = [c for c in self._categories if c.id != category_id]

            if self._selected_id == category_id:
                self._selected_id = self._categories[0].id
                self._gateway.save_selected_category(self._selected_id)

            self._gateway.save_categories(self._categories)
            logger.debug("Deleted category %s; tasks moved to %s", doomed.name, replacement.name)
        self._notify("delete_category")
        return True

    def select(self, category_id: UUID | None) -> None:
        """Select a category, or None for all categories."""
        with self._lock:
            self._selected_id = category_id
            self._gateway.save_selected_category(category_id)
        self._notify("select_category")

"""Task store.

Owns the ordered task list. Mutations are scoped by the registry's selected
category where it matters (reorder, clear completed, the visible list) and
persist the whole list on success.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from uuid import UUID, uuid4

from fastdo.categories import CategoryRegistry
from fastdo.hooks import ChangeNotifier
from fastdo.models import Task
from fastdo.parser import TaskTextParser
from fastdo.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


class TaskStore(ChangeNotifier):
    """Todos grouped by category."""

    def __init__(
        self,
        registry: CategoryRegistry,
        gateway: PersistenceGateway,
        parser: TaskTextParser | None = None,
        lock: threading.RLock | None = None,
    ) -> None:
        super().__init__()
        self._registry = registry
        self._gateway = gateway
        self._parser = parser or TaskTextParser()
        self._lock = lock or threading.RLock()
        self._tasks: list[Task] = []

        registry.on_delete(self._reassign_category)

    # ---- loading ----

    def load(self) -> None:
        with self._lock:
            self._tasks = self._gateway.load_tasks() or []
            logger.debug("Loaded %d tasks", len(self._tasks))

    def migrate_legacy(self) -> int:
        """Assign tasks stored without a category to the first category."""
        first = self._registry.first
        if first is None:
            return 0
        with self._lock:
            return self._gateway.migrate_legacy(self._tasks, first.id)

    # ---- queries ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def visible_tasks(self) -> list[Task]:
        """Tasks in the selected category, or all tasks, in store order."""
        selected = self._registry.selected_id
        if selected is None:
            return list(self._tasks)
        return [t for t in self._tasks if t.category_id == selected]

    @property
    def has_completed(self) -> bool:
        return any(t.is_completed for t in self.visible_tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.visible_tasks if t.is_completed)

    @property
    def total_count(self) -> int:
        return len(self.visible_tasks)

    @property
    def stats_summary(self) -> str:
        total = self.total_count
        if total == 0:
            category = self._registry.selected_category
            return f"No tasks in {category.name if category else 'All'}"
        return f"{self.completed_count} of {total} tasks completed"

    def count_for(self, category_id: UUID) -> int:
        return sum(1 for t in self._tasks if t.category_id == category_id)

    def get(self, task_id: UUID) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # ---- mutations ----

    def add(self, raw_text: str, category_id: UUID | None = None) -> Task | None:
        """Parse ``raw_text`` and append it as a new task.

        The task goes to ``category_id`` if it names a known category, else
        the selected category, else the first category. Blank text is ignored
        and returns None.
        """
        if not raw_text.strip():
            return None

        with self._lock:
            if category_id is not None and self._registry.get(category_id) is None:
                logger.warning("Unknown category %s; using the selected one", category_id)
                category_id = None

            target = category_id or self._registry.selected_id
            if target is None:
                first = self._registry.first
                target = first.id if first else uuid4()

            parsed = self._parser.parse(raw_text)
            task = Task(title=parsed.title, due_date=parsed.due_date, category_id=target)
            self._tasks.append(task)
            self._save()
            logger.debug("Added task %s due=%s", task.id, task.due_date)
        self._notify("add")
        return task

    def toggle(self, task_id: UUID) -> bool:
        with self._lock:
            task = self.get(task_id)
            if task is None:
                return False
            task.is_completed = not task.is_completed
            self._save()
        self._notify("toggle")
        return True

    def update(self, task_id: UUID, new_raw_text: str) -> bool:
        """Re-parse ``new_raw_text`` into the task's title and due date."""
        with self._lock:
            task = self.get(task_id)
            if task is None:
                return False

            parsed = self._parser.parse(new_raw_text)
            if not parsed.title:
                return False

            task.title = parsed.title
            task.due_date = parsed.due_date
            self._save()
        self._notify("update")
        return True

    def delete(self, task_id: UUID) -> bool:
        with self._lock:
            remaining = [t for t in self._tasks if t.id != task_id]
            if len(remaining) == len(self._tasks):
                return False
            self._tasks = remaining
            self._save()
        self._notify("delete")
        return True

    def reorder(self, source_indices: Sequence[int], destination: int) -> bool:
        """Move visible tasks, list-view style.

        ``source_indices`` and ``destination`` index into ``visible_tasks``;
        ``destination`` is the insertion point before the moved rows are
        taken out. Tasks hidden by the category filter keep their places.
        Out-of-range indices make this a no-op.
        """
        with self._lock:
            visible = self.visible_tasks
            sources = set(source_indices)
            if not sources or not 0 <= destination <= len(visible):
                return False
            if any(not 0 <= i < len(visible) for i in sources):
                return False

            moving = [visible[i] for i in sorted(sources)]
            staying = [t for i, t in enumerate(visible) if i not in sources]
            insert_at = destination - sum(1 for i in sources if i < destination)
            reordered = staying[:insert_at] + moving + staying[insert_at:]

            # Refill the slots the visible tasks occupied in the full list.
            visible_ids = {t.id for t in visible}
            refill = iter(reordered)
            self._tasks = [next(refill) if t.id in visible_ids else t for t in self._tasks]
            self._save()
        self._notify("reorder")
        return True

    def clear_completed(self) -> int:
        """Remove completed tasks in the selected category (or everywhere).

        Returns the number of tasks removed.
        """
        with self._lock:
            selected = self._registry.selected_id
            remaining = [
                t
                for t in self._tasks
                if not (t.is_completed and (selected is None or t.category_id == selected))
            ]
            removed = len(self._tasks) - len(remaining)
            self._tasks = remaining
            self._save()
        self._notify("clear_completed")
        return removed

    # ---- internals ----

    def _reassign_category(self, old_id: UUID, new_id: UUID) -> None:
        with self._lock:
            moved = 0
            for task in self._tasks:
                if task.category_id == old_id:
                    task.category_id = new_id
                    moved += 1
            if moved:
                self._save()
                logger.debug("Moved %d tasks from %s to %s", moved, old_id, new_id)

    def _save(self) -> None:
        self._gateway.save_tasks(self._tasks)

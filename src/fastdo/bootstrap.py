"""Workspace assembly: wire the stores together and load persisted state."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from fastdo.blobstore import BlobStore, FileBlobStore
from fastdo.categories import CategoryRegistry
from fastdo.config import FastDoConfig
from fastdo.dates import DateExtractor, DateparserExtractor, NullDateExtractor
from fastdo.parser import TaskTextParser
from fastdo.persistence import PersistenceGateway
from fastdo.store import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class Workspace:
    """Everything a front end needs: categories, tasks and their storage."""

    config: FastDoConfig
    gateway: PersistenceGateway
    categories: CategoryRegistry
    tasks: TaskStore
    lock: threading.RLock = field(default_factory=threading.RLock)

    def reload(self) -> None:
        """Re-read persisted state.

        Order matters: categories (seeding defaults if needed), then tasks,
        then the selection against the known categories, then the legacy
        task migration.
        """
        with self.lock:
            self.categories.load()
            self.tasks.load()
            self.categories.resolve_selection()
            self.tasks.migrate_legacy()


def build_extractor(config: FastDoConfig) -> DateExtractor:
    """Date extractor matching the ``dates`` config section."""
    if not config.dates.enabled:
        return NullDateExtractor()
    return DateparserExtractor(languages=config.dates.languages)


def open_workspace(
    config: FastDoConfig | None = None,
    blobs: BlobStore | None = None,
    extractor: DateExtractor | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> Workspace:
    """Create a ready-to-use workspace.

    Args:
        config: Settings; loaded from the fastdo home directory when omitted.
        blobs: Storage backend; defaults to files in the configured directory.
        extractor: Date extractor; defaults to one built from ``config``.
        clock: Source of "now" for due-date normalization.
    """
    if config is None:
        config = FastDoConfig.load()
    if blobs is None:
        blobs = FileBlobStore(config.storage_dir())
    if extractor is None:
        extractor = build_extractor(config)

    lock = threading.RLock()
    gateway = PersistenceGateway(blobs)
    registry = CategoryRegistry(gateway, lock=lock)
    tasks = TaskStore(registry, gateway, TaskTextParser(extractor, clock=clock), lock=lock)

    workspace = Workspace(
        config=config,
        gateway=gateway,
        categories=registry,
        tasks=tasks,
        lock=lock,
    )
    workspace.reload()
    logger.info(
        "Workspace ready categories=%d tasks=%d",
        len(registry),
        len(tasks.tasks),
    )
    return workspace

"""Watch the blob store directory for writes made by other processes."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from fastdo.blobstore import TEMP_SUFFIX

if TYPE_CHECKING:
    from watchdog.events import FileSystemEvent


class _BlobChangeHandler(FileSystemEventHandler):
    """Calls back when a blob file is created, replaced, modified or removed."""

    def __init__(self, on_change: Callable[[str], None]) -> None:
        super().__init__()
        self._on_change = on_change

    @staticmethod
    def _decode(path: str | bytes) -> str:
        if isinstance(path, bytes):
            return path.decode("utf-8")
        return path

    def _should_ignore(self, path: str) -> bool:
        name = Path(path).name
        return name.endswith(TEMP_SUFFIX) or name.startswith(".")

    def _report(self, path: str | bytes) -> None:
        path = self._decode(path)
        if not self._should_ignore(path):
            self._on_change(Path(path).name)

    def on_created(self, event: FileSystemEvent) -> None:
        if isinstance(event, FileCreatedEvent):
            self._report(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if isinstance(event, FileModifiedEvent):
            self._report(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if isinstance(event, FileDeletedEvent):
            self._report(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Atomic writes land as a rename from the temp file.
        if isinstance(event, FileMovedEvent):
            self._report(event.dest_path)


class StorageWatcher:
    """Watches a ``FileBlobStore`` directory using watchdog.

    Example:
        watcher = StorageWatcher(config.storage_dir(), lambda key: workspace.reload())
        watcher.start()
        ...
        watcher.stop()
    """

    def __init__(self, directory: str | Path, on_change: Callable[[str], None]) -> None:
        self._directory = Path(directory)
        self._handler = _BlobChangeHandler(on_change)
        self._observer = Observer()
        self._started = False

    def start(self) -> None:
        """Start the observer thread. Creates the directory if needed."""
        if self._started:
            return

        # Threads can only be started once.
        if not self._observer.is_alive():
            self._observer = Observer()

        self._directory.mkdir(parents=True, exist_ok=True)
        self._observer.schedule(self._handler, str(self._directory), recursive=False)
        self._observer.start()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return

        self._observer.stop()
        self._observer.join()
        self._started = False

    @property
    def is_running(self) -> bool:
        return self._started

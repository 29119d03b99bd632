"""Shared fixtures for fastdo tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from fastdo.blobstore import MemoryBlobStore
from fastdo.bootstrap import Workspace, open_workspace
from fastdo.config import FastDoConfig
from fastdo.parser import TaskTextParser
from fastdo.persistence import PersistenceGateway

from .fakes import FakeDateExtractor

# Fixed "now" for every test: Monday 19 October 2026, 09:30.
NOW = datetime(2026, 10, 19, 9, 30)


@pytest.fixture
def fastdo_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point FASTDO_HOME at a temporary directory."""
    home = tmp_path / "fastdo-home"
    monkeypatch.setenv("FASTDO_HOME", str(home))
    return home


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return lambda: NOW


@pytest.fixture
def extractor() -> FakeDateExtractor:
    """Extractor knowing a handful of phrases relative to NOW."""
    return FakeDateExtractor(
        {
            "tomorrow 2pm": (NOW + timedelta(days=1)).replace(hour=14, minute=0),
            "next friday": datetime(2026, 10, 23, 9, 0),
            "march 3": datetime(2026, 3, 3, 12, 0),
            "today": NOW.replace(hour=8, minute=0),
        }
    )


@pytest.fixture
def parser(extractor: FakeDateExtractor, clock: Callable[[], datetime]) -> TaskTextParser:
    return TaskTextParser(extractor, clock=clock)


@pytest.fixture
def blobs() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def gateway(blobs: MemoryBlobStore) -> PersistenceGateway:
    return PersistenceGateway(blobs)


@pytest.fixture
def workspace(
    blobs: MemoryBlobStore,
    extractor: FakeDateExtractor,
    clock: Callable[[], datetime],
) -> Workspace:
    """A fresh workspace over an empty in-memory store."""
    return open_workspace(FastDoConfig(), blobs=blobs, extractor=extractor, clock=clock)


@pytest.fixture
def reopen(
    blobs: MemoryBlobStore,
    extractor: FakeDateExtractor,
    clock: Callable[[], datetime],
) -> Callable[[], Workspace]:
    """Open another workspace over the same storage (a second session)."""

    def _reopen() -> Workspace:
        return open_workspace(FastDoConfig(), blobs=blobs, extractor=extractor, clock=clock)

    return _reopen

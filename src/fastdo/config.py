"""Configuration models for fastdo."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

HOME_ENV_VAR = "FASTDO_HOME"


class StorageConfig(BaseModel):
    """Configuration for the blob store."""

    directory: str | None = None


class DatesConfig(BaseModel):
    """Configuration for natural-language date recognition."""

    enabled: bool = True
    languages: list[str] = Field(default_factory=lambda: ["en"])


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: str | None = None


class FastDoConfig(BaseModel):
    """Main configuration for fastdo."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    dates: DatesConfig = Field(default_factory=DatesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> FastDoConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = config_file()

        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = config_file()

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2)

    def storage_dir(self) -> Path:
        """Directory holding the persisted blobs."""
        if self.storage.directory:
            return Path(self.storage.directory).expanduser()
        return fastdo_home() / "store"


def fastdo_home() -> Path:
    """Root directory for config and data (``$FASTDO_HOME`` or ``~/.fastdo``)."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".fastdo"


def config_file() -> Path:
    return fastdo_home() / "config.json"

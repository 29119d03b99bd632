"""Logging configuration for the command line."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str | int = logging.WARNING, log_file: str | Path | None = None) -> None:
    """Send fastdo logs to stderr through rich, and optionally to a file.

    Call this once, before the first log call. Handlers from an earlier call
    are replaced so repeated calls do not duplicate output.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        if getattr(handler, "_fastdo", False):
            root.removeHandler(handler)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    console_handler._fastdo = True  # type: ignore[attr-defined]
    root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_path), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        file_handler._fastdo = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    # dateparser is chatty at DEBUG
    logging.getLogger("dateparser").setLevel(logging.WARNING)
    logging.captureWarnings(True)

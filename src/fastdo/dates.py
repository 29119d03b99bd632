"""Natural-language date recognition.

A ``DateExtractor`` finds the first date/time phrase in free text ("tomorrow
2pm", "next friday", "March 3") and reports where it is and which instant it
means. Any further date phrases in the text are ignored.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import dateparser.search

logger = logging.getLogger(__name__)

_QUALIFIER_RE = re.compile(r"\b(?:next|this)\s+$", re.IGNORECASE)


@dataclass(frozen=True)
class DateMatch:
    """A recognized date phrase.

    Attributes:
        start: Offset of the first character of the phrase.
        end: Offset one past the last character of the phrase.
        instant: The point in time the phrase resolves to.
    """

    start: int
    end: int
    instant: datetime

    @property
    def span(self) -> tuple[int, int]:
        return self.start, self.end


class DateExtractor(Protocol):
    """Anything that can locate the first date phrase in a string."""

    def extract(self, text: str, now: datetime | None = None) -> DateMatch | None: ...


class NullDateExtractor:
    """Extractor used when date recognition is switched off."""

    def extract(self, text: str, now: datetime | None = None) -> DateMatch | None:
        return None


class DateparserExtractor:
    """Date extractor backed by ``dateparser.search.search_dates``."""

    def __init__(self, languages: Sequence[str] = ("en",)) -> None:
        self.languages = list(languages)

    def extract(self, text: str, now: datetime | None = None) -> DateMatch | None:
        """Return the first date phrase in ``text``, or None.

        Relative phrases are resolved against ``now`` (defaults to the
        current time). Recognition errors are logged and reported as no match.
        """
        if not text or not text.strip():
            return None

        settings = {
            "RELATIVE_BASE": now or datetime.now(),
            "RETURN_AS_TIMEZONE_AWARE": False,
            # Bare weekdays ("friday") mean the coming one, not last week's.
            "PREFER_DATES_FROM": "future",
        }
        try:
            results = dateparser.search.search_dates(
                text, languages=self.languages, settings=settings
            )
        except Exception:
            logger.warning("Date recognition failed for %r", text, exc_info=True)
            return None

        if not results:
            return None

        phrase, instant = results[0]
        start = _locate(text, phrase)
        if start is None:
            logger.debug("Matched phrase %r not found in %r", phrase, text)
            return None

        end = start + len(phrase)
        return DateMatch(start=_include_qualifier(text, start), end=end, instant=instant)


def _locate(text: str, phrase: str) -> int | None:
    """Find the offset of ``phrase`` in ``text``, ignoring case as a fallback."""
    index = text.find(phrase)
    if index == -1:
        index = text.lower().find(phrase.lower())
    return index if index != -1 else None


def _include_qualifier(text: str, start: int) -> int:
    """Move ``start`` back over a "next" or "this" dateparser left out of the phrase."""
    match = _QUALIFIER_RE.search(text[:start])
    return match.start() if match else start

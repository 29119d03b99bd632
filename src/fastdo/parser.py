"""Turn raw task text into a title and an optional due date."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from dateutil.relativedelta import relativedelta

from fastdo.dates import DateExtractor, DateparserExtractor

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ParsedTask:
    """Result of parsing a line of task text."""

    title: str
    due_date: datetime | None = None


class TaskTextParser:
    """Split task text into a cleaned title and a due date.

    The first date phrase found by the extractor is removed from the title
    and becomes the due date. A date on a calendar day before today is taken
    to mean the same date next year ("March 3" typed in April).
    """

    def __init__(
        self,
        extractor: DateExtractor | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.extractor = extractor if extractor is not None else DateparserExtractor()
        self.clock = clock

    def parse(self, raw_text: str) -> ParsedTask:
        """Parse ``raw_text``.

        Example:
            >>> parser.parse("Call Max tomorrow 2pm")
            ParsedTask(title='Call Max', due_date=datetime(..., 14, 0))
        """
        fallback_title = raw_text.strip()
        now = self.clock()

        try:
            match = self.extractor.extract(raw_text, now)
        except Exception:
            logger.warning("Date extractor raised for %r", raw_text, exc_info=True)
            match = None

        if match is None:
            return ParsedTask(title=fallback_title)

        before = raw_text[: match.start]
        after = raw_text[match.end :]
        cleaned_title = _WHITESPACE_RE.sub(" ", f"{before} {after}").strip()

        return ParsedTask(
            title=cleaned_title or fallback_title,
            due_date=normalize_due_date(match.instant, now),
        )


def normalize_due_date(instant: datetime, now: datetime) -> datetime:
    """Keep dates from today onwards; push earlier calendar days one year ahead.

    Only one year is ever added, even if the result is still in the past.
    """
    if instant.date() >= now.date():
        return instant
    return instant + relativedelta(years=1)

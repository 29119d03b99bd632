"""Task and category models.

Field names serialize in camelCase (``isCompleted``, ``systemIcon``...) so
persisted records stay compatible with data written by earlier versions.
Those wrote timestamps as seconds since 2001-01-01 UTC; numbers are read that
way, and every timestamp is held as a naive local datetime.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Tasks written before categories existed carry this id.
NIL_UUID = UUID(int=0)

DEFAULT_COLOR = "#007AFF"
DEFAULT_ICON = "folder.fill"

# Zero point of numeric timestamps in stored records.
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)

CATEGORY_COLORS: dict[str, str] = {
    "blue": "#007AFF",
    "green": "#34C759",
    "orange": "#FF9500",
    "red": "#FF3B30",
    "purple": "#AF52DE",
    "pink": "#FF2D55",
    "yellow": "#FFCC00",
    "cyan": "#32ADE6",
    "mint": "#00C7BE",
    "indigo": "#5856D6",
    "brown": "#A2845E",
    "gray": "#8E8E93",
}

CATEGORY_ICONS: list[str] = [
    "folder.fill",
    "briefcase.fill",
    "cart.fill",
    "heart.fill",
    "star.fill",
    "house.fill",
    "car.fill",
    "gamecontroller.fill",
    "book.fill",
    "music.note",
    "camera.fill",
    "phone.fill",
]

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_hex_color(value: str) -> tuple[int, int, int] | None:
    """Parse ``#RGB`` or ``#RRGGBB`` (leading ``#`` optional) into an RGB triple.

    Returns None for anything else.
    """
    match = _HEX_RE.match(value.strip())
    if not match:
        return None

    digits = match.group(1)
    if len(digits) == 3:
        # 12-bit shorthand, each nibble doubled
        return tuple(int(c, 16) * 17 for c in digits)  # type: ignore[return-value]

    number = int(digits, 16)
    return (number >> 16) & 0xFF, (number >> 8) & 0xFF, number & 0xFF


def format_hex_color(rgb: tuple[int, int, int]) -> str:
    """Format an RGB triple as ``#RRGGBB``."""
    r, g, b = rgb
    return f"#{r:02X}{g:02X}{b:02X}"


def normalize_color(value: str) -> str:
    """Resolve a palette name or hex string to canonical ``#RRGGBB``.

    Raises:
        ValueError: If the value is neither a palette name nor a hex color.
    """
    named = CATEGORY_COLORS.get(value.strip().lower())
    if named:
        return named

    rgb = parse_hex_color(value)
    if rgb is None:
        raise ValueError(f"Invalid color: {value!r}")
    return format_hex_color(rgb)


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("created_at", "due_date", mode="before", check_fields=False)
    @classmethod
    def _from_reference_seconds(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return REFERENCE_DATE + timedelta(seconds=value)
        return value

    @field_validator("created_at", "due_date", mode="after", check_fields=False)
    @classmethod
    def _naive_local(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


class Task(_Record):
    """A single todo."""

    id: UUID = Field(default_factory=uuid4, frozen=True)
    title: str
    is_completed: bool = False
    created_at: datetime = Field(default_factory=datetime.now, frozen=True)
    due_date: datetime | None = None
    category_id: UUID

    def is_overdue(self, now: datetime | None = None) -> bool:
        """True when the task has a due date that already passed."""
        if self.due_date is None:
            return False
        if now is None:
            now = datetime.now()
        return self.due_date < now


class Category(_Record):
    """A user-defined group of tasks."""

    id: UUID = Field(default_factory=uuid4, frozen=True)
    name: str
    color: str = DEFAULT_COLOR
    system_icon: str = DEFAULT_ICON
    is_default: bool = False
    created_at: datetime = Field(default_factory=datetime.now, frozen=True)

    @field_validator("color", mode="before")
    @classmethod
    def _canonical_color(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_color(value)
        return value

    @property
    def rgb(self) -> tuple[int, int, int]:
        """The color as an (r, g, b) triple."""
        return parse_hex_color(self.color) or (0, 122, 255)


def default_categories() -> list[Category]:
    """The seed categories created on first launch, in display order."""
    return [
        Category(name="Personal", color="blue", system_icon="person.fill", is_default=True),
        Category(name="Work", color="orange", system_icon="briefcase.fill", is_default=True),
        Category(name="Shopping", color="green", system_icon="cart.fill", is_default=True),
        Category(name="Health", color="red", system_icon="heart.fill", is_default=True),
    ]

"""Tests for fastdo.models module."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from fastdo.models import (
    CATEGORY_COLORS,
    CATEGORY_ICONS,
    NIL_UUID,
    REFERENCE_DATE,
    Category,
    Task,
    default_categories,
    format_hex_color,
    normalize_color,
    parse_hex_color,
)


class TestHexColors:
    """Tests for color parsing helpers."""

    def test_parse_six_digits(self) -> None:
        """Test parsing #RRGGBB."""
        assert parse_hex_color("#FF8800") == (255, 136, 0)

    def test_parse_without_hash(self) -> None:
        """Test the leading # is optional."""
        assert parse_hex_color("00ff7f") == (0, 255, 127)

    def test_parse_three_digits(self) -> None:
        """Test 12-bit shorthand expands each nibble."""
        assert parse_hex_color("#F80") == (255, 136, 0)

    def test_parse_invalid(self) -> None:
        """Test invalid strings return None."""
        assert parse_hex_color("#GG0000") is None
        assert parse_hex_color("#12345") is None
        assert parse_hex_color("") is None

    def test_format(self) -> None:
        """Test formatting an RGB triple."""
        assert format_hex_color((255, 136, 0)) == "#FF8800"
        assert format_hex_color((0, 0, 0)) == "#000000"

    def test_normalize_palette_name(self) -> None:
        """Test palette names resolve to their hex value."""
        assert normalize_color("Orange") == CATEGORY_COLORS["orange"]

    def test_normalize_hex_is_upper_case(self) -> None:
        """Test hex input becomes canonical upper-case #RRGGBB."""
        assert normalize_color("ff8800") == "#FF8800"
        assert normalize_color("#abc") == "#AABBCC"

    def test_normalize_invalid_raises(self) -> None:
        """Test unknown colors are rejected."""
        with pytest.raises(ValueError):
            normalize_color("chartreuse-ish")


class TestTask:
    """Tests for the Task model."""

    def test_defaults(self) -> None:
        """Test default values."""
        category_id = uuid4()
        task = Task(title="Buy milk", category_id=category_id)
        assert isinstance(task.id, UUID)
        assert task.title == "Buy milk"
        assert task.is_completed is False
        assert task.due_date is None
        assert task.category_id == category_id
        assert task.created_at is not None

    def test_unique_ids(self) -> None:
        """Test each task gets its own id."""
        category_id = uuid4()
        assert Task(title="a", category_id=category_id).id != Task(title="b", category_id=category_id).id

    def test_id_is_immutable(self) -> None:
        """Test the id cannot be reassigned."""
        task = Task(title="a", category_id=uuid4())
        with pytest.raises(ValidationError):
            task.id = uuid4()

    def test_mutable_fields(self) -> None:
        """Test completion, title and category can change in place."""
        task = Task(title="a", category_id=uuid4())
        task.is_completed = True
        task.title = "b"
        assert task.is_completed is True
        assert task.title == "b"

    def test_serializes_camel_case(self) -> None:
        """Test persisted field names."""
        task = Task(title="a", category_id=uuid4())
        data = json.loads(task.model_dump_json(by_alias=True))
        assert set(data) == {"id", "title", "isCompleted", "createdAt", "dueDate", "categoryId"}
        assert data["dueDate"] is None

    def test_loads_camel_case(self) -> None:
        """Test records written with camelCase names load."""
        task = Task.model_validate(
            {
                "id": "6F9619FF-8B86-D011-B42D-00C04FC964FF",
                "title": "Call Max",
                "isCompleted": True,
                "createdAt": "2026-10-01T10:00:00",
                "dueDate": None,
                "categoryId": "00000000-0000-0000-0000-000000000000",
            }
        )
        assert task.is_completed is True
        assert task.category_id == NIL_UUID
        assert task.id == UUID("6f9619ff-8b86-d011-b42d-00c04fc964ff")

    def test_is_overdue(self) -> None:
        """Test overdue detection."""
        now = datetime(2026, 10, 19, 12, 0)
        task = Task(title="a", category_id=uuid4())
        assert task.is_overdue(now) is False

        task.due_date = now - timedelta(hours=1)
        assert task.is_overdue(now) is True

        task.due_date = now + timedelta(hours=1)
        assert task.is_overdue(now) is False


class TestTimestamps:
    """Timestamps are always naive local datetimes."""

    def _local(self, instant: datetime) -> datetime:
        return instant.astimezone().replace(tzinfo=None)

    def test_numbers_count_from_reference_date(self) -> None:
        """Test numeric timestamps are seconds since 2001-01-01 UTC."""
        task = Task.model_validate(
            {"title": "a", "categoryId": str(uuid4()), "createdAt": 0, "dueDate": 813_000_000.5}
        )

        assert task.created_at == self._local(REFERENCE_DATE)
        assert task.due_date == self._local(REFERENCE_DATE + timedelta(seconds=813_000_000.5))
        assert task.due_date.tzinfo is None

    def test_offset_strings_made_naive(self) -> None:
        """Test ISO strings with an offset convert to local time."""
        task = Task.model_validate(
            {"title": "a", "categoryId": str(uuid4()), "dueDate": "2026-10-20T14:00:00Z"}
        )
        assert task.due_date == self._local(datetime(2026, 10, 20, 14, 0, tzinfo=timezone.utc))

    def test_naive_kept(self) -> None:
        """Test naive values pass through unchanged."""
        due = datetime(2026, 10, 20, 14, 0)
        assert Task(title="a", category_id=uuid4(), due_date=due).due_date == due

    def test_numeric_due_date_comparable(self) -> None:
        """Test overdue checks work on numerically stored dates."""
        task = Task.model_validate({"title": "a", "categoryId": str(uuid4()), "dueDate": 0})
        assert task.is_overdue(datetime(2026, 10, 19, 12, 0)) is True

    def test_category_created_at(self) -> None:
        """Test categories read numeric creation times too."""
        category = Category.model_validate({"name": "x", "createdAt": 60})
        assert category.created_at == self._local(REFERENCE_DATE + timedelta(minutes=1))


class TestCategory:
    """Tests for the Category model."""

    def test_defaults(self) -> None:
        """Test default values."""
        category = Category(name="Errands")
        assert category.color == "#007AFF"
        assert category.system_icon == "folder.fill"
        assert category.is_default is False

    def test_color_normalized(self) -> None:
        """Test colors are stored canonically."""
        assert Category(name="x", color="purple").color == CATEGORY_COLORS["purple"]
        assert Category(name="x", color="#ff8800").color == "#FF8800"

    def test_invalid_color_rejected(self) -> None:
        """Test invalid colors fail validation."""
        with pytest.raises(ValidationError):
            Category(name="x", color="not a color")

    def test_rgb(self) -> None:
        """Test the RGB triple property."""
        assert Category(name="x", color="#FF8800").rgb == (255, 136, 0)

    def test_serializes_system_icon(self) -> None:
        """Test persisted field names."""
        data = json.loads(Category(name="x").model_dump_json(by_alias=True))
        assert set(data) == {"id", "name", "color", "systemIcon", "isDefault", "createdAt"}


class TestDefaultCategories:
    """Tests for the seed categories."""

    def test_names_in_order(self) -> None:
        """Test the four defaults in display order."""
        names = [c.name for c in default_categories()]
        assert names == ["Personal", "Work", "Shopping", "Health"]

    def test_colors_and_icons(self) -> None:
        """Test the defaults' colors and icons."""
        personal, work, shopping, health = default_categories()
        assert personal.color == CATEGORY_COLORS["blue"]
        assert work.color == CATEGORY_COLORS["orange"]
        assert shopping.color == CATEGORY_COLORS["green"]
        assert health.color == CATEGORY_COLORS["red"]
        assert [c.system_icon for c in (personal, work, shopping, health)] == [
            "person.fill",
            "briefcase.fill",
            "cart.fill",
            "heart.fill",
        ]

    def test_all_marked_default(self) -> None:
        """Test is_default is set on seeds."""
        assert all(c.is_default for c in default_categories())

    def test_fresh_ids_each_call(self) -> None:
        """Test seeding twice yields distinct ids."""
        first = {c.id for c in default_categories()}
        second = {c.id for c in default_categories()}
        assert first.isdisjoint(second)

    def test_icon_palette(self) -> None:
        """Test the icon palette includes the default icon."""
        assert "folder.fill" in CATEGORY_ICONS
        assert len(CATEGORY_ICONS) == 12

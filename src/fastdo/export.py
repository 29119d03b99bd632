"""Markdown export of all tasks, grouped by category."""

from __future__ import annotations

from dataclasses import dataclass

from jinja2 import BaseLoader, Environment

from fastdo.models import Category, Task

MARKDOWN_TEMPLATE = """\
# {{ title }}
{% for group in groups %}
## {{ group.category.name }}

{% for task in group.tasks -%}
- [{{ "x" if task.is_completed else " " }}] {{ task.title }}
{%- if task.due_date %} (due {{ task.due_date.date().isoformat() }}){% endif %}
{% else -%}
_No tasks._
{% endfor %}
{%- endfor -%}
"""


@dataclass
class CategoryGroup:
    category: Category
    tasks: list[Task]


def group_by_category(categories: list[Category], tasks: list[Task]) -> list[CategoryGroup]:
    """Pair each category with its tasks, both in store order."""
    return [
        CategoryGroup(category=c, tasks=[t for t in tasks if t.category_id == c.id])
        for c in categories
    ]


def render_markdown(
    categories: list[Category],
    tasks: list[Task],
    title: str = "Tasks",
) -> str:
    """Render tasks as a Markdown checklist with one section per category."""
    env = Environment(loader=BaseLoader(), keep_trailing_newline=True)
    template = env.from_string(MARKDOWN_TEMPLATE)
    return template.render(title=title, groups=group_by_category(categories, tasks))

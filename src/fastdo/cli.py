"""CLI interface for fastdo."""

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.live import Live
from rich.table import Table

from fastdo import __version__
from fastdo.bootstrap import Workspace, open_workspace
from fastdo.config import FastDoConfig
from fastdo.logging_setup import setup_logging
from fastdo.models import CATEGORY_COLORS, CATEGORY_ICONS, DEFAULT_ICON, Category, Task

console = Console()


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="fastdo")
@click.pass_context
def main(ctx: click.Context) -> None:
    """fastdo - tasks with natural-language due dates.

    \b
    Examples:
      fastdo add "Call Max tomorrow 2pm"
      fastdo add "Buy milk" --category Shopping
      fastdo list
      fastdo done 1
    """
    ctx.ensure_object(dict)
    if "workspace" not in ctx.obj:
        config = FastDoConfig.load()
        setup_logging(config.logging.level, config.logging.file)
        ctx.obj["workspace"] = open_workspace(config)

    if ctx.invoked_subcommand is None:
        _print_tasks(ctx.obj["workspace"])


def _workspace(ctx: click.Context) -> Workspace:
    return ctx.obj["workspace"]


def describe_due(due: datetime, now: datetime | None = None) -> str:
    """Relative due label such as ``due in 2 days`` or ``due 3 hours ago``."""
    if now is None:
        now = datetime.now()

    seconds = (due - now).total_seconds()
    if abs(seconds) < 60:
        return "due now"

    remaining = abs(seconds)
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if remaining >= size:
            amount = int(remaining // size)
            break

    label = f"{amount} {unit}" + ("s" if amount != 1 else "")
    return f"due in {label}" if seconds > 0 else f"due {label} ago"


def _task_table(workspace: Workspace) -> Table:
    selected = workspace.categories.selected_category
    table = Table(title=selected.name if selected else "All", show_header=True)
    table.add_column("#", style="dim", justify="right")
    table.add_column("", width=1)
    table.add_column("Task", style="white")
    table.add_column("Due")
    table.add_column("Category", style="cyan")

    now = datetime.now()
    for i, task in enumerate(workspace.tasks.visible_tasks, 1):
        category = workspace.categories.get(task.category_id)
        check = "[green]✓[/green]" if task.is_completed else "○"
        title = f"[dim strike]{task.title}[/dim strike]" if task.is_completed else task.title
        due = ""
        if task.due_date is not None:
            color = "red" if task.is_overdue(now) else "yellow"
            due = f"[{color}]{describe_due(task.due_date, now)}[/{color}]"
        table.add_row(str(i), check, title, due, category.name if category else "?")

    table.caption = workspace.tasks.stats_summary
    return table


def _print_tasks(workspace: Workspace) -> None:
    if not workspace.tasks.visible_tasks:
        console.print(f"[dim]{workspace.tasks.stats_summary}[/dim]")
        return
    console.print(_task_table(workspace))


def _resolve_task(workspace: Workspace, index: int) -> Task | None:
    """Visible task at 1-based ``index``, printing an error if out of range."""
    visible = workspace.tasks.visible_tasks
    if index < 1 or index > len(visible):
        if visible:
            console.print(f"[red]Invalid index.[/red] Must be 1-{len(visible)}")
        else:
            console.print("[red]Invalid index.[/red] No tasks in this view")
        return None
    return visible[index - 1]


def _resolve_category(workspace: Workspace, name: str) -> Category | None:
    category = workspace.categories.find_by_name(name)
    if category is None:
        console.print(f"[red]Unknown category:[/red] {name}")
    return category


@main.command("add")
@click.argument("text", nargs=-1, required=True)
@click.option("--category", "-c", help="Category name (defaults to the selected one)")
@click.pass_context
def add_command(ctx: click.Context, text: tuple[str, ...], category: str | None) -> None:
    """Add a task. A date phrase in TEXT becomes the due date."""
    workspace = _workspace(ctx)

    category_id = None
    if category:
        found = _resolve_category(workspace, category)
        if found is None:
            return
        category_id = found.id

    task = workspace.tasks.add(" ".join(text), category_id=category_id)
    if task is None:
        console.print("[red]Nothing to add.[/red] Task text is empty")
        return

    due = f" [yellow]({describe_due(task.due_date)})[/yellow]" if task.due_date else ""
    console.print(f"[green]Added:[/green] {task.title}{due}")


@main.command("list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """List tasks in the selected category."""
    _print_tasks(_workspace(ctx))


@main.command()
@click.argument("index", type=int)
@click.pass_context
def done(ctx: click.Context, index: int) -> None:
    """Toggle completion of the task at INDEX (1-based)."""
    workspace = _workspace(ctx)
    task = _resolve_task(workspace, index)
    if task is None:
        return

    workspace.tasks.toggle(task.id)
    if task.is_completed:
        console.print(f"[green]Completed:[/green] {task.title}")
    else:
        console.print(f"[yellow]Reopened:[/yellow] {task.title}")


@main.command()
@click.argument("index", type=int)
@click.argument("text", nargs=-1, required=True)
@click.pass_context
def edit(ctx: click.Context, index: int, text: tuple[str, ...]) -> None:
    """Replace the text (and due date) of the task at INDEX."""
    workspace = _workspace(ctx)
    task = _resolve_task(workspace, index)
    if task is None:
        return

    new_text = " ".join(text)
    if not new_text.strip():
        console.print("[red]Task text cannot be empty.[/red]")
        return

    if workspace.tasks.update(task.id, new_text):
        console.print(f"[green]Updated:[/green] {task.title}")
    else:
        console.print("[red]Task text cannot be empty.[/red]")


@main.command("rm")
@click.argument("index", type=int)
@click.pass_context
def remove(ctx: click.Context, index: int) -> None:
    """Delete the task at INDEX."""
    workspace = _workspace(ctx)
    task = _resolve_task(workspace, index)
    if task is None:
        return

    workspace.tasks.delete(task.id)
    console.print(f"[green]Deleted:[/green] {task.title}")


@main.command()
@click.argument("indices", type=int, nargs=-1, required=True)
@click.option(
    "--to",
    "destination",
    type=int,
    required=True,
    help="Insert before the task currently at this position (count+1 for the end)",
)
@click.pass_context
def move(ctx: click.Context, indices: tuple[int, ...], destination: int) -> None:
    """Move the tasks at INDICES to a new position."""
    workspace = _workspace(ctx)
    sources = [i - 1 for i in indices]

    if workspace.tasks.reorder(sources, destination - 1):
        _print_tasks(workspace)
    else:
        console.print("[red]Invalid position.[/red]")


@main.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Remove completed tasks in the selected category."""
    removed = _workspace(ctx).tasks.clear_completed()
    plural = "" if removed == 1 else "s"
    console.print(f"[green]Removed {removed} completed task{plural}.[/green]")


@main.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show completion counts for the selected category."""
    console.print(_workspace(ctx).tasks.stats_summary)


@main.group()
def category() -> None:
    """Manage categories."""
    pass


@category.command("list")
@click.pass_context
def category_list(ctx: click.Context) -> None:
    """List categories with their task counts."""
    workspace = _workspace(ctx)

    table = Table(title="Categories", show_header=True)
    table.add_column("", width=1)
    table.add_column("Name", style="cyan")
    table.add_column("Color")
    table.add_column("Icon", style="dim")
    table.add_column("Tasks", justify="right")

    selected_id = workspace.categories.selected_id
    for cat in workspace.categories.categories:
        marker = "[green]●[/green]" if cat.id == selected_id else ""
        table.add_row(
            marker,
            cat.name,
            f"[{cat.color}]■[/] {cat.color}",
            cat.system_icon,
            str(workspace.tasks.count_for(cat.id)),
        )

    console.print(table)
    if selected_id is None:
        console.print("[dim]Showing all categories.[/dim]")


@category.command("add")
@click.argument("name")
@click.option(
    "--color",
    default="blue",
    show_default=True,
    help=f"Palette name ({', '.join(CATEGORY_COLORS)}) or #RRGGBB",
)
@click.option(
    "--icon",
    default=DEFAULT_ICON,
    show_default=True,
    help=f"Icon name, e.g. {', '.join(CATEGORY_ICONS[:4])}",
)
@click.pass_context
def category_add(ctx: click.Context, name: str, color: str, icon: str) -> None:
    """Create a category."""
    workspace = _workspace(ctx)

    if not name.strip():
        console.print("[red]Category name cannot be empty.[/red]")
        return

    try:
        created = workspace.categories.create(name.strip(), color=color, icon=icon)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return

    console.print(f"[green]Added category:[/green] {created.name} ({created.color})")


@category.command("rm")
@click.argument("name")
@click.pass_context
def category_remove(ctx: click.Context, name: str) -> None:
    """Delete a category; its tasks move to the first remaining one."""
    workspace = _workspace(ctx)
    found = _resolve_category(workspace, name)
    if found is None:
        return

    if not workspace.categories.delete(found.id):
        console.print("[red]Cannot delete the last category.[/red]")
        return

    first = workspace.categories.first
    console.print(
        f"[green]Deleted category:[/green] {found.name}"
        + (f" (tasks moved to {first.name})" if first else "")
    )


@category.command("select")
@click.argument("name")
@click.pass_context
def category_select(ctx: click.Context, name: str) -> None:
    """Show only tasks in NAME (use "all" for every category)."""
    workspace = _workspace(ctx)

    found = workspace.categories.find_by_name(name)
    if found is None and name.strip().lower() == "all":
        workspace.categories.select(None)
        console.print("[green]Showing all categories.[/green]")
        return
    if found is None:
        console.print(f"[red]Unknown category:[/red] {name}")
        return

    workspace.categories.select(found.id)
    console.print(f"[green]Selected:[/green] {found.name}")


@main.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to a file")
@click.pass_context
def export(ctx: click.Context, output: str | None) -> None:
    """Export every task as a Markdown checklist."""
    from fastdo.export import render_markdown

    workspace = _workspace(ctx)
    markdown = render_markdown(workspace.categories.categories, workspace.tasks.tasks)

    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown)
        console.print(f"[green]Exported to:[/green] {path}")
    else:
        click.echo(markdown, nl=False)


@main.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Live task list that refreshes when another fastdo process saves."""
    from fastdo.watcher import StorageWatcher

    workspace = _workspace(ctx)

    with Live(_task_table(workspace), console=console, refresh_per_second=4) as live:

        def refresh(_key: str) -> None:
            workspace.reload()
            live.update(_task_table(workspace))

        watcher = StorageWatcher(workspace.config.storage_dir(), refresh)
        watcher.start()
        try:
            while True:
                time.sleep(0.5)
        except KeyboardInterrupt:
            pass
        finally:
            watcher.stop()

"""Terminal rendering of grids and task details."""

from datetime import datetime
from typing import Optional

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from mandalart.messages import DEFAULT_LOCALE, get_message
from mandalart.models import HistoryItem, MandalartData, SubGoal, Task
from mandalart.render.grid import ZONES, Cell, CellKind, build_zone, task_progress

CELL_WIDTH = 14


def _cell_text(cell: Cell) -> Text:
    if cell.kind == CellKind.MAIN:
        return Text(cell.text, style="bold white on blue", justify="center")
    if not cell.clickable:
        return Text(cell.text, style="bold blue", justify="center")
    label = f"{cell.sub_goal_index + 1}.{cell.task_index + 1} {cell.text}"
    if cell.completed:
        return Text(f"✓ {label}", style="green", justify="center")
    return Text(label, style="dim" if cell.text == "..." else "", justify="center")


def render_zone(data: MandalartData, zone: int) -> Table:
    """One 3x3 block."""
    table = Table(show_header=False, box=box.SQUARE, padding=(0, 1), expand=True)
    for _ in range(3):
        table.add_column(width=CELL_WIDTH, overflow="fold", vertical="middle")
    cells = build_zone(data, zone)
    for row in range(3):
        table.add_row(*(_cell_text(c) for c in cells[row * 3:row * 3 + 3]))
    return table


def render_grid(data: MandalartData, locale: str = DEFAULT_LOCALE) -> Panel:
    """The full 9x9 grid as nine bordered zones."""
    outer = Table(show_header=False, box=None, padding=(0, 1))
    for _ in range(3):
        outer.add_column()
    zones = [render_zone(data, zone) for zone in ZONES]
    for row in range(3):
        outer.add_row(*zones[row * 3:row * 3 + 3])

    return Panel(
        outer,
        title=f"[bold]{data.main_goal}[/bold]",
        subtitle=get_message("grid_subtitle", locale),
        box=box.ROUNDED,
    )


def render_task_detail(sub_goal: SubGoal, task: Task, task_label: Optional[str] = None) -> Panel:
    """Description, checklist, progress bar and advice for one task."""
    progress = task_progress(task)

    checklist = Table(show_header=False, box=None, padding=(0, 1))
    checklist.add_column("State")
    checklist.add_column("Step")
    checklist.add_column("ID", style="dim")
    for item in task.checklist:
        mark = "[green][x][/green]" if item.checked else "[ ]"
        checklist.add_row(mark, item.text, item.id)

    parts = []
    if task.description:
        parts.append(Text(task.description))
    parts.append(checklist)
    parts.append(Group(
        ProgressBar(total=max(progress.total, 1), completed=progress.checked, width=30),
        Text(f"{progress.checked}/{progress.total} ({progress.percent}%)", style="dim"),
    ))
    if task.advice:
        parts.append(Text(f"Tip: {task.advice}", style="italic yellow"))

    status = "[green]done[/green]" if task.is_completed else "[yellow]in progress[/yellow]"
    title = f"{task_label + ' ' if task_label else ''}{task.title}"
    return Panel(Group(*parts), title=f"[bold]{title}[/bold] ({status})", subtitle=sub_goal.title)


def render_history(items: list[HistoryItem]) -> Table:
    table = Table()
    table.add_column("ID", style="dim")
    table.add_column("Goal")
    table.add_column("Created")
    table.add_column("Done", justify="right")

    for item in items:
        done = sum(sg.completed_count for sg in item.data.sub_goals)
        total = sum(len(sg.tasks) for sg in item.data.sub_goals)
        done_style = "green" if total and done == total else "yellow" if done else "dim"
        created = datetime.fromtimestamp(item.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
        table.add_row(
            item.id[:8] + "...",
            item.data.main_goal[:50],
            created,
            f"[{done_style}]{done}/{total}[/{done_style}]",
        )
    return table

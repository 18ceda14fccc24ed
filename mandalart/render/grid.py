"""Grid layout: nine 3x3 zones around the main goal.

Zone 4 (centre) holds the main goal surrounded by the sub-goal titles.
Every other zone holds one sub-goal title surrounded by its tasks. Zones and
cells are numbered row-major 0..8, skipping the centre when indexing content.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mandalart.models import MandalartData, Task

CENTER = 4
ZONES = range(9)


class CellKind(Enum):
    MAIN = "main"
    SUB_MAIN = "sub-main"
    TASK = "task"


@dataclass
class Cell:
    """One of the 81 grid cells."""

    kind: CellKind
    text: str
    sub_goal_index: Optional[int] = None
    task_index: Optional[int] = None
    completed: bool = False

    @property
    def clickable(self) -> bool:
        return self.kind == CellKind.TASK


@dataclass
class TaskProgress:
    checked: int
    total: int

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 0
        return round(100 * self.checked / self.total)


def zone_content_index(index: int) -> Optional[int]:
    """Map a zone (or cell) position to its sub-goal (or task) index; None for the centre."""
    if not 0 <= index <= 8:
        raise IndexError(f"Position out of range: {index}")
    if index == CENTER:
        return None
    return index if index < CENTER else index - 1


def build_zone(data: MandalartData, zone: int) -> list[Cell]:
    """The nine cells of one zone, row-major."""
    sub_goal_index = zone_content_index(zone)
    cells = []

    if sub_goal_index is None:
        for position in ZONES:
            idx = zone_content_index(position)
            if idx is None:
                cells.append(Cell(CellKind.MAIN, data.main_goal))
            else:
                cells.append(Cell(CellKind.SUB_MAIN, data.sub_goals[idx].title, sub_goal_index=idx))
        return cells

    sub_goal = data.sub_goals[sub_goal_index]
    for position in ZONES:
        task_index = zone_content_index(position)
        if task_index is None:
            cells.append(Cell(CellKind.SUB_MAIN, sub_goal.title, sub_goal_index=sub_goal_index))
        else:
            task = sub_goal.tasks[task_index]
            cells.append(Cell(
                CellKind.TASK,
                task.title,
                sub_goal_index=sub_goal_index,
                task_index=task_index,
                completed=task.is_completed,
            ))
    return cells


def build_grid(data: MandalartData) -> list[list[Cell]]:
    """All 81 cells as 9 rows of 9."""
    rows = [[None] * 9 for _ in range(9)]
    for zone in ZONES:
        for position, cell in enumerate(build_zone(data, zone)):
            row = (zone // 3) * 3 + position // 3
            col = (zone % 3) * 3 + position % 3
            rows[row][col] = cell
    return rows


def locate_task(row: int, col: int) -> Optional[tuple[int, int]]:
    """(sub_goal_index, task_index) of the task at a grid coordinate, or None."""
    if not (0 <= row < 9 and 0 <= col < 9):
        raise IndexError(f"Cell out of range: ({row}, {col})")
    zone = (row // 3) * 3 + col // 3
    position = (row % 3) * 3 + col % 3
    sub_goal_index = zone_content_index(zone)
    task_index = zone_content_index(position)
    if sub_goal_index is None or task_index is None:
        return None
    return sub_goal_index, task_index


def task_progress(task: Task) -> TaskProgress:
    return TaskProgress(
        checked=sum(1 for item in task.checklist if item.checked),
        total=len(task.checklist),
    )


def slugify(text: str) -> str:
    """Lowercase and replace whitespace runs with dashes."""
    return re.sub(r"\s+", "-", text.strip()).lower()


def export_filename(data: MandalartData) -> str:
    slug = re.sub(r"[\\/:]", "-", slugify(data.main_goal))
    return f"mandalart-{slug}.png"

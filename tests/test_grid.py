"""Tests for grid layout, console rendering and PNG export."""

import base64

import pytest

from conftest import make_mandalart


def test_zone_content_index_skips_centre():
    from mandalart.render.grid import zone_content_index

    assert [zone_content_index(i) for i in range(9)] == [0, 1, 2, 3, None, 4, 5, 6, 7]
    with pytest.raises(IndexError):
        zone_content_index(9)


def test_centre_zone_holds_main_goal_and_sub_goals():
    from mandalart.render.grid import CellKind, build_zone

    cells = build_zone(make_mandalart(), 4)

    assert cells[4].kind == CellKind.MAIN
    assert cells[4].text == "Run a marathon"
    assert [c.text for c in cells if c.kind == CellKind.SUB_MAIN] == [f"Area {i}" for i in range(1, 9)]
    assert not any(c.clickable for c in cells)


def test_outer_zone_holds_sub_goal_and_tasks():
    from mandalart.render.grid import CellKind, build_zone

    cells = build_zone(make_mandalart(), 8)

    assert cells[4].kind == CellKind.SUB_MAIN
    assert cells[4].text == "Area 8"
    assert cells[0].text == "Task 8.1"
    assert cells[8].text == "Task 8.8"
    assert all(c.clickable for i, c in enumerate(cells) if i != 4)


def test_full_grid_mirrors_sub_goal_titles():
    from mandalart.render.grid import CellKind, build_grid

    grid = build_grid(make_mandalart())

    assert len(grid) == 9 and all(len(row) == 9 for row in grid)
    assert grid[4][4].kind == CellKind.MAIN
    # Sub-goal 1 appears in the centre zone and at the centre of zone 0
    assert grid[3][3].text == grid[1][1].text == "Area 1"
    assert sum(1 for row in grid for c in row if c.kind == CellKind.TASK) == 64


def test_completed_tasks_are_marked():
    from mandalart.render.grid import build_zone

    data = make_mandalart()
    for item in data.task(0, 0).checklist:
        item.checked = True

    cells = build_zone(data, 0)
    assert cells[0].completed
    assert not cells[1].completed


def test_locate_task():
    from mandalart.render.grid import locate_task

    assert locate_task(0, 0) == (0, 0)
    assert locate_task(8, 8) == (7, 7)
    assert locate_task(4, 4) is None
    assert locate_task(1, 1) is None
    assert locate_task(3, 5) is None
    with pytest.raises(IndexError):
        locate_task(9, 0)


def test_task_progress():
    from mandalart.models import Task, TaskItem
    from mandalart.render.grid import task_progress

    task = Task(title="t", checklist=[TaskItem("a", "x", True), TaskItem("b", "y"), TaskItem("c", "z")])
    progress = task_progress(task)

    assert (progress.checked, progress.total, progress.percent) == (1, 3, 33)
    assert task_progress(Task(title="empty")).percent == 0


@pytest.mark.parametrize("goal,expected", [
    ("Run a Marathon", "mandalart-run-a-marathon.png"),
    ("  Learn   Go  ", "mandalart-learn-go.png"),
    ("Ship v2/v3: now", "mandalart-ship-v2-v3--now.png"),
])
def test_export_filename(goal, expected):
    from mandalart.render.grid import export_filename

    assert export_filename(make_mandalart(goal)) == expected


def test_render_grid_shows_main_goal_and_tasks():
    from rich.console import Console

    from mandalart.render.console import render_grid

    console = Console(record=True, width=200)
    console.print(render_grid(make_mandalart()))
    text = console.export_text()

    assert "Run a marathon" in text
    assert "Area 3" in text
    assert "Mandalart Action Plan" in text


def test_render_task_detail_shows_checklist_and_progress():
    from rich.console import Console

    from mandalart.render.console import render_task_detail

    data = make_mandalart()
    task = data.task(0, 0)
    task.checklist[0].checked = True

    console = Console(record=True, width=120)
    console.print(render_task_detail(data.sub_goals[0], task, "1.1"))
    text = console.export_text()

    assert "1.1 Task 1.1" in text
    assert "i-0-0-1" in text
    assert "1/3 (33%)" in text
    assert "Tip: Keep going" in text


def test_render_history_lists_items():
    from rich.console import Console

    from mandalart.models import HistoryItem
    from mandalart.render.console import render_history

    items = [HistoryItem("abcdef123456", "u1", 1700000000000, make_mandalart("Goal A"))]
    console = Console(record=True, width=120)
    console.print(render_history(items))
    text = console.export_text()

    assert "abcdef12" in text
    assert "Goal A" in text
    assert "0/64" in text


def test_export_png_writes_file_and_data_url(tmp_path):
    from PIL import Image

    from mandalart.render.export import export_png

    result = export_png(make_mandalart("Run a Marathon"), tmp_path)

    assert result.path == tmp_path / "mandalart-run-a-marathon.png"
    assert result.path.exists()
    assert result.data_url.startswith("data:image/png;base64,")
    assert base64.b64decode(result.data_url.split(",", 1)[1])[:8] == b"\x89PNG\r\n\x1a\n"
    with Image.open(result.path) as image:
        assert image.size == (result.width, result.height)


def test_export_png_without_directory_only_builds_data_url():
    from mandalart.render.export import export_png

    result = export_png(make_mandalart())

    assert result.path is None
    assert result.data_url


def test_export_failure_raises_export_error(tmp_path):
    from mandalart.errors import ExportError
    from mandalart.render.export import export_png

    blocker = tmp_path / "file"
    blocker.write_text("x")
    data = make_mandalart()

    with pytest.raises(ExportError, match="Could not generate the image"):
        export_png(data, blocker / "out")
    assert data == make_mandalart()

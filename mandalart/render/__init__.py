"""Grid layout, terminal rendering and image export."""

from mandalart.render.grid import (
    Cell,
    CellKind,
    build_grid,
    build_zone,
    export_filename,
    locate_task,
    slugify,
    task_progress,
    zone_content_index,
)

__all__ = [
    "Cell",
    "CellKind",
    "build_grid",
    "build_zone",
    "export_filename",
    "locate_task",
    "slugify",
    "task_progress",
    "zone_content_index",
]

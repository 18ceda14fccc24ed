"""PNG export of a grid.

Best-effort: any failure surfaces as ExportError and leaves the document
untouched.
"""

import base64
import io
import logging
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from mandalart.errors import ExportError
from mandalart.logging import MandalartLogger
from mandalart.messages import DEFAULT_LOCALE, get_message
from mandalart.models import MandalartData
from mandalart.render.grid import CellKind, build_grid, export_filename

logger = logging.getLogger(__name__)

CELL = 110
CELL_GAP = 2
ZONE_GAP = 14
MARGIN = 40
HEADER = 70
FOOTER = 30

BACKGROUND = "#ffffff"
COLORS = {
    CellKind.MAIN: ("#4f46e5", "#ffffff"),
    CellKind.SUB_MAIN: ("#eef2ff", "#312e81"),
    CellKind.TASK: ("#f8fafc", "#475569"),
}
COMPLETED = ("#dcfce7", "#166534")


@dataclass
class ExportResult:
    path: Optional[Path]
    data_url: str
    width: int
    height: int


def _cell_origin(row: int, col: int) -> tuple[int, int]:
    x = MARGIN + col * (CELL + CELL_GAP) + (col // 3) * ZONE_GAP
    y = MARGIN + HEADER + row * (CELL + CELL_GAP) + (row // 3) * ZONE_GAP
    return x, y


def _draw_centered(draw: ImageDraw.ImageDraw, box: tuple[int, int, int, int], text: str, fill: str, font):
    x0, y0, x1, y1 = box
    lines = textwrap.wrap(text, width=16, max_lines=5, placeholder="...") or [""]
    line_height = 14
    top = y0 + (y1 - y0 - line_height * len(lines)) // 2
    for i, line in enumerate(lines):
        left, _, right, _ = draw.textbbox((0, 0), line, font=font)
        draw.text((x0 + (x1 - x0 - (right - left)) // 2, top + i * line_height), line, fill=fill, font=font)


def rasterize(data: MandalartData, locale: str = DEFAULT_LOCALE) -> Image.Image:
    """Draw the 9x9 grid with title and footer."""
    grid_size = 9 * CELL + 8 * CELL_GAP + 2 * ZONE_GAP
    width = grid_size + 2 * MARGIN
    height = grid_size + 2 * MARGIN + HEADER + FOOTER

    image = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    _draw_centered(draw, (0, MARGIN, width, MARGIN + 30), data.main_goal, "#111827", font)
    _draw_centered(draw, (0, MARGIN + 30, width, MARGIN + 55), get_message("grid_subtitle", locale), "#6b7280", font)

    for row, cells in enumerate(build_grid(data)):
        for col, cell in enumerate(cells):
            x, y = _cell_origin(row, col)
            background, foreground = COMPLETED if cell.completed else COLORS[cell.kind]
            draw.rectangle((x, y, x + CELL, y + CELL), fill=background, outline="#e2e8f0")
            _draw_centered(draw, (x + 4, y + 4, x + CELL - 4, y + CELL - 4), cell.text, foreground, font)

    draw.text((MARGIN, height - MARGIN), "Mandalart", fill="#9ca3af", font=font)
    return image


def to_data_url(image: Image.Image) -> str:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def export_png(
    data: MandalartData,
    directory: Optional[Path] = None,
    locale: str = DEFAULT_LOCALE,
    events: Optional[MandalartLogger] = None,
) -> ExportResult:
    """Rasterize the grid, return a PNG data URL and write ``mandalart-<slug>.png``.

    With directory=None only the data URL is produced.
    """
    events = events or MandalartLogger()
    try:
        image = rasterize(data, locale)
        data_url = to_data_url(image)
        path = None
        if directory is not None:
            path = Path(directory) / export_filename(data)
            path.parent.mkdir(parents=True, exist_ok=True)
            image.save(path, format="PNG")
    except (OSError, ValueError) as e:
        events.export_failed(str(e))
        raise ExportError(get_message("export_failed", locale)) from e

    if path is not None:
        events.export_complete(str(path))
    return ExportResult(path=path, data_url=data_url, width=image.width, height=image.height)

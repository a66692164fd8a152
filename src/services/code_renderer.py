"""SVG rendering of a code matrix for the ticket screen."""

from typing import List

from models.ticket import CodeMatrix
from services.code_encoder import FINDER_SIZE, is_finder_cell

DARK = "#141420"
LIGHT = "#ffffff"
ACCENT = "#00ff88"


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _rect(x: float, y: float, side: float, fill: str) -> str:
    return (
        f'<rect x="{_fmt(x)}" y="{_fmt(y)}" width="{_fmt(side)}" '
        f'height="{_fmt(side)}" fill="{fill}"/>'
    )


def render_svg(matrix: CodeMatrix, size_px: int = 180) -> str:
    """
    Draw filled cells as dark squares and the finder corners as markers.

    Finder markers are three nested squares (dark, light, accent core) drawn
    over the reserved corners, so the matrix values there only matter to
    scanners reading the raw grid.
    """
    n = matrix.size
    cell = size_px / n
    parts: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size_px}" height="{size_px}" '
        f'viewBox="0 0 {size_px} {size_px}">',
        _rect(0, 0, size_px, LIGHT),
    ]

    for row in range(n):
        for col in range(n):
            if matrix.cell(row, col) and not is_finder_cell(row, col, n):
                parts.append(_rect(col * cell, row * cell, cell, DARK))

    far = (n - FINDER_SIZE) * cell
    for x, y in ((0, 0), (far, 0), (0, far)):
        parts.append(_rect(x, y, FINDER_SIZE * cell, DARK))
        parts.append(_rect(x + cell, y + cell, (FINDER_SIZE - 2) * cell, LIGHT))
        parts.append(_rect(x + 2 * cell, y + 2 * cell, (FINDER_SIZE - 4) * cell, ACCENT))

    parts.append("</svg>")
    return "".join(parts)

"""
Deterministic visual code encoder.

Produces a QR-like boolean grid from a payload string. This is a decorative
placeholder: there is no error correction and no standard symbol format. The
three corner finder patterns are fixed so a scanner overlay can orient the
code, and every other cell is derived from a positional hash of the payload.
"""

from typing import List

from models.ticket import CodeMatrix
from utils.error_handling import EncodingSizeError

FINDER_SIZE = 7
MIN_GRID_SIZE = 21


def is_finder_cell(row: int, col: int, grid_size: int) -> bool:
    """True when (row, col) falls inside one of the three reserved corners."""
    far = grid_size - FINDER_SIZE
    top = row < FINDER_SIZE
    left = col < FINDER_SIZE
    return (top and left) or (top and col >= far) or (row >= far and left)


def finder_cell(row: int, col: int, grid_size: int) -> bool:
    """Fixed finder pattern value: dark ring, light ring, dark 3x3 core."""
    local_row = row if row < FINDER_SIZE else row - (grid_size - FINDER_SIZE)
    local_col = col if col < FINDER_SIZE else col - (grid_size - FINDER_SIZE)
    ring = max(abs(local_row - 3), abs(local_col - 3))
    return ring != 2


class DeterministicCodeEncoder:
    """Pure payload -> matrix mapping."""

    def __init__(self, fill_modulus: int = 3):
        self.fill_modulus = fill_modulus

    def encode(self, payload: str, grid_size: int = MIN_GRID_SIZE) -> CodeMatrix:
        """
        Encode payload into a grid_size x grid_size matrix.

        Cell i (row-major) is filled when sum(ord(ch_k) * (k + i + 1)) is not
        divisible by the fill modulus. The sum splits into a constant part and
        a part linear in i, so both are folded once up front.
        """
        if grid_size < MIN_GRID_SIZE or grid_size % 2 == 0:
            raise EncodingSizeError(grid_size)

        codes = [ord(ch) for ch in payload]
        weighted = sum(code * (k + 1) for k, code in enumerate(codes))
        total = sum(codes)

        rows: List[tuple] = []
        for row in range(grid_size):
            cells = []
            for col in range(grid_size):
                if is_finder_cell(row, col, grid_size):
                    cells.append(finder_cell(row, col, grid_size))
                    continue
                index = row * grid_size + col
                cells.append((weighted + index * total) % self.fill_modulus != 0)
            rows.append(tuple(cells))

        return CodeMatrix(size=grid_size, rows=tuple(rows))

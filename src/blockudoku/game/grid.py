from __future__ import annotations

from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

import numpy as np


SIZE = 9
BOX_SIZE = 3
BOXES_PER_SIDE = SIZE // BOX_SIZE

Coordinate = Tuple[int, int]


class CellState(IntEnum):
    EMPTY = 0
    FILLED = 1


def bit_index(row: int, col: int) -> int:
    return row * SIZE + col


def _mask_of(cells: Iterable[Coordinate]) -> int:
    mask = 0
    for r, c in cells:
        mask |= 1 << bit_index(r, c)
    return mask


def row_cells(row: int) -> List[Coordinate]:
    return [(row, c) for c in range(SIZE)]


def column_cells(col: int) -> List[Coordinate]:
    return [(r, col) for r in range(SIZE)]


def box_cells(box_row: int, box_col: int) -> List[Coordinate]:
    r0 = box_row * BOX_SIZE
    c0 = box_col * BOX_SIZE
    return [(r, c) for r in range(r0, r0 + BOX_SIZE) for c in range(c0, c0 + BOX_SIZE)]


# Region masks over the 81-bit board (bit = row * 9 + col)
ROW_MASKS: Tuple[int, ...] = tuple(_mask_of(row_cells(r)) for r in range(SIZE))
COL_MASKS: Tuple[int, ...] = tuple(_mask_of(column_cells(c)) for c in range(SIZE))
BOX_MASKS: Tuple[int, ...] = tuple(
    _mask_of(box_cells(br, bc)) for br in range(BOXES_PER_SIDE) for bc in range(BOXES_PER_SIDE)
)
FULL_MASK = (1 << (SIZE * SIZE)) - 1


class Board:
    """9x9 Blockudoku board.

    ``cells`` holds 0 for empty and 1 for filled cells; ``colors`` holds the
    color key of the piece that filled each cell (``None`` when empty).
    Coordinates are ``(row, col)``. Callers must pass in-range coordinates.
    """

    def __init__(self) -> None:
        self.size = SIZE
        self.cells = np.zeros((SIZE, SIZE), dtype=np.int8)
        self.colors = np.full((SIZE, SIZE), None, dtype=object)

    @classmethod
    def from_rows(cls, rows: Iterable[str], color: str = "Default") -> "Board":
        """Build a board from strings where ``#`` marks a filled cell."""
        board = cls()
        lines = [line.replace(" ", "") for line in rows]
        if len(lines) != SIZE or any(len(line) != SIZE for line in lines):
            raise ValueError(f"expected {SIZE} rows of {SIZE} cells")
        for r, line in enumerate(lines):
            for c, ch in enumerate(line):
                if ch == "#":
                    board.fill(r, c, color)
        return board

    def reset(self) -> None:
        self.cells.fill(CellState.EMPTY)
        self.colors.fill(None)

    def get_cell(self, row: int, col: int) -> CellState:
        return CellState(int(self.cells[row, col]))

    def get_color(self, row: int, col: int) -> Optional[str]:
        return self.colors[row, col]

    def is_cell_empty(self, row: int, col: int) -> bool:
        return self.cells[row, col] == CellState.EMPTY

    def fill(self, row: int, col: int, color: str) -> None:
        self.cells[row, col] = CellState.FILLED
        self.colors[row, col] = color

    def clear(self, row: int, col: int) -> None:
        self.cells[row, col] = CellState.EMPTY
        self.colors[row, col] = None

    def is_row_full(self, row: int) -> bool:
        return bool(np.all(self.cells[row, :]))

    def is_column_full(self, col: int) -> bool:
        return bool(np.all(self.cells[:, col]))

    def is_box_full(self, box_row: int, box_col: int) -> bool:
        # box_row, box_col in 0..2
        r0 = box_row * BOX_SIZE
        c0 = box_col * BOX_SIZE
        return bool(np.all(self.cells[r0 : r0 + BOX_SIZE, c0 : c0 + BOX_SIZE]))

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def clone(self) -> "Board":
        new_board = Board()
        new_board.cells = self.cells.copy()
        new_board.colors = self.colors.copy()
        return new_board

    def to_bits(self) -> int:
        """Snapshot of the filled cells as an 81-bit integer."""
        bits = 0
        for flat in np.flatnonzero(self.cells):
            bits |= 1 << int(flat)
        return bits

    def render_text(self) -> str:
        return "\n".join("".join("█" if cell else "·" for cell in row) for row in self.cells)

    def __repr__(self) -> str:
        return f"Board(filled={self.filled_count()})"

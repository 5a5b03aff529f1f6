from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Tuple

import numpy as np


Offset = Tuple[int, int]


@dataclass(frozen=True)
class Shape:
    """Polyomino placed without rotation; orientations are separate shapes.

    ``cells`` are ``(row, col)`` offsets from the top-left of the bounding box.
    The anchor is the board cell aligned with offset ``(0, 0)``.
    """

    name: str
    cells: Tuple[Offset, ...]
    row_span: int
    col_span: int
    color: str = "Default"

    def __post_init__(self) -> None:
        if not self.cells:
            raise ValueError(f"shape {self.name!r} has no cells")
        rows = [r for r, _ in self.cells]
        cols = [c for _, c in self.cells]
        if min(rows) != 0 or min(cols) != 0:
            raise ValueError(f"shape {self.name!r} is not normalised to (0, 0)")
        if self.row_span != max(rows) + 1 or self.col_span != max(cols) + 1:
            raise ValueError(f"shape {self.name!r} has inconsistent spans")

    @property
    def cell_count(self) -> int:
        return len(self.cells)

    def mask(self) -> np.ndarray:
        """Bounding-box mask with 1 where the shape has a cell."""
        m = np.zeros((self.row_span, self.col_span), dtype=np.int8)
        for r, c in self.cells:
            m[r, c] = 1
        return m

    def cells_at(self, row: int, col: int) -> Iterable[Offset]:
        for dr, dc in self.cells:
            yield row + dr, col + dc


def make_shape(name: str, color: str, cells: Sequence[Offset]) -> Shape:
    cells = tuple((int(r), int(c)) for r, c in cells)
    row_span = max(r for r, _ in cells) + 1
    col_span = max(c for _, c in cells) + 1
    return Shape(name=name, cells=cells, row_span=row_span, col_span=col_span, color=color)


SHAPE_CATALOG: Tuple[Shape, ...] = (
    # Singles
    make_shape("Dot", "Yellow", [(0, 0)]),
    # Dominoes
    make_shape("H-Domino", "Cyan", [(0, 0), (0, 1)]),
    make_shape("V-Domino", "Cyan", [(0, 0), (1, 0)]),
    # Triominoes
    make_shape("H-Tri", "Green", [(0, 0), (0, 1), (0, 2)]),
    make_shape("V-Tri", "Green", [(0, 0), (1, 0), (2, 0)]),
    make_shape("L-Tri-1", "Green", [(0, 0), (1, 0), (1, 1)]),
    make_shape("L-Tri-2", "Green", [(0, 1), (1, 0), (1, 1)]),
    make_shape("L-Tri-3", "Green", [(0, 0), (0, 1), (1, 0)]),
    make_shape("L-Tri-4", "Green", [(0, 0), (0, 1), (1, 1)]),
    # Tetrominoes
    make_shape("I-H4", "Blue", [(0, 0), (0, 1), (0, 2), (0, 3)]),
    make_shape("I-V4", "Blue", [(0, 0), (1, 0), (2, 0), (3, 0)]),
    make_shape("O-2x2", "Orange", [(0, 0), (0, 1), (1, 0), (1, 1)]),
    make_shape("L-0", "Orange", [(0, 0), (1, 0), (2, 0), (2, 1)]),
    make_shape("L-90", "Orange", [(0, 0), (0, 1), (0, 2), (1, 0)]),
    make_shape("L-180", "Orange", [(0, 0), (0, 1), (1, 1), (2, 1)]),
    make_shape("L-270", "Orange", [(0, 2), (1, 0), (1, 1), (1, 2)]),
    make_shape("J-0", "Blue", [(0, 1), (1, 1), (2, 0), (2, 1)]),
    make_shape("J-90", "Blue", [(0, 0), (1, 0), (1, 1), (1, 2)]),
    make_shape("J-180", "Blue", [(0, 0), (0, 1), (1, 0), (2, 0)]),
    make_shape("J-270", "Blue", [(0, 0), (0, 1), (0, 2), (1, 2)]),
    # Pentominoes
    make_shape("I-H5", "Teal", [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4)]),
    make_shape("I-V5", "Teal", [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]),
    make_shape("BigL-0", "LightBlue", [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]),
    make_shape("BigL-90", "LightBlue", [(0, 0), (0, 1), (0, 2), (1, 0), (2, 0)]),
    make_shape("BigL-180", "LightBlue", [(0, 0), (0, 1), (0, 2), (1, 2), (2, 2)]),
    make_shape("BigL-270", "LightBlue", [(0, 2), (1, 2), (2, 0), (2, 1), (2, 2)]),
)

_BY_NAME: Dict[str, Shape] = {shape.name: shape for shape in SHAPE_CATALOG}


def shape_by_name(name: str) -> Shape:
    return _BY_NAME[name]


def catalog_index(shape: Shape, catalog: Sequence[Shape] = SHAPE_CATALOG) -> int:
    """Index of ``shape`` in ``catalog`` or -1 when absent."""
    for idx, candidate in enumerate(catalog):
        if candidate == shape:
            return idx
    return -1

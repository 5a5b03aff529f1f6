from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Set, Tuple

from .grid import (
    BOX_MASKS,
    BOX_SIZE,
    BOXES_PER_SIDE,
    COL_MASKS,
    ROW_MASKS,
    SIZE,
    Board,
    Coordinate,
    box_cells,
    column_cells,
    row_cells,
)


ALL_REGION_MASKS: Tuple[Tuple[int, ...], Tuple[int, ...], Tuple[int, ...]] = (ROW_MASKS, COL_MASKS, BOX_MASKS)


@dataclass(frozen=True)
class ClearResult:
    rows_cleared: int = 0
    cols_cleared: int = 0
    boxes_cleared: int = 0

    @property
    def total_cleared_regions(self) -> int:
        return self.rows_cleared + self.cols_cleared + self.boxes_cleared

    @property
    def total_cleared_cells(self) -> int:
        # Nominal count: every region contributes 9 cells even when regions overlap
        return (
            self.rows_cleared * SIZE
            + self.cols_cleared * SIZE
            + self.boxes_cleared * BOX_SIZE * BOX_SIZE
        )


def clear_completed(board: Board) -> ClearResult:
    """Clear every full row, column and 3x3 box on ``board``.

    Cells shared by several full regions are cleared once. The returned counts
    are region counts, independent of that deduplication.
    """
    rows = [r for r in range(SIZE) if board.is_row_full(r)]
    cols = [c for c in range(SIZE) if board.is_column_full(c)]
    boxes = [
        (br, bc)
        for br in range(BOXES_PER_SIDE)
        for bc in range(BOXES_PER_SIDE)
        if board.is_box_full(br, bc)
    ]
    if not rows and not cols and not boxes:
        return ClearResult()

    to_clear: Set[Coordinate] = set()
    for r in rows:
        to_clear.update(row_cells(r))
    for c in cols:
        to_clear.update(column_cells(c))
    for br, bc in boxes:
        to_clear.update(box_cells(br, bc))
    for r, c in to_clear:
        board.clear(r, c)

    return ClearResult(len(rows), len(cols), len(boxes))


def clear_bits(
    bits: int,
    rows: Sequence[int] = ROW_MASKS,
    cols: Sequence[int] = COL_MASKS,
    boxes: Sequence[int] = BOX_MASKS,
) -> Tuple[int, ClearResult]:
    """Bitboard version of :func:`clear_completed`.

    Only the given region masks are checked. Returns the cleared bitboard and
    the region counts.
    """
    full_rows = [m for m in rows if bits & m == m]
    full_cols = [m for m in cols if bits & m == m]
    full_boxes = [m for m in boxes if bits & m == m]
    if not full_rows and not full_cols and not full_boxes:
        return bits, ClearResult()
    union = 0
    for m in full_rows:
        union |= m
    for m in full_cols:
        union |= m
    for m in full_boxes:
        union |= m
    return bits & ~union, ClearResult(len(full_rows), len(full_cols), len(full_boxes))


def full_regions(bits: int) -> List[int]:
    """Masks of every full region on a bitboard."""
    return [m for group in ALL_REGION_MASKS for m in group if bits & m == m]

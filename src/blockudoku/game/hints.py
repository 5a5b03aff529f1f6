from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from .clearing import clear_bits, full_regions
from .core import GameState, HintMove
from .grid import BOX_MASKS, BOX_SIZE, BOXES_PER_SIDE, COL_MASKS, ROW_MASKS, SIZE, Board, bit_index
from .pieces import Shape
from .rules import ScoringRules


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnchorPlacement:
    """A shape translated to one anchor, with the regions it touches."""

    row: int
    col: int
    mask: int
    rows: Tuple[int, ...]
    cols: Tuple[int, ...]
    boxes: Tuple[int, ...]


# Room for the whole catalog plus ad-hoc shapes; least recently used drop out
PLACEMENT_CACHE_SIZE = 64


@lru_cache(maxsize=PLACEMENT_CACHE_SIZE)
def anchor_placements(shape: Shape) -> Tuple[AnchorPlacement, ...]:
    """Every in-bounds anchor for ``shape``, row-major ascending.

    Anchors that would push the shape over the board edge are never produced.
    """
    placements: List[AnchorPlacement] = []
    for r in range(SIZE - shape.row_span + 1):
        for c in range(SIZE - shape.col_span + 1):
            mask = 0
            rows = set()
            cols = set()
            boxes = set()
            for cr, cc in shape.cells_at(r, c):
                mask |= 1 << bit_index(cr, cc)
                rows.add(cr)
                cols.add(cc)
                boxes.add((cr // BOX_SIZE) * BOXES_PER_SIDE + cc // BOX_SIZE)
            placements.append(
                AnchorPlacement(
                    row=r,
                    col=c,
                    mask=mask,
                    rows=tuple(ROW_MASKS[i] for i in sorted(rows)),
                    cols=tuple(COL_MASKS[i] for i in sorted(cols)),
                    boxes=tuple(BOX_MASKS[i] for i in sorted(boxes)),
                )
            )
    return tuple(placements)


class HintEngine:
    """Exhaustive search for the best placement order and positions of the tray.

    Sequences are ranked by total score (higher first), then by the number of
    filled cells left on the board (fewer first). Enumeration runs slots in
    ascending order, then anchor rows, then anchor columns, and only a strict
    improvement replaces the current best, so the first-found sequence wins
    any remaining tie.

    Simulated boards are 81-bit integers built from a snapshot of the board,
    so the canonical board is never touched.
    """

    def __init__(self, rules: Optional[ScoringRules] = None) -> None:
        self.rules = rules or ScoringRules()
        self.evaluated = 0
        self._pieces: Dict[int, Tuple[Shape, Tuple[AnchorPlacement, ...]]] = {}
        self._best: Optional[List[HintMove]] = None
        self._best_score = -1
        self._best_filled = SIZE * SIZE + 1

    @property
    def best_score(self) -> int:
        """Total score of the last sequence found, -1 if none."""
        return self._best_score

    @property
    def best_filled(self) -> int:
        return self._best_filled

    def find_best(self, state: GameState) -> Optional[List[HintMove]]:
        return self.search(state.board, state.tray)

    def search(self, board: Board, tray: Sequence[Optional[Shape]]) -> Optional[List[HintMove]]:
        slots = tuple(i for i, piece in enumerate(tray) if piece is not None)
        if not slots:
            return None

        self._pieces = {slot: (tray[slot], anchor_placements(tray[slot])) for slot in slots}
        self._best = None
        self._best_score = -1
        self._best_filled = SIZE * SIZE + 1
        self.evaluated = 0

        bits = board.to_bits()
        # Only the starting board can hold full regions; every simulated board
        # after a clear has none, so later steps check touched regions only.
        self._extend(bits, slots, 0, [], scan_all=bool(full_regions(bits)))

        if self._best is None:
            logger.debug("No sequence found for tray %s", [tray[s].name for s in slots])
            return None
        logger.debug(
            "Best sequence %s: score=%d filled=%d (%d sequences evaluated)",
            self._best,
            self._best_score,
            self._best_filled,
            self.evaluated,
        )
        return list(self._best)

    def _extend(
        self,
        bits: int,
        remaining: Tuple[int, ...],
        total: int,
        moves: List[HintMove],
        scan_all: bool,
    ) -> None:
        for slot in remaining:
            piece, placements = self._pieces[slot]
            rest = tuple(s for s in remaining if s != slot)
            for p in placements:
                if bits & p.mask:
                    continue
                placed = bits | p.mask
                if scan_all:
                    after, clear = clear_bits(placed)
                else:
                    after, clear = clear_bits(placed, p.rows, p.cols, p.boxes)
                step_total = total + self.rules.score_for(piece.cell_count, clear)
                moves.append(HintMove(slot, p.row, p.col))
                if rest:
                    self._extend(after, rest, step_total, moves, scan_all=False)
                else:
                    self._consider(step_total, after.bit_count(), moves)
                moves.pop()

    def _consider(self, total: int, filled: int, moves: List[HintMove]) -> None:
        self.evaluated += 1
        if self._best is None or total > self._best_score or (
            total == self._best_score and filled < self._best_filled
        ):
            self._best = list(moves)
            self._best_score = total
            self._best_filled = filled


def find_best(state: GameState, rules: Optional[ScoringRules] = None) -> Optional[List[HintMove]]:
    """Best move sequence for ``state``'s tray, or None if nothing can be placed."""
    return HintEngine(rules).find_best(state)

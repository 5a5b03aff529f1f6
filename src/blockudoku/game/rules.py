from __future__ import annotations

from dataclasses import dataclass

from .clearing import ClearResult
from .pieces import Shape


@dataclass(frozen=True)
class ScoringRules:
    points_per_cell: int = 1
    points_per_cleared_cell: int = 2
    combo_bonus: int = 10

    def calculate(self, piece: Shape, clear: ClearResult) -> int:
        """Score delta for placing ``piece`` and then clearing ``clear``."""
        return self.score_for(piece.cell_count, clear)

    def score_for(self, cell_count: int, clear: ClearResult) -> int:
        placement_score = cell_count * self.points_per_cell
        clear_score = clear.total_cleared_cells * self.points_per_cleared_cell
        # Combo bonus starts at the second region cleared by one placement
        combo_score = max(0, clear.total_cleared_regions - 1) * self.combo_bonus
        return placement_score + clear_score + combo_score

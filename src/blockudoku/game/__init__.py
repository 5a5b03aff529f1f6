"""Game module for Blockudoku.

Exports the rules engine and the move search:
- Board: 9x9 grid with row/column/box queries
- Shape, SHAPE_CATALOG: fixed library of polyominoes
- clear_completed, ClearResult: region clearing
- ScoringRules: placement, clear and combo scoring
- BlockudokuGame, GameState: canonical game state and placement flow
- HintEngine, find_best: exhaustive best-sequence search
- AutoPlayer: hint-driven self play
"""

from .grid import Board, CellState, SIZE, BOX_SIZE
from .pieces import Shape, SHAPE_CATALOG, make_shape, shape_by_name
from .clearing import ClearResult, clear_completed
from .rules import ScoringRules
from .core import (
    BlockudokuGame,
    GameConfig,
    GamePhase,
    GameState,
    HintMove,
    PlacementResult,
)
from .hints import HintEngine, find_best
from .autoplay import AutoPlayer

__all__ = [
    "Board",
    "CellState",
    "SIZE",
    "BOX_SIZE",
    "Shape",
    "SHAPE_CATALOG",
    "make_shape",
    "shape_by_name",
    "ClearResult",
    "clear_completed",
    "ScoringRules",
    "BlockudokuGame",
    "GameConfig",
    "GamePhase",
    "GameState",
    "HintMove",
    "PlacementResult",
    "HintEngine",
    "find_best",
    "AutoPlayer",
]

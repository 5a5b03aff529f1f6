from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

from .clearing import clear_completed
from .grid import SIZE, Board
from .pieces import SHAPE_CATALOG, Shape, catalog_index
from .rules import ScoringRules


logger = logging.getLogger(__name__)

Chooser = Callable[[int], int]
TRAY_SIZE = 3


class GamePhase(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"


class HintMove(NamedTuple):
    """One step of a suggested sequence: place tray ``slot`` at ``(row, col)``."""

    slot: int
    row: int
    col: int


@dataclass
class GameConfig:
    grid_size: int = SIZE
    pieces_per_set: int = TRAY_SIZE
    random_seed: Optional[int] = None
    max_episode_steps: int = 10000

    def __post_init__(self) -> None:
        if self.grid_size != SIZE:
            raise ValueError(f"Blockudoku is played on a {SIZE}x{SIZE} grid")
        if self.pieces_per_set != TRAY_SIZE:
            raise ValueError(f"the tray holds exactly {TRAY_SIZE} pieces")


@dataclass(frozen=True)
class PlacementResult:
    success: bool
    rows_cleared: int = 0
    cols_cleared: int = 0
    boxes_cleared: int = 0
    score_delta: int = 0
    combo_count: int = 0

    @classmethod
    def failed(cls) -> "PlacementResult":
        return cls(success=False)


@dataclass
class GameState:
    board: Board = field(default_factory=Board)
    tray: List[Optional[Shape]] = field(default_factory=lambda: [None] * TRAY_SIZE)
    score: int = 0
    high_score: int = 0
    phase: GamePhase = GamePhase.PLAYING
    # Drag bookkeeping for the front end; -1 means nothing is being dragged
    dragging_index: int = -1
    drag_pick_row: int = 0
    drag_pick_col: int = 0
    hint_moves: List[HintMove] = field(default_factory=list)

    @property
    def hint_active(self) -> bool:
        return len(self.hint_moves) > 0

    def clear_hint(self) -> None:
        self.hint_moves.clear()

    def reset_drag(self) -> None:
        self.dragging_index = -1
        self.drag_pick_row = 0
        self.drag_pick_col = 0

    def occupied_slots(self) -> List[int]:
        return [i for i, piece in enumerate(self.tray) if piece is not None]

    def snapshot(self) -> "GameState":
        """Independent copy; mutating it never touches this state."""
        return GameState(
            board=self.board.clone(),
            tray=list(self.tray),
            score=self.score,
            high_score=self.high_score,
            phase=self.phase,
            hint_moves=list(self.hint_moves),
        )


def can_place_on(board: Board, piece: Shape, row: int, col: int) -> bool:
    for r, c in piece.cells_at(row, col):
        if r < 0 or r >= SIZE or c < 0 or c >= SIZE:
            return False
        if not board.is_cell_empty(r, c):
            return False
    return True


class BlockudokuGame:
    """Main game engine: owns and is the only mutator of the canonical state."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Sequence[Shape] = SHAPE_CATALOG,
        chooser: Optional[Chooser] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        if not catalog:
            raise ValueError("shape catalog is empty")
        self.catalog: Tuple[Shape, ...] = tuple(catalog)
        self.rng = random.Random(self.config.random_seed)
        self.chooser: Chooser = chooser or self.rng.randrange
        self.state = GameState(tray=[None] * self.config.pieces_per_set)
        self.new_game()

    # Read accessors -----------------------------------------------------

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def tray(self) -> List[Optional[Shape]]:
        return self.state.tray

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def high_score(self) -> int:
        return self.state.high_score

    @high_score.setter
    def high_score(self, value: int) -> None:
        self.state.high_score = max(0, int(value))

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def game_over(self) -> bool:
        return self.state.phase == GamePhase.GAME_OVER

    # Game flow ----------------------------------------------------------

    def new_game(self) -> None:
        self.state.board.reset()
        self.state.score = 0
        self.state.phase = GamePhase.PLAYING
        self.state.reset_drag()
        self.state.clear_hint()
        self.refill_tray()
        logger.debug("New game, tray: %s", self.tray_names())

    def refill_tray(self) -> None:
        """Fill every tray slot with an independent uniform draw from the catalog."""
        n = len(self.catalog)
        self.state.tray = [self.catalog[self.chooser(n)] for _ in range(self.config.pieces_per_set)]

    def can_place(self, piece: Shape, row: int, col: int) -> bool:
        return can_place_on(self.state.board, piece, row, col)

    def try_place(self, slot: int, row: int, col: int) -> PlacementResult:
        """Place tray ``slot`` with its (0, 0) offset at ``(row, col)``.

        Returns a failed result, without touching the state, when the game is
        over, the slot is empty or the piece does not fit.
        """
        state = self.state
        if state.phase != GamePhase.PLAYING:
            return PlacementResult.failed()
        if slot < 0 or slot >= len(state.tray):
            return PlacementResult.failed()
        piece = state.tray[slot]
        if piece is None:
            return PlacementResult.failed()
        if not self.can_place(piece, row, col):
            logger.debug("Rejected %s at (%d, %d)", piece.name, row, col)
            return PlacementResult.failed()

        for r, c in piece.cells_at(row, col):
            state.board.fill(r, c, piece.color)
        state.tray[slot] = None

        clear = clear_completed(state.board)
        delta = self.rules.calculate(piece, clear)
        state.score += delta
        if state.score > state.high_score:
            state.high_score = state.score

        if all(p is None for p in state.tray):
            self.refill_tray()

        if not self.any_piece_fits():
            state.phase = GamePhase.GAME_OVER
            logger.info("Game over with score %d (best %d)", state.score, state.high_score)

        return PlacementResult(
            success=True,
            rows_cleared=clear.rows_cleared,
            cols_cleared=clear.cols_cleared,
            boxes_cleared=clear.boxes_cleared,
            score_delta=delta,
            combo_count=clear.total_cleared_regions,
        )

    def any_piece_fits(self) -> bool:
        for piece in self.state.tray:
            if piece is None:
                continue
            for r in range(SIZE):
                for c in range(SIZE):
                    if self.can_place(piece, r, c):
                        return True
        return False

    # Helpers for agents and front ends ---------------------------------

    def valid_placements(self, slot: int) -> List[Tuple[int, int]]:
        if slot < 0 or slot >= len(self.state.tray):
            return []
        piece = self.state.tray[slot]
        if piece is None:
            return []
        return [
            (r, c)
            for r in range(SIZE - piece.row_span + 1)
            for c in range(SIZE - piece.col_span + 1)
            if self.can_place(piece, r, c)
        ]

    def valid_actions(self) -> List[Tuple[int, int, int]]:
        """List of legal ``(slot, row, col)`` placements."""
        actions: List[Tuple[int, int, int]] = []
        for slot in range(len(self.state.tray)):
            for r, c in self.valid_placements(slot):
                actions.append((slot, r, c))
        return actions

    def tray_names(self) -> List[Optional[str]]:
        return [p.name if p is not None else None for p in self.state.tray]

    def tray_indices(self) -> List[int]:
        return [catalog_index(p, self.catalog) if p is not None else -1 for p in self.state.tray]

    def get_state(self) -> dict:
        return {
            "grid": self.state.board.cells.copy(),
            "tray": self.tray_names(),
            "pieces_remaining": len(self.state.occupied_slots()),
            "score": self.state.score,
            "high_score": self.state.high_score,
            "game_over": self.game_over,
            "filled_cells": self.state.board.filled_count(),
        }

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from .core import BlockudokuGame, GamePhase, HintMove, PlacementResult
from .hints import HintEngine


logger = logging.getLogger(__name__)


class AutoStep(Enum):
    SHOW_HINT = "show_hint"
    EXECUTE = "execute"


class AutoPlayer:
    """Plays the game by itself, one search per tray round.

    Each :meth:`step` either computes the best sequence and publishes it as the
    game's hint (``SHOW_HINT``) or executes the next move of that sequence
    (``EXECUTE``). A front end calls ``step`` from a timer so the hint is
    visible before the pieces move.
    """

    def __init__(self, game: BlockudokuGame, engine: Optional[HintEngine] = None) -> None:
        self.game = game
        self.engine = engine or HintEngine(game.rules)
        self.running = False
        self.next_step = AutoStep.SHOW_HINT
        self._moves: List[HintMove] = []
        self._index = 0

    def start(self) -> None:
        self.running = True
        self.next_step = AutoStep.SHOW_HINT
        self._moves = []
        self._index = 0

    def stop(self) -> None:
        self.running = False
        self._moves = []
        self.game.state.clear_hint()

    def step(self) -> Optional[PlacementResult]:
        """Advance one phase. Returns the placement result on ``EXECUTE`` steps."""
        if not self.running:
            return None
        state = self.game.state
        if self.next_step == AutoStep.SHOW_HINT:
            moves = self.engine.find_best(state.snapshot())
            if not moves or state.phase != GamePhase.PLAYING:
                logger.info("Auto-play stopped: no sequence available")
                self.stop()
                return None
            self._moves = moves
            self._index = 0
            state.hint_moves = list(moves)
            self.next_step = AutoStep.EXECUTE
            return None

        move = self._moves[self._index]
        self._index += 1
        result = self.game.try_place(move.slot, move.row, move.col)
        if state.hint_moves:
            state.hint_moves.pop(0)
        if state.phase == GamePhase.GAME_OVER:
            self.stop()
            return result
        if self._index >= len(self._moves):
            self.next_step = AutoStep.SHOW_HINT
        return result

    def play_round(self) -> List[PlacementResult]:
        """Compute one sequence and execute all of it."""
        if not self.running:
            self.start()
        results: List[PlacementResult] = []
        self.step()
        while self.running and self.next_step == AutoStep.EXECUTE:
            result = self.step()
            if result is not None:
                results.append(result)
        return results

    def play_until_over(self, max_moves: Optional[int] = None) -> int:
        """Play until game over or ``max_moves`` placements; returns moves made."""
        self.start()
        moves = 0
        while self.running:
            if max_moves is not None and moves >= max_moves:
                self.stop()
                break
            result = self.step()
            if result is not None:
                moves += 1
        return moves

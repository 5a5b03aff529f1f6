from __future__ import annotations

from typing import Iterable, Optional, Sequence

from blockudoku.game import SHAPE_CATALOG, BlockudokuGame, Board, shape_by_name


def checkerboard() -> Board:
    """Empty where (row + col) is even; no two empty cells are adjacent."""
    rows = ["".join("." if (r + c) % 2 == 0 else "#" for c in range(9)) for r in range(9)]
    return Board.from_rows(rows)


def sparse_board() -> Board:
    """Full except both diagonals and the centre cell of the edge boxes."""
    empty = {(r, r) for r in range(9)} | {(r, 8 - r) for r in range(9)}
    empty |= {(1, 4), (4, 1), (4, 7), (7, 4)}
    rows = ["".join("." if (r, c) in empty else "#" for c in range(9)) for r in range(9)]
    return Board.from_rows(rows)


def fixed_chooser(names: Iterable[str]):
    """Chooser that cycles through the catalog indices of ``names``."""
    indices = [SHAPE_CATALOG.index(shape_by_name(n)) for n in names]
    calls = {"i": 0}

    def choose(n: int) -> int:
        idx = indices[calls["i"] % len(indices)]
        calls["i"] += 1
        return idx

    return choose


def make_game(tray: Sequence[Optional[str]], board: Optional[Board] = None,
              refill: Sequence[str] = ("Dot",)) -> BlockudokuGame:
    """Game whose board and tray are set explicitly; refills draw from ``refill``."""
    game = BlockudokuGame(chooser=fixed_chooser(refill))
    if board is not None:
        game.state.board = board
    game.state.tray = [shape_by_name(n) if n is not None else None for n in tray]
    return game

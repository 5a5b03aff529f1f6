from typing import List, Optional, Sequence, Tuple

from blockudoku.game import (
    Board,
    GameState,
    HintEngine,
    HintMove,
    ScoringRules,
    Shape,
    clear_completed,
    find_best,
    make_shape,
    shape_by_name,
)
from blockudoku.game.core import can_place_on
from blockudoku.game.hints import PLACEMENT_CACHE_SIZE, anchor_placements

from tests.helpers import checkerboard, sparse_board


def state_with(tray: Sequence[Optional[str]], board: Optional[Board] = None) -> GameState:
    return GameState(
        board=board if board is not None else Board(),
        tray=[shape_by_name(n) if n is not None else None for n in tray],
    )


def reference_search(board: Board, tray: Sequence[Optional[Shape]]) -> Tuple[Optional[List[HintMove]], int, int]:
    """Straightforward search on cloned boards, used to check the engine."""
    rules = ScoringRules()
    best: dict = {"moves": None, "score": -1, "filled": 0}

    def visit(current: Board, remaining: List[int], total: int, moves: List[HintMove]) -> None:
        for slot in remaining:
            piece = tray[slot]
            rest = [s for s in remaining if s != slot]
            for r in range(9 - piece.row_span + 1):
                for c in range(9 - piece.col_span + 1):
                    if not can_place_on(current, piece, r, c):
                        continue
                    nxt = current.clone()
                    for cr, cc in piece.cells_at(r, c):
                        nxt.fill(cr, cc, piece.color)
                    step = total + rules.calculate(piece, clear_completed(nxt))
                    path = moves + [HintMove(slot, r, c)]
                    if rest:
                        visit(nxt, rest, step, path)
                    else:
                        filled = nxt.filled_count()
                        if best["moves"] is None or step > best["score"] or (
                            step == best["score"] and filled < best["filled"]
                        ):
                            best.update(moves=path, score=step, filled=filled)

    visit(board, [i for i, p in enumerate(tray) if p is not None], 0, [])
    return best["moves"], best["score"], best["filled"]


def test_empty_tray_has_no_hint():
    assert find_best(state_with([None, None, None])) is None


def test_single_piece_that_fits_nowhere_has_no_hint():
    assert find_best(state_with([None, "I-H5", None], checkerboard())) is None


def test_single_piece_returns_one_move():
    moves = find_best(state_with([None, None, "Dot"], checkerboard()))
    # Every anchor scores the same, the first in row-major order wins
    assert moves == [HintMove(2, 0, 0)]


def test_prefers_the_clearing_move():
    board = Board.from_rows(["########."] + ["........."] * 8)
    engine = HintEngine()
    moves = engine.find_best(state_with([None, "Dot", None], board))
    assert moves == [HintMove(1, 0, 8)]
    assert engine.best_score == 19
    assert engine.best_filled == 0


def test_equal_scores_prefer_fewer_filled_cells():
    # A dot at (0, 8) clears row 0 and box (0, 2): 15 distinct cells.
    # A dot at (4, 4) clears row 4 and column 4: 17 distinct cells.
    # Both score 47; the second leaves the board emptier.
    board = Board.from_rows(
        [
            "########.",
            "....#.###",
            "....#.###",
            "....#....",
            "####.####",
            "....#....",
            "....#....",
            "....#....",
            "....#....",
        ]
    )
    engine = HintEngine()
    moves = engine.find_best(state_with(["Dot", None, None], board))
    assert moves == [HintMove(0, 4, 4)]
    assert engine.best_score == 47
    assert engine.best_filled == 13


def test_first_found_sequence_wins_full_ties():
    board = Board.from_rows(["########."] + ["........."] * 8)
    moves = find_best(state_with(["Dot", "Dot", None], board))
    assert moves == [HintMove(0, 0, 8), HintMove(1, 0, 0)]


def test_later_piece_uses_cells_opened_by_earlier_clear():
    rows = ["########."] + [
        "".join("." if (r + c) % 2 == 0 else "#" for c in range(9)) for r in range(1, 9)
    ]
    board = Board.from_rows(rows)
    engine = HintEngine()
    moves = engine.find_best(state_with(["I-H5", "Dot", None], board))
    # The bar fits only after the dot clears row 0, so slot 1 goes first
    assert moves == [HintMove(1, 0, 8), HintMove(0, 0, 0)]
    assert engine.best_score == 19 + 5


def test_result_has_one_move_per_occupied_slot():
    state = state_with(["Dot", "Dot", "Dot"], sparse_board())
    moves = find_best(state)
    assert moves is not None
    assert len(moves) == 3
    assert sorted(m.slot for m in moves) == [0, 1, 2]


def test_search_does_not_touch_the_state():
    state = state_with(["Dot", "V-Domino", "Dot"], sparse_board())
    cells = state.board.cells.copy()
    colors = state.board.colors.copy()
    tray = list(state.tray)

    find_best(state)

    assert (state.board.cells == cells).all()
    assert (state.board.colors == colors).all()
    assert state.tray == tray
    assert state.score == 0


def test_search_is_deterministic():
    state = state_with(["Dot", "L-Tri-3", "Dot"], sparse_board())
    first = find_best(state)
    second = find_best(state)
    assert first is not None
    assert first == second


def test_matches_reference_search_on_cloned_boards():
    board = sparse_board()
    tray = [shape_by_name("Dot"), None, shape_by_name("L-Tri-1")]
    engine = HintEngine()
    moves = engine.search(board, tray)
    expected, score, filled = reference_search(board, tray)
    assert moves == expected
    assert (engine.best_score, engine.best_filled) == (score, filled)


def test_full_regions_on_starting_board_are_cleared_by_first_step():
    board = Board.from_rows(["........."] * 8 + ["#########"])
    engine = HintEngine()
    moves = engine.find_best(state_with([None, "Dot", None], board))
    assert moves == [HintMove(1, 0, 0)]
    assert engine.best_score == 19
    assert engine.best_filled == 1


def test_anchor_placements_never_overflow():
    bar = shape_by_name("I-V5")
    placements = anchor_placements(bar)
    assert len(placements) == 5 * 9
    assert placements[0].row == 0 and placements[0].col == 0
    assert max(p.row for p in placements) == 4
    assert anchor_placements(bar) is placements


def test_placement_cache_stays_bounded_with_many_shapes():
    for i in range(PLACEMENT_CACHE_SIZE * 3):
        anchor_placements(make_shape(f"adhoc-{i}", "#123456", [(0, 0), (0, 1)]))
    info = anchor_placements.cache_info()
    assert info.maxsize == PLACEMENT_CACHE_SIZE
    assert info.currsize <= PLACEMENT_CACHE_SIZE

from __future__ import annotations

import argparse
import logging

import pygame

from blockudoku.game import AutoPlayer, BlockudokuGame, GameConfig, GamePhase, HintEngine
from blockudoku.game.autoplay import AutoStep
from blockudoku.storage import HighScoreStore
from .renderer import BACKGROUND, GHOST_INVALID, GHOST_VALID, Renderer


logger = logging.getLogger(__name__)

AUTO_SHOW_HINT_MS = 1000
AUTO_EXECUTE_MS = 350


def run(seed: int | None = None) -> None:
    store = HighScoreStore()
    game = BlockudokuGame(GameConfig(random_seed=seed))
    game.high_score = store.load()
    state = game.state
    hints = HintEngine(game.rules)
    auto = AutoPlayer(game, hints)
    renderer = Renderer()

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size)
        pygame.display.set_caption("Blockudoku")
        font = pygame.font.SysFont(None, 26)
        clock = pygame.time.Clock()
        next_auto = 0
        saved_over = False

        running = True
        while running:
            now = pygame.time.get_ticks()
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_n:
                        auto.stop()
                        game.new_game()
                        saved_over = False
                    elif event.key == pygame.K_h and not auto.running and state.phase == GamePhase.PLAYING:
                        if state.hint_active:
                            state.clear_hint()
                        else:
                            state.hint_moves = hints.find_best(state.snapshot()) or []
                    elif event.key == pygame.K_a and state.phase == GamePhase.PLAYING:
                        if auto.running:
                            auto.stop()
                        else:
                            state.reset_drag()
                            auto.start()
                            next_auto = now
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not auto.running:
                    hit = renderer.tray_hit(*event.pos, state.tray)
                    if hit is not None and state.phase == GamePhase.PLAYING:
                        state.dragging_index, state.drag_pick_row, state.drag_pick_col = hit
                        state.clear_hint()
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and state.dragging_index >= 0:
                    row, col = renderer.pixel_to_cell(*event.pos)
                    result = game.try_place(state.dragging_index, row - state.drag_pick_row, col - state.drag_pick_col)
                    if result.success and result.combo_count:
                        logger.debug("Cleared %d region(s) for %d points", result.combo_count, result.score_delta)
                    state.reset_drag()

            if auto.running and now >= next_auto:
                result = auto.step()
                if result is not None and auto.next_step == AutoStep.EXECUTE:
                    next_auto = now + AUTO_EXECUTE_MS
                else:
                    next_auto = now + AUTO_SHOW_HINT_MS

            if state.phase == GamePhase.GAME_OVER and not saved_over:
                store.save(game.high_score)
                saved_over = True

            # Draw
            screen.fill(BACKGROUND)
            renderer.draw_board(screen, state.board)
            renderer.draw_hint(screen, state.tray, state.hint_moves, font)
            if state.dragging_index >= 0:
                piece = state.tray[state.dragging_index]
                mouse = pygame.mouse.get_pos()
                row, col = renderer.pixel_to_cell(*mouse)
                anchor = (row - state.drag_pick_row, col - state.drag_pick_col)
                valid = game.can_place(piece, *anchor)
                renderer.draw_cells(screen, piece, *anchor, GHOST_VALID if valid else GHOST_INVALID, width=2)
                renderer.draw_dragged(screen, piece, mouse, (state.drag_pick_row, state.drag_pick_col))
            renderer.draw_tray(screen, state.tray, state.dragging_index, state.hint_moves, font)

            if state.phase == GamePhase.GAME_OVER:
                message = f"Game over! Final score {state.score}. N: new game"
            elif auto.running:
                message = "Auto-play (A to stop)"
            else:
                message = "Drag pieces  H: hint  A: auto  N: new game"
            renderer.draw_status(screen, state.score, state.high_score, message, font)

            pygame.display.flip()
            clock.tick(60)
    finally:
        store.save(game.high_score)
        pygame.quit()


def main() -> None:
    p = argparse.ArgumentParser(description="Play Blockudoku")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug-level logging")
    args = p.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    run(args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()

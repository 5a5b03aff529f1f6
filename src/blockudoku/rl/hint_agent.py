from __future__ import annotations

import argparse
import logging
import time
from typing import List, Optional

from blockudoku.game import AutoPlayer, BlockudokuGame, GameConfig
from blockudoku.storage import HighScoreStore


logger = logging.getLogger("blockudoku.hint_agent")


def play_games(games: int, seed: Optional[int] = None, max_moves: Optional[int] = None,
               store: Optional[HighScoreStore] = None) -> List[int]:
    """Let the search play ``games`` full games; returns the final scores."""
    game = BlockudokuGame(GameConfig(random_seed=seed))
    if store is not None:
        game.high_score = store.load()
    player = AutoPlayer(game)
    scores: List[int] = []
    for i in range(games):
        if i > 0:
            game.new_game()
        started = time.perf_counter()
        moves = player.play_until_over(max_moves)
        elapsed = time.perf_counter() - started
        logger.info("Game %d: score %d after %d moves (%.1fs)", i + 1, game.score, moves, elapsed)
        scores.append(game.score)
    if store is not None:
        store.save(game.high_score)
    return scores


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Auto-play Blockudoku with the best-sequence search")
    p.add_argument("--games", type=int, default=1)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--max_moves", type=int, default=None)
    p.add_argument("--save_high_score", action="store_true",
                   help="Load and update the persisted high score")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug-level logging")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    store = HighScoreStore() if args.save_high_score else None
    scores = play_games(args.games, seed=args.seed, max_moves=args.max_moves, store=store)
    print(f"Scores: {scores}  best: {max(scores) if scores else 0}")


if __name__ == "__main__":  # pragma: no cover
    main()

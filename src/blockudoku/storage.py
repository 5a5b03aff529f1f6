from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

HOME_ENV = "BLOCKUDOKU_HOME"


def default_path() -> Path:
    home = os.environ.get(HOME_ENV)
    base = Path(home) if home else Path.home() / ".blockudoku"
    return base / "highscore.txt"


class HighScoreStore:
    """Keeps the best score in a one-line text file."""

    def __init__(self, path: Optional[Path | str] = None) -> None:
        self.path = Path(path) if path is not None else default_path()

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            return max(0, int(self.path.read_text(encoding="utf-8").strip()))
        except (OSError, UnicodeDecodeError, ValueError):
            logger.warning("Ignoring unreadable high score file %s", self.path)
            return 0

    def save(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{int(score)}\n", encoding="utf-8")
        logger.debug("Saved high score %d to %s", score, self.path)

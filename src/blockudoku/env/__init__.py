"""Gymnasium environment for Blockudoku."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .blockudoku_env import BlockudokuEnv

# Register the placement environment: action = (slot, row, col)
register(
    id="Blockudoku-9x9-v0",
    entry_point="blockudoku.env.blockudoku_env:BlockudokuEnv",
)

__all__ = ["BlockudokuEnv"]

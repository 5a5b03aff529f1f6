from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockudoku.game import SHAPE_CATALOG, BlockudokuGame, GameConfig, ScoringRules, Shape


def _compute_action_mask(game: BlockudokuGame) -> np.ndarray:
    size = game.config.grid_size
    k = game.config.pieces_per_set
    mask = np.zeros((k, size, size), dtype=np.bool_)
    for slot, row, col in game.valid_actions():
        mask[slot, row, col] = True
    return mask


class BlockudokuEnv(gym.Env):
    """Place one tray piece per step; the reward is the engine's score delta."""

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Sequence[Shape] = SHAPE_CATALOG,
        reward_scale: float = 1.0,
        invalid_action_penalty: float = -1.0,
        terminal_penalty: float = 0.0,
    ) -> None:
        super().__init__()
        self.game = BlockudokuGame(config, rules=rules, catalog=catalog, chooser=self._choose)
        self.render_mode = render_mode
        self.reward_scale = float(reward_scale)
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)

        size = self.game.config.grid_size
        k = self.game.config.pieces_per_set
        n_shapes = len(self.game.catalog)

        # Observation: grid (0/1) and tray pieces as catalog indices (-1 for empty)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=1, shape=(size, size), dtype=np.int8),
                "pieces": spaces.Box(low=-1, high=n_shapes - 1, shape=(k,), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
            }
        )

        # Action: (slot, row, col) anchor
        self.action_space = spaces.MultiDiscrete((k, size, size))

        self._steps = 0

    def _choose(self, n: int) -> int:
        # Draw from the env's seeded generator so reset(seed=...) is reproducible
        return int(self.np_random.integers(n))

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.board.cells.astype(np.int8),
            "pieces": np.array(self.game.tray_indices(), dtype=np.int8),
            "pieces_remaining": len(self.game.state.occupied_slots()),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "score": self.game.score,
            "high_score": self.game.high_score,
            "steps": self._steps,
        }

    def action_masks(self) -> np.ndarray:
        """Flat boolean mask, as expected by sb3-contrib's MaskablePPO."""
        return _compute_action_mask(self.game).reshape(-1)

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[dict] = None
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.new_game()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        slot, row, col = map(int, action)

        result = self.game.try_place(slot, row, col)
        self._steps += 1

        if result.success:
            reward = self.reward_scale * float(result.score_delta)
        else:
            reward = self.invalid_action_penalty

        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.game.config.max_episode_steps
        if terminated:
            reward += self.terminal_penalty

        info = self._get_info()
        info["placement"] = result
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        cells = self.game.board.cells
        cell = 12
        h, w = cells.shape
        img = np.full((h * cell, w * cell, 3), 232, dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                # Alternate box shading so the 3x3 boxes are visible
                shade = 248 if ((y // 3) + (x // 3)) % 2 == 0 else 225
                color = (30, 90, 180) if cells[y, x] else (shade, shade, shade)
                img[y * cell : (y + 1) * cell - 1, x * cell : (x + 1) * cell - 1, :] = color
        return img

    def close(self) -> None:
        pass

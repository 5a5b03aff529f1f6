from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .blockudoku_env import _compute_action_mask


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Expose the tray placement as a single integer.

    Index ``slot * 81 + row * 9 + col`` maps back to the ``(slot, row, col)``
    triple the Blockudoku env expects, giving ``Discrete(243)`` for the
    three-slot tray. ``get_action_mask()`` returns the env's placement mask
    laid out in the same slot-major order.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.MultiDiscrete)
        slots, rows, cols = map(int, env.action_space.nvec)
        assert rows == cols, "board must be square"
        self.slots = slots
        self.size = rows
        self.cells = rows * cols
        self.action_space = spaces.Discrete(slots * self.cells)

    def _unflatten(self, idx: int) -> tuple[int, int, int]:
        slot, cell = divmod(idx, self.cells)
        row, col = divmod(cell, self.size)
        return int(slot), int(row), int(col)

    def action(self, action: int):  # type: ignore[override]
        return np.array(self._unflatten(int(action)), dtype=np.int64)

    def get_action_mask(self) -> np.ndarray:
        # (slots, 9, 9) -> (slots * 81,)
        return _compute_action_mask(self.env.unwrapped.game).reshape(-1)


class ResampleInvalidActionWrapper(gym.Wrapper):
    """Swap an illegal flat action for a random legal placement.

    Lets an unmasked policy keep playing instead of burning steps on the
    invalid-action penalty. Draws come from the env's ``np_random`` so a
    seeded reset replays the same substitutions. When no placement is legal
    the action passes through unchanged.
    """

    def step(self, action):  # type: ignore[override]
        if isinstance(self.action_space, spaces.Discrete) and hasattr(self.env, "get_action_mask"):
            mask = self.get_action_mask()
            idx = int(action)
            if 0 <= idx < mask.shape[0] and not mask[idx]:
                legal = np.flatnonzero(mask)
                if legal.size:
                    action = int(self.np_random.choice(legal))
        return self.env.step(action)

    def get_action_mask(self) -> np.ndarray:
        if not hasattr(self.env, "get_action_mask"):
            raise AttributeError(f"{type(self.env).__name__} has no placement mask")
        return self.env.get_action_mask()

from __future__ import annotations

import random
from typing import Optional

import gymnasium as gym

import blockudoku.env  # noqa: F401  (registers the env)


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    rng = random.Random(seed)
    env = gym.make("Blockudoku-9x9-v0")
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    for _ in range(steps):
        # Prefer valid actions if available
        valid = list(zip(*info["action_mask"].nonzero()))
        if valid:
            action = rng.choice(valid)
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


if __name__ == "__main__":  # pragma: no cover
    run_random()

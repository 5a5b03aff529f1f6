from __future__ import annotations

import argparse
import logging
import os

import gymnasium as gym

# Ensure envs are registered
import blockudoku.env  # noqa: F401
from blockudoku.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper


logger = logging.getLogger("blockudoku.train_ppo")

ENV_ID = "Blockudoku-9x9-v0"


def make_env(seed: int | None = None) -> gym.Env:
    env = gym.make(ENV_ID)
    env = FlattenDiscreteActionWrapper(env)
    # Resample invalid actions for vanilla PPO; also forwards get_action_mask
    env = ResampleInvalidActionWrapper(env)
    if seed is not None:
        env.reset(seed=seed)
    return env


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--algo", choices=["ppo", "maskable"], default="maskable")
    p.add_argument("--timesteps", type=int, default=200_000)
    p.add_argument("--logdir", type=str, default="./logs/ppo")
    p.add_argument("--save_path", type=str, default="./models/ppo_blockudoku.zip")
    p.add_argument("--n_envs", type=int, default=4)
    p.add_argument("--seed", type=int, default=None)
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    from stable_baselines3.common.vec_env import SubprocVecEnv, VecMonitor

    def make_env_idx(i: int):
        def thunk():
            seed = None if args.seed is None else args.seed + i
            e = make_env(seed)
            if args.algo == "maskable":
                from sb3_contrib.common.wrappers import ActionMasker

                e = ActionMasker(e, lambda env: env.get_action_mask())
            return e
        return thunk

    vec_env = VecMonitor(SubprocVecEnv([make_env_idx(i) for i in range(args.n_envs)]))

    if args.algo == "maskable":
        from sb3_contrib import MaskablePPO as Algo
    else:
        from stable_baselines3 import PPO as Algo

    model = Algo(
        policy="MultiInputPolicy",
        env=vec_env,
        verbose=1,
        tensorboard_log=args.logdir,
    )
    logger.info("Training %s for %d timesteps", args.algo, args.timesteps)

    os.makedirs(os.path.dirname(args.save_path), exist_ok=True)
    model.learn(total_timesteps=args.timesteps)
    model.save(args.save_path)
    logger.info("Saved model to %s", args.save_path)


if __name__ == "__main__":  # pragma: no cover
    main()

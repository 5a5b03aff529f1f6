import gymnasium as gym
import numpy as np
import pytest

import blockudoku.env  # noqa: F401
from blockudoku.env import BlockudokuEnv
from blockudoku.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper
from blockudoku.game import shape_by_name


def test_reset_observation_and_mask():
    env = BlockudokuEnv()
    obs, info = env.reset(seed=3)
    assert obs["grid"].shape == (9, 9)
    assert obs["grid"].sum() == 0
    assert obs["pieces"].shape == (3,)
    assert (obs["pieces"] >= 0).all()
    assert obs["pieces_remaining"] == 3
    assert info["action_mask"].shape == (3, 9, 9)
    assert info["action_mask"].any()
    assert env.observation_space.contains(obs)


def test_same_seed_same_tray():
    a = BlockudokuEnv()
    b = BlockudokuEnv()
    obs_a, _ = a.reset(seed=11)
    obs_b, _ = b.reset(seed=11)
    assert (obs_a["pieces"] == obs_b["pieces"]).all()


def test_reward_is_score_delta_and_invalid_is_penalised():
    env = BlockudokuEnv(catalog=[shape_by_name("I-H5")], invalid_action_penalty=-2.0)
    env.reset(seed=0)

    _, reward, terminated, truncated, info = env.step((0, 0, 5))
    assert reward == -2.0
    assert not info["placement"].success

    obs, reward, terminated, truncated, info = env.step(np.array([0, 0, 0]))
    assert reward == 5.0
    assert info["score"] == 5
    assert obs["pieces"][0] == -1
    assert obs["pieces_remaining"] == 2
    assert not info["action_mask"][0].any()
    assert not terminated and not truncated


def test_registered_env_runs():
    env = gym.make("Blockudoku-9x9-v0")
    obs, info = env.reset(seed=5)
    slot, row, col = np.argwhere(info["action_mask"])[0]
    obs, reward, terminated, truncated, info = env.step(np.array([slot, row, col]))
    assert reward > 0
    env.close()


def test_flatten_wrapper_round_trip_order():
    env = FlattenDiscreteActionWrapper(BlockudokuEnv())
    env.reset(seed=1)
    assert env.action_space.n == 3 * 9 * 9
    assert env._unflatten(0) == (0, 0, 0)
    assert env._unflatten(81 + 9 + 2) == (1, 1, 2)
    mask = env.get_action_mask()
    assert mask.shape == (243,)
    assert mask.any()


def test_resample_wrapper_replaces_invalid_action():
    env = ResampleInvalidActionWrapper(FlattenDiscreteActionWrapper(BlockudokuEnv(catalog=[shape_by_name("I-H5")])))
    env.reset(seed=2)
    invalid = 5  # slot 0, row 0, col 5 overflows the bar
    assert not env.get_action_mask()[invalid]
    _, reward, _, _, info = env.step(invalid)
    assert info["placement"].success
    assert reward == 5.0


def test_flat_mask_is_slot_major_layout_of_env_mask():
    env = FlattenDiscreteActionWrapper(BlockudokuEnv())
    _, info = env.reset(seed=4)
    grid_mask = info["action_mask"]
    flat = env.get_action_mask()
    for idx in (0, 80, 81, 100, 242):
        assert flat[idx] == grid_mask[env._unflatten(idx)]


def test_resample_wrapper_without_mask_source_raises():
    env = ResampleInvalidActionWrapper(BlockudokuEnv())
    with pytest.raises(AttributeError):
        env.get_action_mask()


def test_rgb_render():
    env = BlockudokuEnv(render_mode="rgb_array")
    env.reset(seed=0)
    frame = env.render()
    assert frame.shape == (108, 108, 3)
    assert frame.dtype == np.uint8

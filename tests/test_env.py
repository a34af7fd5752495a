from __future__ import annotations

import gymnasium as gym
import numpy as np
import pytest

import tetris_ai.env  # noqa: F401
from tetris_ai.ai.planner import plan_best_move
from tetris_ai.env.placement_env import TetrisPlacementEnv, decode_action, encode_action
from tetris_ai.env.wrappers import ResampleInvalidActionWrapper
from tetris_ai.game.pieces import TetrominoType


def test_action_codec() -> None:
    assert encode_action(2, 7, 10) == 27
    assert decode_action(27, 10) == (2, 7)


def test_reset_observation() -> None:
    env = TetrisPlacementEnv()
    obs, info = env.reset(seed=1)

    assert obs["board"].shape == (20, 10)
    assert int(obs["board"].sum()) == 0
    assert 1 <= obs["piece"] <= 7
    assert info["action_mask"].any()
    assert env.observation_space.contains(obs)


def test_invalid_action_leaves_state_unchanged() -> None:
    env = TetrisPlacementEnv(invalid_action_penalty=-2.0)
    env.reset(seed=1)
    env.session.piece = env.session.generator.make(TetrominoType.O)
    action = encode_action(0, 9, 10)  # a 2-wide piece cannot start at column 9

    assert not env.action_mask()[action]
    obs, reward, terminated, truncated, info = env.step(action)

    assert reward == -2.0
    assert not terminated
    assert int(obs["board"].sum()) == 0
    assert env.session.piece.kind is TetrominoType.O


def test_placement_locks_and_spawns() -> None:
    env = TetrisPlacementEnv()
    env.reset(seed=1)
    env.session.piece = env.session.generator.make(TetrominoType.O)

    obs, reward, terminated, truncated, info = env.step(encode_action(0, 0, 10))

    assert obs["board"][18:20, 0:2].tolist() == [[1, 1], [1, 1]]
    assert int(obs["board"].sum()) == 4
    assert not terminated
    assert info["steps"] == 1


def test_reward_penalises_feature_growth() -> None:
    env = TetrisPlacementEnv()
    env.reset(seed=1)
    env.session.piece = env.session.generator.make(TetrominoType.O)

    obs, reward, terminated, truncated, info = env.step(encode_action(0, 0, 10))

    parts = info["reward_components"]
    # heights 2,2 -> aggregate 4, bumpiness 2, no holes
    assert parts["lines"] == 0.0
    assert parts["holes"] == 0.0
    assert parts["bumpiness"] == pytest.approx(-0.05 * 2)
    assert parts["height"] == pytest.approx(-0.05 * 4)
    assert "terminal" not in parts
    assert reward == pytest.approx(-0.3)
    assert info["engine_score_delta"] == 0


def test_line_clear_is_flushed_and_rewarded() -> None:
    env = TetrisPlacementEnv()
    env.reset(seed=1)
    env.session.grid.cells[19, :] = 1
    env.session.grid.cells[19, 4:6] = 0
    env.session.piece = env.session.generator.make(TetrominoType.O)

    obs, reward, terminated, truncated, info = env.step(encode_action(0, 4, 10))

    assert info["lines"] == 1
    assert info["engine_score_delta"] == 100
    assert info["reward_components"]["lines"] > 0
    assert not env.session.clearing
    assert int(obs["board"].sum()) == 2


def test_planner_action_is_valid() -> None:
    env = TetrisPlacementEnv()
    env.reset(seed=5)

    move = plan_best_move(env.session.piece, env.session.grid)
    action = env.action_for_move(move)

    assert env.action_mask()[action]
    placed = env.placement_for(action)
    assert (placed.rotation, placed.col, placed.row) == (move.rotation, move.col, move.row)


def test_registered_env_with_resampling_wrapper() -> None:
    env = ResampleInvalidActionWrapper(gym.make("TetrisPlacement-v0", max_steps=30))
    obs, info = env.reset(seed=0)
    done = False
    steps = 0
    while not done:
        obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
        done = terminated or truncated
        steps += 1
    assert steps <= 30
    assert np.isfinite(reward)
    env.close()

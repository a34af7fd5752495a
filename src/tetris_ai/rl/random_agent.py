from __future__ import annotations

import argparse
import logging

import gymnasium as gym

import tetris_ai.env  # noqa: F401
from tetris_ai.env.wrappers import ResampleInvalidActionWrapper
from tetris_ai.utils.logging import setup_logger


logger = logging.getLogger("tetris_ai.rl.random_agent")


def run_random(steps: int = 500, seed: int | None = None) -> float:
    env = ResampleInvalidActionWrapper(gym.make("TetrisPlacement-v0"))
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logger.info("episode %d: score=%d lines=%d", episodes, info["score"], info["lines"])
            obs, info = env.reset()
    env.close()
    logger.info("random agent total reward: %.2f over %d finished episode(s)", total_reward, episodes)
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="info")
    args = p.parse_args()
    setup_logger(level=args.log_level)
    run_random(args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()

from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import gymnasium as gym

import tetris_ai.env  # noqa: F401
from tetris_ai.ai.planner import plan_best_move
from tetris_ai.game.core import GameConfig, TetrisGame
from tetris_ai.utils.logging import setup_logger


logger = logging.getLogger("tetris_ai.rl.heuristic_agent")


def run_env(episodes: int = 1, seed: Optional[int] = None, max_pieces: int = 2000) -> Dict[str, float]:
    """Play the placement env with the planner as policy."""
    env = gym.make("TetrisPlacement-v0", max_steps=max_pieces)
    inner = env.unwrapped
    scores = []
    for ep in range(episodes):
        obs, info = env.reset(seed=None if seed is None else seed + ep)
        done = False
        while not done:
            move = plan_best_move(inner.session.piece, inner.session.grid)
            action = inner.action_for_move(move)
            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated
        logger.info("episode %d: score=%d lines=%d level=%d pieces=%d",
                    ep + 1, info["score"], info["lines"], info["level"], info["steps"])
        scores.append(info["score"])
    env.close()
    return {"episodes": float(episodes), "mean_score": sum(scores) / max(1, len(scores))}


def run_realtime(seed: Optional[int] = None, tick_ms: int = 16, max_ms: int = 600_000) -> TetrisGame:
    """Let the paced AI driver play a full timed session without a window."""
    game = TetrisGame(GameConfig(random_seed=seed))
    game.start()
    game.set_ai_active(True)
    elapsed = 0
    while not game.game_over and elapsed < max_ms:
        game.advance(tick_ms)
        elapsed += tick_ms
    logger.info("realtime run: %.1fs simulated, score=%d lines=%d level=%d%s",
                elapsed / 1000.0, game.score, game.lines, game.level,
                " (game over)" if game.game_over else "")
    return game


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--mode", choices=["env", "realtime"], default="env")
    p.add_argument("--episodes", type=int, default=1)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--max-pieces", type=int, default=2000)
    p.add_argument("--max-seconds", type=int, default=600)
    p.add_argument("--log-level", default="info")
    args = p.parse_args()
    setup_logger(level=args.log_level)
    if args.mode == "env":
        run_env(args.episodes, args.seed, args.max_pieces)
    else:
        run_realtime(args.seed, max_ms=args.max_seconds * 1000)


if __name__ == "__main__":  # pragma: no cover
    main()

"""Gymnasium environments for tetris-ai."""

from __future__ import annotations

from gymnasium.envs.registration import register

# One action per piece: choose rotation and landing column
register(
    id="TetrisPlacement-v0",
    entry_point="tetris_ai.env.placement_env:TetrisPlacementEnv",
)

__all__ = ["TetrisPlacement-v0"]

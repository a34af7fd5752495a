from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_ai.ai.planner import Move, board_features, resting_row
from tetris_ai.game.core import GameConfig
from tetris_ai.game.grid import GameGrid
from tetris_ai.game.pieces import NUM_ROTATIONS, Piece, PieceGenerator, TetrominoType
from tetris_ai.game.scheduler import Scheduler
from tetris_ai.game.sequencer import LockSequencer
from tetris_ai.game.session import Phase, Session


def encode_action(rotation: int, left_col: int, width: int) -> int:
    return int(rotation) * int(width) + int(left_col)


def decode_action(action: int, width: int) -> Tuple[int, int]:
    return int(action) // int(width), int(action) % int(width)


class TetrisPlacementEnv(gym.Env):
    """One step = choose where the current piece lands.

    Action: Discrete(4 * width), `rotation * width + left`, where `left` is
    the board column of the piece's leftmost occupied cell. The piece is
    dropped straight down and locked through the same sequencer the real-time
    game uses; the clear animation is flushed immediately.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        reward_weights: Optional[Dict[str, float]] = None,
        invalid_action_penalty: float = -1.0,
        terminal_penalty: float = -10.0,
        max_steps: int = 10_000,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_steps = int(max_steps)
        self.reward_weights: Dict[str, float] = {
            "lines": 1.0,
            "lines_sq": 0.5,
            "holes": 0.35,
            "bumpiness": 0.05,
            "height": 0.05,
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        cfg = self.config
        self.width = cfg.width
        self.height = cfg.height
        self.session = Session(
            grid=GameGrid(cfg.width, cfg.height),
            generator=PieceGenerator(cfg.width, cfg.random_seed),
            scheduler=Scheduler(),
            rules=cfg.rules,
        )
        self.sequencer = LockSequencer(self.session, cfg.clear_delay_ms)

        n_kinds = len(TetrominoType)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=1, shape=(cfg.height, cfg.width), dtype=np.int8),
                # 0 when there is no piece, else the TetrominoType value
                "piece": spaces.Discrete(n_kinds + 1),
                "next_piece": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(NUM_ROTATIONS * cfg.width)
        self._steps = 0

    # ---------- Helpers ----------
    def placement_for(self, action: int) -> Optional[Piece]:
        """Resting pose for `action`, or None if it cannot be played."""
        piece = self.session.piece
        if piece is None or not 0 <= int(action) < self.action_space.n:
            return None
        rot, left = decode_action(action, self.width)
        span = piece.column_span(rot)
        if span is None:
            return None
        lo, hi = span
        anchor = left - lo
        if anchor + hi >= self.width:
            return None
        row = resting_row(piece, self.session.grid, rot, anchor)
        if row is None:
            return None
        return piece.placed(row, anchor, rotation=rot)

    def action_mask(self) -> np.ndarray:
        mask = np.zeros((self.action_space.n,), dtype=np.bool_)
        for a in range(self.action_space.n):
            mask[a] = self.placement_for(a) is not None
        return mask

    def action_for_move(self, move: Move) -> int:
        """Action id that reproduces a planner `Move`."""
        piece = self.session.piece
        if piece is None:
            raise ValueError("no active piece")
        span = piece.column_span(move.rotation)
        if span is None:
            raise ValueError(f"rotation {move.rotation} of {piece.kind.name} is empty")
        return encode_action(move.rotation, move.col + span[0], self.width)

    def _get_obs(self) -> Dict[str, Any]:
        s = self.session
        return {
            "board": s.grid.occupied(),
            "piece": int(s.piece.kind) if s.piece is not None else 0,
            "next_piece": int(s.next_piece.kind) if s.next_piece is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        s = self.session
        return {
            "action_mask": self.action_mask(),
            "score": s.score,
            "lines": s.lines,
            "level": s.level,
            "steps": self._steps,
        }

    # ---------- Gym API ----------
    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.session.generator.reseed(seed)
        self.sequencer.reset()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        s = self.session
        placed = self.placement_for(int(action))
        self._steps += 1
        truncated = self._steps >= self.max_steps

        reward_components: Dict[str, float] = {}
        if placed is None:
            reward_components["invalid"] = self.invalid_action_penalty
            info = self._get_info()
            info["reward_components"] = reward_components
            return self._get_obs(), float(self.invalid_action_penalty), False, truncated, info

        before = board_features(s.grid)
        score_before, lines_before = s.score, s.lines
        self.sequencer.lock(placed)
        self.sequencer.flush()
        lines = s.lines - lines_before
        after = board_features(s.grid, lines)

        w = self.reward_weights
        reward_components["lines"] = w["lines"] * float(lines)
        reward_components["lines_sq"] = w["lines_sq"] * float(lines * lines)
        reward_components["holes"] = -w["holes"] * float(max(0, after.holes - before.holes))
        reward_components["bumpiness"] = -w["bumpiness"] * float(max(0, after.bumpiness - before.bumpiness))
        reward_components["height"] = -w["height"] * float(max(0, after.agg_height - before.agg_height))

        terminated = s.phase is Phase.GAME_OVER
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = s.score - score_before
        return self._get_obs(), float(sum(reward_components.values())), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        from tetris_ai.visualization.palette import color_for_value

        state = self.session.snapshot().composed()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                img[y * cell:(y + 1) * cell, x * cell:(x + 1) * cell, :] = color_for_value(int(state[y, x]))
        return img

    def close(self) -> None:
        pass

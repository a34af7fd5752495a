from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .grid import GameGrid
from .pieces import Piece, PieceGenerator
from .rules import ScoringRules
from .scheduler import Scheduler


class Phase(Enum):
    INITIAL = "initial"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class Session:
    """Everything one game owns; handed to every component that acts on it."""

    grid: GameGrid
    generator: PieceGenerator
    scheduler: Scheduler
    rules: ScoringRules = field(default_factory=ScoringRules)
    phase: Phase = Phase.INITIAL
    piece: Optional[Piece] = None
    next_piece: Optional[Piece] = None
    clearing_rows: Tuple[int, ...] = ()
    score: int = 0
    lines: int = 0
    level: int = 1
    fall_interval: int = 1000
    ai_active: bool = False

    @property
    def clearing(self) -> bool:
        return bool(self.clearing_rows)

    @property
    def accepts_moves(self) -> bool:
        """Playing, a piece is falling and no clear is pending."""
        return self.phase is Phase.PLAYING and self.piece is not None and not self.clearing

    def reset_counters(self) -> None:
        self.score = 0
        self.lines = 0
        self.level = 1
        self.fall_interval = self.rules.fall_interval(1)

    def snapshot(self) -> "Snapshot":
        return Snapshot(
            board=self.grid.cells.copy(),
            piece=self.piece,
            next_piece=self.next_piece,
            clearing_rows=self.clearing_rows,
            phase=self.phase,
            score=self.score,
            lines=self.lines,
            level=self.level,
            fall_interval=self.fall_interval,
            ai_active=self.ai_active,
        )


@dataclass(frozen=True)
class Snapshot:
    """Read-only view handed to renderers and HUDs."""

    board: np.ndarray
    piece: Optional[Piece]
    next_piece: Optional[Piece]
    clearing_rows: Tuple[int, ...]
    phase: Phase
    score: int
    lines: int
    level: int
    fall_interval: int
    ai_active: bool

    def composed(self) -> np.ndarray:
        """Board with the active piece drawn in as negative tags."""
        state = self.board.copy()
        if self.piece is not None:
            h, w = state.shape
            for r, c in self.piece.cells():
                if 0 <= r < h and 0 <= c < w:
                    state[r, c] = -self.piece.shape.color
        return state

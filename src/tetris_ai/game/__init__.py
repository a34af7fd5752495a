"""Game module for tetris-ai.

Exports the rule engine building blocks:
- GameGrid: settled cells, collision queries and line detection
- Piece / PieceGenerator / TetrominoType: tetrominoes with precomputed rotations
- ScoringRules: score, level and fall speed
- Scheduler: virtual clock driving gravity, AI pacing and clear animation
- Session / Phase / Snapshot: per-game context and its read-only view
- LockSequencer: lock -> clear -> spawn state machine

The session facade `TetrisGame` lives in `tetris_ai.game.core`; it is not
re-exported here because it also pulls in the AI package.
"""

from .grid import GameGrid
from .pieces import SHAPES, Piece, PieceGenerator, Shape, TetrominoType
from .rules import ScoringRules
from .scheduler import Scheduler, TimerHandle
from .session import Phase, Session, Snapshot
from .sequencer import LockSequencer, SequencerEvent

__all__ = [
    "GameGrid",
    "LockSequencer",
    "Phase",
    "Piece",
    "PieceGenerator",
    "SHAPES",
    "Scheduler",
    "ScoringRules",
    "SequencerEvent",
    "Session",
    "Shape",
    "Snapshot",
    "TetrominoType",
    "TimerHandle",
]

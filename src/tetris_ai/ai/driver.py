from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from tetris_ai.game.scheduler import TimerHandle
from tetris_ai.game.sequencer import LockSequencer
from tetris_ai.game.session import Session

from .planner import HeuristicWeights, Move, plan_best_move


logger = logging.getLogger(__name__)


class DriverState(Enum):
    IDLE = "idle"
    THINKING = "thinking"
    STEPPING = "stepping"
    DONE = "done"


class AIDriver:
    """Plays the active piece one paced action at a time.

    IDLE -> THINKING (think delay) -> STEPPING (one action per step) -> DONE
    once the piece is locked. Exactly one timer is pending at any moment, so
    `disarm` only has to cancel that one handle.
    """

    def __init__(
        self,
        session: Session,
        sequencer: LockSequencer,
        step_ms: float = 75,
        think_min_ms: float = 100,
        think_max_ms: float = 200,
        weights: HeuristicWeights = HeuristicWeights(),
    ) -> None:
        self.session = session
        self.sequencer = sequencer
        self.step_ms = step_ms
        self.think_min_ms = think_min_ms
        self.think_max_ms = think_max_ms
        self.weights = weights
        self.state = DriverState.IDLE
        self.move: Optional[Move] = None
        self._timer: Optional[TimerHandle] = None

    @property
    def busy(self) -> bool:
        return self.state in (DriverState.THINKING, DriverState.STEPPING)

    def think_delay(self) -> float:
        return max(self.think_min_ms, min(self.session.fall_interval / 2, self.think_max_ms))

    def _can_act(self) -> bool:
        return self.session.ai_active and self.session.accepts_moves

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self.session.scheduler.call_later(delay, callback)

    def arm(self) -> bool:
        """Start a planning cycle for the active piece if AI may act now."""
        if self.busy or not self._can_act():
            return False
        self.state = DriverState.THINKING
        self.move = None
        self._schedule(self.think_delay(), self._plan)
        return True

    def disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.move = None
        self.state = DriverState.IDLE

    def _plan(self) -> None:
        self._timer = None
        if not self._can_act():
            self.disarm()
            return
        s = self.session
        move = plan_best_move(s.piece, s.grid, self.weights)
        if move is None:
            logger.warning("no placement found for %s, forcing a drop", s.piece.kind.name)
            self.state = DriverState.IDLE
            if self.sequencer.step_down():
                self.arm()
            return
        logger.debug("plan %s: rot=%d col=%d row=%d score=%.1f",
                     s.piece.kind.name, move.rotation, move.col, move.row, move.score)
        self.move = move
        self.state = DriverState.STEPPING
        self._step()

    def _step(self) -> None:
        self._timer = None
        if not self._can_act() or self.move is None:
            self.disarm()
            return
        piece = self.session.piece
        move = self.move
        if piece.rotation != move.rotation:
            ok = self.sequencer.rotate(move.rotation)
        elif piece.col != move.col:
            ok = self.sequencer.shift(1 if move.col > piece.col else -1)
        elif piece.row < move.row:
            ok = self.sequencer.descend()
        else:
            ok = False

        if ok:
            self._schedule(self.step_ms, self._step)
            return
        # Target reached or blocked: lock where the piece stands.
        self.state = DriverState.DONE
        self.move = None
        self.sequencer.lock()

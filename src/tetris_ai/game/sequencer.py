from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from . import kicks
from .grid import GameGrid
from .pieces import Piece
from .scheduler import TimerHandle
from .session import Phase, Session


logger = logging.getLogger(__name__)


class SequencerEvent(Enum):
    SPAWNED = "spawned"
    CLEARING = "clearing"
    GAME_OVER = "game_over"


EventListener = Callable[[SequencerEvent], None]


class LockSequencer:
    """Single writer of the board and the active piece.

    Drives fall -> lock -> clear -> spawn. When a lock completes rows, the
    piece is dropped, the rows are held for `clear_delay_ms` and only then
    removed; every move request made in that window is ignored.
    """

    def __init__(self, session: Session, clear_delay_ms: float = 300,
                 on_event: Optional[EventListener] = None) -> None:
        if clear_delay_ms < 0:
            raise ValueError("clear_delay_ms must be non-negative")
        self.session = session
        self.clear_delay_ms = clear_delay_ms
        self.on_event = on_event
        self._clear_timer: Optional[TimerHandle] = None

    def _emit(self, event: SequencerEvent) -> None:
        if self.on_event is not None:
            self.on_event(event)

    # ---------- Session lifecycle ----------
    def reset(self) -> None:
        """Fresh board and counters, then spawn the first piece."""
        s = self.session
        if self._clear_timer is not None:
            self._clear_timer.cancel()
            self._clear_timer = None
        s.grid = GameGrid(s.grid.width, s.grid.height)
        s.clearing_rows = ()
        s.piece = None
        s.next_piece = None
        s.reset_counters()
        s.phase = Phase.PLAYING
        self.spawn()

    def spawn(self) -> None:
        s = self.session
        piece = s.next_piece if s.next_piece is not None else s.generator.spawn()
        s.next_piece = s.generator.spawn()
        if not s.grid.is_legal(piece):
            logger.info("spawn of %s blocked", piece.kind.name)
            self._game_over()
            return
        s.piece = piece
        self._emit(SequencerEvent.SPAWNED)

    def _game_over(self) -> None:
        s = self.session
        s.phase = Phase.GAME_OVER
        s.piece = None
        s.clearing_rows = ()
        logger.info("game over: score=%d lines=%d level=%d", s.score, s.lines, s.level)
        self._emit(SequencerEvent.GAME_OVER)

    # ---------- Movement ----------
    def shift(self, dcol: int) -> bool:
        s = self.session
        if not s.accepts_moves or not s.grid.is_legal(s.piece, s.piece.row, s.piece.col + dcol):
            return False
        s.piece = s.piece.moved(dcol=dcol)
        return True

    def descend(self) -> bool:
        s = self.session
        if not s.accepts_moves or not s.grid.is_legal(s.piece, s.piece.row + 1, s.piece.col):
            return False
        s.piece = s.piece.moved(drow=1)
        return True

    def rotate(self, target: Optional[int] = None) -> bool:
        s = self.session
        if not s.accepts_moves:
            return False
        turned = kicks.rotate(s.piece, s.grid, target)
        if turned is None:
            return False
        s.piece = turned
        return True

    def step_down(self) -> bool:
        """One row down; lock in place when blocked. True if the piece moved."""
        if not self.session.accepts_moves:
            return False
        if self.descend():
            return True
        self.lock()
        return False

    def hard_drop(self) -> bool:
        s = self.session
        if not s.accepts_moves:
            return False
        while s.grid.is_legal(s.piece, s.piece.row + 1, s.piece.col):
            s.piece = s.piece.moved(drow=1)
        self.lock()
        return True

    # ---------- Lock / clear ----------
    def lock(self, piece: Optional[Piece] = None) -> None:
        """Commit `piece` (default: the active one) into the board."""
        s = self.session
        if s.phase is not Phase.PLAYING or s.clearing:
            return
        piece = s.piece if piece is None else piece
        if piece is None:
            return

        s.grid = s.grid.settle(piece)
        s.piece = None
        if any(r < 0 for r, _ in piece.cells()):
            self._game_over()
            return

        full = s.grid.full_rows()
        if not full:
            self.spawn()
            return

        s.clearing_rows = tuple(full)
        self._emit(SequencerEvent.CLEARING)
        self._clear_timer = s.scheduler.call_later(self.clear_delay_ms, self._finish_clear)

    def _finish_clear(self) -> None:
        s = self.session
        self._clear_timer = None
        rows = s.clearing_rows
        s.grid = s.grid.without_rows(rows)
        s.clearing_rows = ()
        self._apply_lines(len(rows))
        self.spawn()

    def flush(self) -> None:
        """Finish a pending clear right away instead of waiting for the timer."""
        if self._clear_timer is not None:
            self._clear_timer.cancel()
            self._finish_clear()

    def _apply_lines(self, n: int) -> None:
        s = self.session
        if n <= 0:
            return
        gained = s.rules.score_for_lines(n, s.level)
        s.score += gained
        s.lines += n
        logger.info("cleared %d line(s) for %d points", n, gained)
        new_level = s.rules.level_for_lines(s.lines)
        if new_level > s.level:
            s.level = new_level
            s.fall_interval = s.rules.fall_interval(new_level)
            logger.info("level %d, fall interval %d ms", new_level, s.fall_interval)

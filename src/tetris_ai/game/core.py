from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from tetris_ai.ai.driver import AIDriver
from tetris_ai.ai.planner import HeuristicWeights

from .grid import GameGrid
from .pieces import PieceGenerator
from .rules import ScoringRules
from .scheduler import Scheduler, TimerHandle
from .sequencer import LockSequencer, SequencerEvent
from .session import Phase, Session, Snapshot


logger = logging.getLogger(__name__)


class Action(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    HARD_DROP = 4


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    clear_delay_ms: int = 300
    ai_step_ms: int = 75
    ai_think_min_ms: int = 100
    ai_think_max_ms: int = 200
    rules: ScoringRules = field(default_factory=ScoringRules)
    weights: HeuristicWeights = field(default_factory=HeuristicWeights)

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")
        if self.ai_step_ms <= 0:
            raise ValueError("ai_step_ms must be positive")


class TetrisGame:
    """Session boundary: owns the session, timers, sequencer and AI driver.

    Front ends call `command`, `set_ai_active`, `start`, `pause`, `resume`
    and `advance(dt_ms)`, and read state through `snapshot()`.
    """

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()
        cfg = self.config
        self.scheduler = Scheduler()
        self.session = Session(
            grid=GameGrid(cfg.width, cfg.height),
            generator=PieceGenerator(cfg.width, cfg.random_seed),
            scheduler=self.scheduler,
            rules=cfg.rules,
        )
        self.session.reset_counters()
        self.sequencer = LockSequencer(self.session, cfg.clear_delay_ms, on_event=self._on_event)
        self.driver = AIDriver(
            self.session,
            self.sequencer,
            step_ms=cfg.ai_step_ms,
            think_min_ms=cfg.ai_think_min_ms,
            think_max_ms=cfg.ai_think_max_ms,
            weights=cfg.weights,
        )
        self._gravity: Optional[TimerHandle] = None

    # ---------- Read-only outputs ----------
    @property
    def phase(self) -> Phase:
        return self.session.phase

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def lines(self) -> int:
        return self.session.lines

    @property
    def level(self) -> int:
        return self.session.level

    @property
    def game_over(self) -> bool:
        return self.session.phase is Phase.GAME_OVER

    def snapshot(self) -> Snapshot:
        return self.session.snapshot()

    # ---------- Session control ----------
    def start(self, seed: Optional[int] = None) -> None:
        """Start a new session: reset counters, board and piece queue."""
        self.driver.disarm()
        if seed is not None:
            self.session.generator.reseed(seed)
        self.sequencer.reset()
        logger.info("new session started")

    def pause(self) -> bool:
        if self.session.phase is not Phase.PLAYING:
            return False
        self.session.phase = Phase.PAUSED
        self.driver.disarm()
        return True

    def resume(self) -> bool:
        if self.session.phase is not Phase.PAUSED:
            return False
        self.session.phase = Phase.PLAYING
        self._arm_gravity()
        self.driver.arm()
        return True

    def set_ai_active(self, active: bool) -> None:
        was = self.session.ai_active
        self.session.ai_active = bool(active)
        if active and not was:
            self.driver.arm()
        elif was and not active:
            self.driver.disarm()
            if self.session.phase in (Phase.PLAYING, Phase.PAUSED):
                self._arm_gravity()

    def advance(self, dt_ms: float) -> None:
        self.scheduler.advance(dt_ms)

    # ---------- Input adapter ----------
    def command(self, action: Action) -> bool:
        """Apply a manual command; ignored while AI plays or nothing can move."""
        s = self.session
        if s.ai_active or not s.accepts_moves:
            return False
        action = Action(action)
        if action == Action.MOVE_LEFT:
            return self.sequencer.shift(-1)
        if action == Action.MOVE_RIGHT:
            return self.sequencer.shift(1)
        if action == Action.ROTATE:
            return self.sequencer.rotate()
        if action == Action.SOFT_DROP:
            self._arm_gravity()
            self.sequencer.step_down()
            return True
        return self.sequencer.hard_drop()

    # ---------- Timers ----------
    def _arm_gravity(self) -> None:
        if self._gravity is not None:
            self._gravity.cancel()
        self._gravity = self.scheduler.call_later(self.session.fall_interval, self._gravity_tick)

    def _gravity_tick(self) -> None:
        self._gravity = None
        s = self.session
        if s.phase is Phase.GAME_OVER or s.phase is Phase.INITIAL:
            return
        if s.accepts_moves and not s.ai_active:
            self.sequencer.step_down()
        if s.phase is not Phase.GAME_OVER and self._gravity is None:
            self._arm_gravity()

    def _on_event(self, event: SequencerEvent) -> None:
        if event is SequencerEvent.SPAWNED:
            self._arm_gravity()
            self.driver.arm()
        elif event is SequencerEvent.CLEARING:
            self.driver.disarm()
        elif event is SequencerEvent.GAME_OVER:
            self.driver.disarm()
            if self._gravity is not None:
                self._gravity.cancel()
                self._gravity = None

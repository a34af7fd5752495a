from __future__ import annotations

from typing import List, Optional

import numpy as np

from tetris_ai.game.grid import GameGrid
from tetris_ai.game.pieces import PieceGenerator
from tetris_ai.game.scheduler import Scheduler
from tetris_ai.game.sequencer import SequencerEvent
from tetris_ai.game.session import Phase, Session


def make_session(cells: Optional[np.ndarray] = None, seed: int = 0) -> Session:
    grid = GameGrid(10, 20, cells)
    session = Session(grid=grid, generator=PieceGenerator(10, seed), scheduler=Scheduler())
    session.reset_counters()
    session.phase = Phase.PLAYING
    return session


def bottom_rows_with_gap(n: int, gap_cols: List[int]) -> np.ndarray:
    """Bottom `n` rows filled except `gap_cols`."""
    cells = np.zeros((20, 10), dtype=np.int8)
    cells[20 - n:, :] = 1
    cells[20 - n:, gap_cols] = 0
    return cells


class Recorder:
    def __init__(self) -> None:
        self.events: List[SequencerEvent] = []

    def __call__(self, event: SequencerEvent) -> None:
        self.events.append(event)

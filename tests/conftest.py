from __future__ import annotations

import pytest

from tetris_ai.game.sequencer import LockSequencer
from tetris_ai.game.session import Session

from helpers import Recorder


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def sequencer_factory(recorder: Recorder):
    def build(session: Session, clear_delay_ms: float = 300) -> LockSequencer:
        return LockSequencer(session, clear_delay_ms, on_event=recorder)

    return build

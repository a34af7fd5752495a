from __future__ import annotations

from typing import Dict, Tuple

Color = Tuple[int, int, int]

EMPTY_COLOR: Color = (20, 20, 26)
FLASH_COLOR: Color = (250, 250, 250)

# Keyed by TetrominoType value
PALETTE: Dict[int, Color] = {
    0: EMPTY_COLOR,
    1: (240, 40, 40),    # I
    2: (40, 220, 40),    # L
    3: (50, 80, 240),    # J
    4: (240, 240, 0),    # O
    5: (230, 0, 230),    # S
    6: (0, 230, 230),    # Z
    7: (245, 165, 0),    # T
}


def color_for_value(v: int) -> Color:
    # Negative values mark the falling piece in a composed snapshot
    return PALETTE.get(abs(v), (200, 200, 200))

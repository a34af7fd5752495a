"""Rotation with a small wall-kick search.

This is a simplified kick table, not SRS: horizontal offsets first, then a
short upward probe for pieces still near the top of the board.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .grid import GameGrid
from .pieces import Piece, TetrominoType


COLUMN_KICKS: Tuple[int, ...] = (-1, 1, -2, 2)
TOP_ROW_LIMIT = 1


def row_kicks(kind: TetrominoType) -> Tuple[int, ...]:
    # The 4-wide bar needs two rows of headroom to stand up at the top.
    if kind == TetrominoType.I:
        return (-1, -2)
    return (-1,)


def rotate(piece: Piece, grid: GameGrid, target: Optional[int] = None) -> Optional[Piece]:
    """Rotate `piece` to `target` (default: next state), kicking if needed.

    Returns the placed piece, or None when no tried offset is legal.
    """
    if target is None:
        target = piece.rotation + 1
    turned = piece.placed(piece.row, piece.col, rotation=target)
    if grid.is_legal(turned):
        return turned

    for dcol in COLUMN_KICKS:
        if grid.is_legal(turned, turned.row, turned.col + dcol):
            return turned.moved(dcol=dcol)

    if piece.row <= TOP_ROW_LIMIT:
        for drow in row_kicks(piece.kind):
            if grid.is_legal(turned, turned.row + drow, turned.col):
                return turned.moved(drow=drow)
    return None

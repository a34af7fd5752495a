from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from tetris_ai.game.grid import GameGrid
from tetris_ai.game.pieces import Piece


ENTRY_PROBE_ROWS: Tuple[int, ...] = (-1, -2, -3)


@dataclass(frozen=True)
class HeuristicWeights:
    lines: float = 5000.0
    agg_height: float = 10.0
    holes: float = 75.0
    bumpiness: float = 3.0


@dataclass(frozen=True)
class Move:
    rotation: int
    col: int
    row: int
    score: float


@dataclass(frozen=True)
class BoardFeatures:
    lines_cleared: int
    agg_height: int
    holes: int
    bumpiness: int


def board_features(grid: GameGrid, lines_cleared: int = 0) -> BoardFeatures:
    heights = grid.column_heights()
    return BoardFeatures(
        lines_cleared=lines_cleared,
        agg_height=int(heights.sum()),
        holes=grid.count_holes(),
        bumpiness=grid.bumpiness(heights),
    )


def score_features(f: BoardFeatures, weights: HeuristicWeights = HeuristicWeights()) -> float:
    return (
        f.lines_cleared * weights.lines
        - f.agg_height * weights.agg_height
        - f.holes * weights.holes
        - f.bumpiness * weights.bumpiness
    )


def evaluate(grid: GameGrid, piece: Piece, drop_row: int,
             weights: HeuristicWeights = HeuristicWeights()) -> float:
    """Score the board left by settling `piece` at `drop_row`.

    A placement with any cell above the top edge would end the game and
    scores -inf so it is never chosen.
    """
    placed = piece.placed(drop_row, piece.col)
    if any(r < 0 for r, _ in placed.cells()):
        return -math.inf
    after = grid.settle(placed)
    full = after.full_rows()
    if full:
        after = after.without_rows(full)
    return score_features(board_features(after, len(full)), weights)


def resting_row(piece: Piece, grid: GameGrid, rotation: int, col: int) -> Optional[int]:
    """Lowest legal row for `piece` dropped straight down at (rotation, col).

    Entry is tried at row 0 and then a few rows above the board; None if the
    column is blocked all the way up.
    """
    probe = piece.placed(0, col, rotation=rotation)
    row: Optional[int] = 0
    if not grid.is_legal(probe, 0, col):
        row = next((r for r in ENTRY_PROBE_ROWS if grid.is_legal(probe, r, col)), None)
        if row is None:
            return None
    while grid.is_legal(probe, row + 1, col):
        row += 1
    return row


def plan_best_move(piece: Piece, grid: GameGrid,
                   weights: HeuristicWeights = HeuristicWeights()) -> Optional[Move]:
    """Greedy search over every rotation and column for the best drop.

    Ties keep the first candidate found (rotation ascending, then column).
    """
    best: Optional[Move] = None
    for rot in range(piece.num_rotations):
        span = piece.column_span(rot)
        if span is None:
            continue
        lo, hi = span
        for col in range(-lo, grid.width - hi):
            row = resting_row(piece, grid, rot, col)
            if row is None:
                continue
            candidate = piece.placed(row, col, rotation=rot)
            score = evaluate(grid, candidate, row, weights)
            if best is None or score > best.score:
                best = Move(rotation=rot, col=col, row=row, score=score)
    return best

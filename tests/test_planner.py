from __future__ import annotations

import math

import numpy as np

from tetris_ai.ai.planner import HeuristicWeights, evaluate, plan_best_move, resting_row
from tetris_ai.game.grid import GameGrid
from tetris_ai.game.pieces import Piece, PieceGenerator, Shape, TetrominoType

from helpers import bottom_rows_with_gap


def _make(kind: TetrominoType) -> Piece:
    return PieceGenerator(10, seed=0).make(kind)


def test_square_on_empty_board_rests_on_floor_against_wall() -> None:
    move = plan_best_move(_make(TetrominoType.O), GameGrid())

    assert move is not None
    # Every rotation of O is identical: the first rotation wins the tie, and
    # the wall position beats the middle on bumpiness (2 vs 4).
    assert (move.rotation, move.col, move.row) == (0, 0, 18)
    assert move.score == -(4 * 10) - (2 * 3)


def test_planner_takes_the_line_clear() -> None:
    grid = GameGrid(10, 20, bottom_rows_with_gap(1, [4, 5]))

    move = plan_best_move(_make(TetrominoType.O), grid)

    assert move is not None
    assert (move.col, move.row) == (4, 18)
    assert move.score == 5000 - 2 * 10 - 2 * 3


def test_hole_scores_lower_than_filled_cell() -> None:
    holed = np.zeros((20, 10), dtype=np.int8)
    holed[18, 0] = 1
    filled = holed.copy()
    filled[19, 0] = 1
    square = _make(TetrominoType.O).placed(18, 5)

    with_hole = evaluate(GameGrid(10, 20, holed), square, 18)
    without_hole = evaluate(GameGrid(10, 20, filled), square, 18)

    assert with_hole < without_hole
    assert without_hole - with_hole == HeuristicWeights().holes


def test_placement_above_top_scores_negative_infinity() -> None:
    square = _make(TetrominoType.O).placed(-1, 4)

    assert evaluate(GameGrid(), square, -1) == -math.inf


def test_resting_row_probes_above_the_board() -> None:
    cells = np.zeros((20, 10), dtype=np.int8)
    cells[1:, 5] = 1
    grid = GameGrid(10, 20, cells)
    square = _make(TetrominoType.O)

    assert resting_row(square, grid, 0, 4) == -1


def test_resting_row_none_when_column_blocked_to_the_top() -> None:
    cells = np.zeros((20, 10), dtype=np.int8)
    cells[:, 5] = 1
    grid = GameGrid(10, 20, cells)
    bar = _make(TetrominoType.I)

    # upright bar, matrix column 2 over board column 5
    assert resting_row(bar, grid, 1, 3) is None


def test_planner_keeps_columns_on_board() -> None:
    bar = _make(TetrominoType.I)
    move = plan_best_move(bar, GameGrid())

    assert move is not None
    placed = bar.placed(move.row, move.col, rotation=move.rotation)
    assert all(0 <= c < 10 and 0 <= r < 20 for r, c in placed.cells())


def test_empty_shape_yields_no_move() -> None:
    blank = Shape(kind=TetrominoType.O, matrix=np.zeros((2, 2), dtype=np.int8))

    assert plan_best_move(Piece.from_shape(blank), GameGrid()) is None

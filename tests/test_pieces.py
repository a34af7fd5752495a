from __future__ import annotations

import numpy as np

from tetris_ai.game.pieces import NUM_ROTATIONS, SHAPES, PieceGenerator, TetrominoType


def test_rotation_zero_is_color_tagged_template() -> None:
    piece = PieceGenerator(10, seed=0).make(TetrominoType.L)

    assert piece.rotation == 0
    assert piece.matrix.tolist() == [[0, 2, 0], [0, 2, 0], [0, 2, 2]]
    assert piece.num_rotations == NUM_ROTATIONS


def test_rotation_states_turn_clockwise() -> None:
    piece = PieceGenerator(10, seed=0).make(TetrominoType.T)

    assert piece.matrices[1].tolist() == [[0, 7, 0], [0, 7, 7], [0, 7, 0]]
    assert piece.matrices[2].tolist() == [[0, 0, 0], [7, 7, 7], [0, 7, 0]]


def test_rotation_matrices_are_read_only() -> None:
    piece = PieceGenerator(10, seed=0).make(TetrominoType.S)

    assert all(not m.flags.writeable for m in piece.matrices)


def test_square_rotation_keeps_cells() -> None:
    square = PieceGenerator(10, seed=0).make(TetrominoType.O)

    for k in range(NUM_ROTATIONS):
        assert sorted(square.rotated(k).cells()) == sorted(square.cells())


def test_rotation_is_cyclic() -> None:
    piece = PieceGenerator(10, seed=0).make(TetrominoType.J)

    assert piece.rotated(4).rotation == 0
    assert piece.rotated(1).rotated(1).rotated(1).rotation == 3
    assert piece.rotated(1).rotated(1).rotated(1).rotated(1).rotation == 0


def test_spawn_position_is_centered_on_top_row() -> None:
    gen = PieceGenerator(10, seed=0)

    assert (gen.make(TetrominoType.I).row, gen.make(TetrominoType.I).col) == (0, 3)
    assert gen.make(TetrominoType.O).col == 4
    assert gen.make(TetrominoType.T).col == 4


def test_moves_return_new_pieces() -> None:
    piece = PieceGenerator(10, seed=0).make(TetrominoType.Z)

    moved = piece.moved(drow=2, dcol=-1)

    assert (piece.row, piece.col) == (0, 4)
    assert (moved.row, moved.col) == (2, 3)
    assert moved.matrices is piece.matrices


def test_seeded_generator_is_reproducible() -> None:
    a = PieceGenerator(10, seed=42)
    b = PieceGenerator(10, seed=42)

    assert [a.spawn().kind for _ in range(20)] == [b.spawn().kind for _ in range(20)]


def test_every_shape_has_four_cells() -> None:
    for shape in SHAPES.values():
        assert int(np.count_nonzero(shape.matrix)) == 4

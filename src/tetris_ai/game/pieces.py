from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np


class TetrominoType(IntEnum):
    # Values double as the color tag written into the board.
    I = 1
    L = 2
    J = 3
    O = 4
    S = 5
    Z = 6
    T = 7


Cell = Tuple[int, int]
NUM_ROTATIONS = 4


@dataclass(frozen=True, eq=False)
class Shape:
    """Immutable tetromino template: 0/1 square matrix and its color tag."""

    kind: TetrominoType
    matrix: np.ndarray

    @property
    def color(self) -> int:
        return int(self.kind)

    @property
    def size(self) -> int:
        return int(self.matrix.shape[1])


def _template(kind: TetrominoType, rows: List[List[int]]) -> Shape:
    matrix = np.array(rows, dtype=np.int8)
    matrix.setflags(write=False)
    return Shape(kind=kind, matrix=matrix)


SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _template(TetrominoType.I, [[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]),
    TetrominoType.L: _template(TetrominoType.L, [[0, 1, 0], [0, 1, 0], [0, 1, 1]]),
    TetrominoType.J: _template(TetrominoType.J, [[0, 1, 0], [0, 1, 0], [1, 1, 0]]),
    TetrominoType.O: _template(TetrominoType.O, [[1, 1], [1, 1]]),
    TetrominoType.S: _template(TetrominoType.S, [[0, 1, 1], [1, 1, 0], [0, 0, 0]]),
    TetrominoType.Z: _template(TetrominoType.Z, [[1, 1, 0], [0, 1, 1], [0, 0, 0]]),
    TetrominoType.T: _template(TetrominoType.T, [[0, 1, 0], [1, 1, 1], [0, 0, 0]]),
}


def build_rotations(shape: Shape) -> Tuple[np.ndarray, ...]:
    """All 4 clockwise rotation states, cells retagged with the shape color."""
    tagged = np.where(shape.matrix != 0, shape.color, 0).astype(np.int8)
    out: List[np.ndarray] = []
    for k in range(NUM_ROTATIONS):
        m = np.ascontiguousarray(np.rot90(tagged, -k))
        m.setflags(write=False)
        out.append(m)
    return tuple(out)


def _occupied(matrices: Tuple[np.ndarray, ...]) -> Tuple[Tuple[Cell, ...], ...]:
    return tuple(
        tuple((int(r), int(c)) for r, c in np.argwhere(m != 0))
        for m in matrices
    )


@dataclass(frozen=True, eq=False)
class Piece:
    """Active tetromino: shape, precomputed rotation states and board anchor.

    `row`/`col` locate the top-left corner of the rotation matrix. Moves
    never mutate a piece; they return a new one.
    """

    shape: Shape
    matrices: Tuple[np.ndarray, ...]
    rotation: int = 0
    row: int = 0
    col: int = 0
    offsets: Tuple[Tuple[Cell, ...], ...] = field(default=(), repr=False)

    @classmethod
    def from_shape(cls, shape: Shape, row: int = 0, col: int = 0) -> "Piece":
        matrices = build_rotations(shape)
        return cls(shape=shape, matrices=matrices, row=row, col=col, offsets=_occupied(matrices))

    @property
    def kind(self) -> TetrominoType:
        return self.shape.kind

    @property
    def num_rotations(self) -> int:
        return len(self.matrices)

    @property
    def matrix(self) -> np.ndarray:
        return self.matrices[self.rotation]

    def cells(self, row: Optional[int] = None, col: Optional[int] = None,
              rotation: Optional[int] = None) -> List[Cell]:
        """Board (row, col) of every occupied cell, optionally at another pose."""
        r0 = self.row if row is None else row
        c0 = self.col if col is None else col
        rot = self.rotation if rotation is None else rotation
        return [(r0 + dr, c0 + dc) for dr, dc in self.offsets[rot]]

    def column_span(self, rotation: Optional[int] = None) -> Optional[Tuple[int, int]]:
        """(min, max) occupied matrix column, or None for an empty state."""
        cells = self.offsets[self.rotation if rotation is None else rotation]
        if not cells:
            return None
        cols = [c for _, c in cells]
        return min(cols), max(cols)

    def moved(self, drow: int = 0, dcol: int = 0) -> "Piece":
        return replace(self, row=self.row + drow, col=self.col + dcol)

    def placed(self, row: int, col: int, rotation: Optional[int] = None) -> "Piece":
        rot = self.rotation if rotation is None else rotation % self.num_rotations
        return replace(self, row=row, col=col, rotation=rot)

    def rotated(self, delta: int = 1) -> "Piece":
        return replace(self, rotation=(self.rotation + delta) % self.num_rotations)


class PieceGenerator:
    """Uniform random tetromino source with a seedable RNG."""

    def __init__(self, board_width: int = 10, seed: Optional[int] = None) -> None:
        self.board_width = int(board_width)
        self.rng = random.Random(seed)

    def reseed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    def spawn_position(self, shape: Shape) -> Tuple[int, int]:
        return 0, self.board_width // 2 - shape.size // 2

    def make(self, kind: TetrominoType) -> Piece:
        shape = SHAPES[kind]
        row, col = self.spawn_position(shape)
        return Piece.from_shape(shape, row=row, col=col)

    def spawn(self) -> Piece:
        kind = self.rng.choice(list(TetrominoType))
        return self.make(kind)

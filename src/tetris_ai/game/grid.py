from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import numpy as np

from .pieces import Piece


EMPTY = 0


class GameGrid:
    """Settled cells of the playfield.

    The grid uses 0 for empty cells and the tetromino color tag (1..7) for
    filled cells. Row 0 is the top. Operations that change the contents
    return a new grid so older snapshots stay valid.
    """

    def __init__(self, width: int = 10, height: int = 20, cells: Optional[np.ndarray] = None) -> None:
        self.width = int(width)
        self.height = int(height)
        if cells is None:
            cells = np.zeros((self.height, self.width), dtype=np.int8)
        elif cells.shape != (self.height, self.width):
            raise ValueError(f"cells shape {cells.shape} does not match {self.height}x{self.width}")
        self.cells = cells

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "GameGrid":
        cells = np.array(rows, dtype=np.int8)
        h, w = cells.shape
        return cls(w, h, cells)

    def copy(self) -> "GameGrid":
        return GameGrid(self.width, self.height, self.cells.copy())

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def is_legal(self, piece: Piece, row: Optional[int] = None, col: Optional[int] = None) -> bool:
        """Whether `piece` fits at (row, col), defaulting to its own anchor.

        Cells above the top edge are allowed and never hit board contents.
        """
        for r, c in piece.cells(row, col):
            if r >= self.height or c < 0 or c >= self.width:
                return False
            if r >= 0 and self.cells[r, c] != EMPTY:
                return False
        return True

    def settle(self, piece: Piece) -> "GameGrid":
        """New grid with the piece's on-board cells written in."""
        out = self.cells.copy()
        color = piece.shape.color
        for r, c in piece.cells():
            if self.is_inside(r, c):
                out[r, c] = color
        return GameGrid(self.width, self.height, out)

    def full_rows(self) -> List[int]:
        """Indices of full rows, scanned bottom to top."""
        full = np.all(self.cells != EMPTY, axis=1)
        return [r for r in range(self.height - 1, -1, -1) if full[r]]

    def without_rows(self, rows: Iterable[int]) -> "GameGrid":
        """Remove `rows` and pad the top with as many empty rows."""
        drop = sorted(set(rows), reverse=True)
        if not drop:
            return self.copy()
        kept = np.delete(self.cells, drop, axis=0)
        pad = np.zeros((len(drop), self.width), dtype=self.cells.dtype)
        return GameGrid(self.width, self.height, np.vstack((pad, kept)))

    def column_heights(self) -> np.ndarray:
        filled = self.cells != EMPTY
        any_filled = filled.any(axis=0)
        top = filled.argmax(axis=0)
        return np.where(any_filled, self.height - top, 0)

    def count_holes(self) -> int:
        filled = self.cells != EMPTY
        covered = np.logical_or.accumulate(filled, axis=0)
        return int(np.sum(covered & ~filled))

    def bumpiness(self, heights: Optional[np.ndarray] = None) -> int:
        h = self.column_heights() if heights is None else heights
        return int(np.sum(np.abs(np.diff(h))))

    def get_max_height(self) -> int:
        return int(self.column_heights().max(initial=0))

    def occupied(self) -> np.ndarray:
        return (self.cells != EMPTY).astype(np.int8)

    def __repr__(self) -> str:
        rows = ["".join("#" if v else "." for v in row) for row in self.cells]
        return "GameGrid(\n  " + "\n  ".join(rows) + "\n)"

from __future__ import annotations

import math
from typing import Optional

import numpy as np
import pygame

from tetris_ai.game.pieces import Piece
from tetris_ai.game.session import Phase, Snapshot

from .palette import EMPTY_COLOR, FLASH_COLOR, color_for_value


class Renderer:
    def __init__(self, cell_size: int = 28, margin: int = 20, panel_cells: int = 7) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> tuple[int, int]:
        w = self.margin * 3 + (width + self.panel_cells) * self.cell_size
        h = self.margin * 2 + height * self.cell_size
        return w, h

    def _font_obj(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
        return self._font

    def _cell(self, surf: pygame.Surface, x: int, y: int, color) -> None:
        rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
        pygame.draw.rect(surf, color, rect)

    def _grid_surface(self, snap: Snapshot, now_ms: float) -> pygame.Surface:
        state = snap.composed()
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        # Rows about to be removed pulse towards white
        pulse = 0.6 + 0.4 * math.sin((now_ms % 200.0) / 200.0 * math.pi)
        for y in range(h):
            flashing = y in snap.clearing_rows
            for x in range(w):
                color = color_for_value(int(state[y, x]))
                if flashing:
                    color = tuple(int(c + (f - c) * pulse) for c, f in zip(color, FLASH_COLOR))
                self._cell(surf, x, y, color)
        return surf

    def _preview_surface(self, piece: Optional[Piece]) -> pygame.Surface:
        surf = pygame.Surface((4 * self.cell_size, 4 * self.cell_size))
        surf.fill(EMPTY_COLOR)
        if piece is None:
            return surf
        m = piece.matrix
        rows = np.flatnonzero(m.any(axis=1))
        cols = np.flatnonzero(m.any(axis=0))
        if rows.size == 0:
            return surf
        trimmed = m[rows[0]:rows[-1] + 1, cols[0]:cols[-1] + 1]
        off_y = (4 - trimmed.shape[0]) // 2
        off_x = (4 - trimmed.shape[1]) // 2
        for y in range(trimmed.shape[0]):
            for x in range(trimmed.shape[1]):
                if trimmed[y, x]:
                    self._cell(surf, x + off_x, y + off_y, color_for_value(int(trimmed[y, x])))
        return surf

    def draw(self, screen: pygame.Surface, snap: Snapshot, now_ms: float = 0.0) -> None:
        screen.fill((10, 10, 14))
        grid_surf = self._grid_surface(snap, now_ms)
        screen.blit(grid_surf, (self.margin, self.margin))

        panel_x = self.margin * 2 + grid_surf.get_width()
        font = self._font_obj()
        screen.blit(font.render("Next", True, (230, 230, 230)), (panel_x, self.margin))
        screen.blit(self._preview_surface(snap.next_piece), (panel_x, self.margin + 24))

        lines = [
            f"Score  {snap.score}",
            f"Lines  {snap.lines}",
            f"Level  {snap.level}",
            f"AI     {'ON' if snap.ai_active else 'OFF'}",
        ]
        if snap.phase is Phase.PAUSED:
            lines.append("PAUSED")
        elif snap.phase is Phase.GAME_OVER:
            lines.append("GAME OVER - R")
        elif snap.phase is Phase.INITIAL:
            lines.append("Press R to start")
        y = self.margin + 24 + 5 * self.cell_size
        for text in lines:
            screen.blit(font.render(text, True, (230, 230, 230)), (panel_x, y))
            y += 28
        pygame.display.flip()

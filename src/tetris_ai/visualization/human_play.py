from __future__ import annotations

import argparse
from typing import Dict, Optional

import pygame

from tetris_ai.game.core import Action, GameConfig, TetrisGame
from tetris_ai.game.session import Phase
from tetris_ai.utils.logging import setup_logger

from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_UP: Action.ROTATE,
    pygame.K_x: Action.ROTATE,
    pygame.K_SPACE: Action.HARD_DROP,
}


def handle_key(game: TetrisGame, key: int) -> None:
    if key == pygame.K_r:
        game.start()
    elif key == pygame.K_p:
        if game.phase is Phase.PLAYING:
            game.pause()
        else:
            game.resume()
    elif key == pygame.K_a:
        if game.phase in (Phase.PLAYING, Phase.PAUSED):
            game.set_ai_active(not game.session.ai_active)
    else:
        action = KEY_TO_ACTION.get(key)
        if action is not None:
            game.command(action)


def run(seed: Optional[int] = None, ai: bool = False, fps: int = 60) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = TetrisGame(GameConfig(random_seed=seed))
        renderer = Renderer(cell_size=28)
        screen = pygame.display.set_mode(renderer.window_size(game.config.width, game.config.height))
        pygame.display.set_caption("Tetris AI")

        game.start()
        game.set_ai_active(ai)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        handle_key(game, event.key)

            game.advance(clock.tick(fps))
            renderer.draw(screen, game.snapshot(), now_ms=game.scheduler.now)
    finally:
        pygame.quit()


def main() -> None:
    p = argparse.ArgumentParser(description="Play Tetris, or watch the heuristic AI play it.")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--ai", action="store_true", help="start with the AI in control (toggle with A)")
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--log-level", default="info")
    args = p.parse_args()
    setup_logger(level=args.log_level)
    run(seed=args.seed, ai=args.ai, fps=args.fps)


if __name__ == "__main__":  # pragma: no cover
    main()

from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logger(*, name: str = "tetris_ai", level: str = "info") -> logging.Logger:
    logger = logging.getLogger(str(name))
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    handler = RichHandler(
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


__all__ = ["setup_logger"]

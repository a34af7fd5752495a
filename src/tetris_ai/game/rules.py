from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_base: int = 100
    lines_per_level: int = 10
    initial_interval_ms: int = 1000
    interval_decrement_ms: int = 50
    min_interval_ms: int = 100

    def __post_init__(self) -> None:
        if self.lines_per_level <= 0:
            raise ValueError("lines_per_level must be positive")
        if self.min_interval_ms <= 0 or self.initial_interval_ms < self.min_interval_ms:
            raise ValueError("fall intervals must satisfy 0 < min_interval_ms <= initial_interval_ms")

    def score_for_lines(self, lines: int, level: int) -> int:
        # Quadratic in the line count: a 4-line clear is worth 16 singles.
        if lines <= 0:
            return 0
        return lines * self.line_base * lines * level

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1

    def fall_interval(self, level: int) -> int:
        return max(self.min_interval_ms, self.initial_interval_ms - (level - 1) * self.interval_decrement_ms)

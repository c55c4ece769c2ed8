"""
Pipe obstacle for FlapEvo.

A pipe is a pair of columns with a vertical gap between them. It scrolls
left at a constant speed; birds must fly through the gap.
"""

import numpy as np
from config import (
    WORLD_HEIGHT, PIPE_WIDTH, PIPE_GAP_HEIGHT, PIPE_MARGIN, PIPE_SPEED,
)


class Pipe:
    __slots__ = ("id", "x", "width", "gap_y", "gap_height", "speed", "passed")

    def __init__(self, x: float, world_height: int = WORLD_HEIGHT, rng=None,
                 pipe_id: int = 0,
                 width: int = PIPE_WIDTH,
                 gap_height: int = PIPE_GAP_HEIGHT,
                 speed: float = PIPE_SPEED,
                 gap_y: float = None):
        if rng is None:
            rng = np.random.default_rng()
        self.id         = pipe_id
        self.x          = float(x)
        self.width      = width
        self.gap_height = gap_height
        self.speed      = speed
        self.passed     = False      # set once any bird has cleared this pipe

        if gap_y is None:
            min_gap_y = PIPE_MARGIN
            max_gap_y = world_height - gap_height - PIPE_MARGIN
            gap_y = rng.random() * (max_gap_y - min_gap_y) + min_gap_y
        self.gap_y = float(gap_y)

    @property
    def gap_bottom(self) -> float:
        return self.gap_y + self.gap_height

    def update(self):
        self.x -= self.speed

    def is_off_screen(self) -> bool:
        return self.x + self.width < 0

    def __repr__(self):
        return f"Pipe(id={self.id}, x={self.x:.1f}, gap={self.gap_y:.1f}+{self.gap_height})"

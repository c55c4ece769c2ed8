"""
World for FlapEvo.

Holds one episode's state: the scrolling pipes and the birds flying
through them. Each call to tick() advances every object by one frame,
resolves collisions and awards points. The episode is over once no bird
is alive.
"""

import numpy as np
from pipe import Pipe
from config import WORLD_WIDTH, WORLD_HEIGHT, PIPE_SPAWN_INTERVAL


class World:
    """
    Headless playfield: pipe spawning, movement, collisions and scoring.
    """

    def __init__(self, width: int = WORLD_WIDTH, height: int = WORLD_HEIGHT,
                 seed: int = None, spawn_interval: int = PIPE_SPAWN_INTERVAL):
        self.width          = width
        self.height         = height
        self.spawn_interval = spawn_interval
        self.rng            = np.random.default_rng(seed)
        self.birds          = []
        self.pipes          = []
        self.frame_count    = 0
        self.score          = 0      # best score this episode
        self.high_score     = 0      # best score since the world was created
        self._next_pipe_id  = 0

    # ──────────────────────────────────────────────────────────────────────────
    # Episode lifecycle
    # ──────────────────────────────────────────────────────────────────────────

    def reset(self, birds: list):
        """Start a new episode with the given birds and no pipes."""
        self.birds       = list(birds)
        self.pipes       = []
        self.frame_count = 0
        self.score       = 0

    def alive_count(self) -> int:
        return sum(1 for b in self.birds if b.alive)

    def is_over(self) -> bool:
        return self.alive_count() == 0

    def kill_all(self):
        """End the episode early (frame cap reached)."""
        for b in self.birds:
            b.alive = False

    # ──────────────────────────────────────────────────────────────────────────
    # Frame update
    # ──────────────────────────────────────────────────────────────────────────

    def spawn_pipe(self) -> Pipe:
        pipe = Pipe(self.width, self.height, self.rng, pipe_id=self._next_pipe_id)
        self._next_pipe_id += 1
        self.pipes.append(pipe)
        return pipe

    def tick(self) -> int:
        """
        Advance one frame. Returns the number of birds still alive.
        """
        self.frame_count += 1

        if self.frame_count % self.spawn_interval == 0:
            self.spawn_pipe()

        for pipe in self.pipes:
            pipe.update()
        self.pipes = [p for p in self.pipes if not p.is_off_screen()]

        alive = 0
        for bird in self.birds:
            if not bird.alive:
                continue
            bird.update(self.pipes, self.height)

            for pipe in self.pipes:
                if bird.check_collision(pipe):
                    break
                if bird.try_score(pipe):
                    self.score      = max(self.score, bird.score)
                    self.high_score = max(self.high_score, bird.score)

            if bird.alive:
                alive += 1

        return alive

    # ──────────────────────────────────────────────────────────────────────────
    # Snapshot for visualisation
    # ──────────────────────────────────────────────────────────────────────────

    def snapshot(self):
        """
        Returns two lists for visualisation:
          birds: (x, y, color, alive) per bird
          pipes: (x, width, gap_y, gap_height) per pipe
        """
        birds = [(b.x, b.y, b.color, b.alive) for b in self.birds]
        pipes = [(p.x, p.width, p.gap_y, p.gap_height) for p in self.pipes]
        return birds, pipes

"""
Bird class for FlapEvo.

Each bird has:
  - (x, y) position and a vertical velocity
  - A NeuralNetwork brain (7 inputs → 16 hidden → 1 output)
  - Survival bookkeeping: score (pipes cleared), distance (frames survived)
  - alive flag and, after the episode, a normalised fitness

Every frame a living bird:
  1. Applies gravity and moves
  2. Senses the nearest pipes
  3. Runs its neural network and jumps if the output exceeds 0.5
"""

from neural_network import NeuralNetwork
from genome import brain_to_color
from config import (
    BIRD_X, BIRD_START_Y, BIRD_RADIUS, GRAVITY, JUMP_STRENGTH, MAX_VELOCITY,
    VERTICAL_SCALE, HORIZONTAL_SCALE, JUMP_THRESHOLD,
    NUM_INPUTS, HIDDEN_NODES, OUTPUT_NODES, WORLD_HEIGHT,
)


def _clamp01(v: float) -> float:
    return max(0.0, min(1.0, v))


class Bird:
    """
    A single agent in the evolutionary simulation.
    """
    __slots__ = (
        "x", "y", "velocity", "radius", "brain", "alive",
        "score", "distance", "fitness",
    )

    def __init__(self, brain: NeuralNetwork = None, rng=None,
                 hidden_nodes: int = HIDDEN_NODES):
        self.x        = BIRD_X
        self.y        = float(BIRD_START_Y)
        self.velocity = 0.0
        self.radius   = BIRD_RADIUS
        self.brain    = brain if brain is not None else NeuralNetwork(
            NUM_INPUTS, hidden_nodes, OUTPUT_NODES, rng)
        self.alive    = True
        self.score    = 0                  # pipes cleared this episode
        self.distance = 0                  # frames survived this episode
        self.fitness  = 0.0

    # ──────────────────────────────────────────────────────────────────────────
    # Kinematics
    # ──────────────────────────────────────────────────────────────────────────

    def jump(self):
        self.velocity = JUMP_STRENGTH

    def update(self, pipes: list, world_height: int = WORLD_HEIGHT):
        """Advance one frame: physics, bounds check, then decide."""
        if not self.alive:
            return

        self.velocity = min(self.velocity + GRAVITY, MAX_VELOCITY)
        self.y += self.velocity
        self.distance += 1

        if self.y - self.radius <= 0 or self.y + self.radius >= world_height:
            self.alive = False
            return

        self.think(pipes)

    def check_collision(self, pipe) -> bool:
        """Kill the bird and return True if it overlaps the pipe's columns."""
        if not self.alive:
            return False
        if self.x + self.radius > pipe.x and self.x - self.radius < pipe.x + pipe.width:
            if self.y - self.radius < pipe.gap_y or self.y + self.radius > pipe.gap_bottom:
                self.alive = False
                return True
        return False

    def try_score(self, pipe) -> bool:
        """
        Count the pipe once the bird is fully past it. Returns True on a new point.

        The pipe's passed flag is shared by the flock: only the first bird
        to clear a pipe scores it.
        """
        if not self.alive or pipe.passed or self.x <= pipe.x + pipe.width:
            return False
        pipe.passed = True
        self.score += 1
        return True

    # ──────────────────────────────────────────────────────────────────────────
    # Sensing → thinking
    # ──────────────────────────────────────────────────────────────────────────

    def nearest_pipes(self, pipes: list) -> tuple:
        """
        Return (nearest, second_nearest) among pipes whose trailing edge is
        not yet behind the bird. Either may be None.
        """
        ahead = [p for p in pipes if p.x - self.x > -p.width]
        ahead.sort(key=lambda p: p.x - self.x)
        nearest = ahead[0] if ahead else None
        second  = ahead[1] if len(ahead) > 1 else None
        return nearest, second

    def sense(self, pipes: list) -> list:
        """Compute the 7 sensory inputs (0..1 range)."""
        nearest, second = self.nearest_pipes(pipes)

        if nearest is None:
            return [self.y / VERTICAL_SCALE, 0.5, 1.0, 0.5, 0.5, 0.5, 0.5]

        gap_top    = nearest.gap_y
        gap_bottom = nearest.gap_bottom
        return [
            _clamp01(self.y / VERTICAL_SCALE),
            (self.velocity + MAX_VELOCITY) / (2 * MAX_VELOCITY),
            _clamp01((nearest.x - self.x) / HORIZONTAL_SCALE),
            _clamp01(gap_top / VERTICAL_SCALE),
            _clamp01(gap_bottom / VERTICAL_SCALE),
            _clamp01((self.y - gap_top) / nearest.gap_height + 0.5),
            _clamp01(second.gap_y / VERTICAL_SCALE) if second is not None else 0.5,
        ]

    def think(self, pipes: list) -> bool:
        """Sense → infer → jump if the output exceeds the threshold."""
        output = self.brain.infer(self.sense(pipes))
        decision = output[0] > JUMP_THRESHOLD
        if decision:
            self.jump()
        return decision

    # ──────────────────────────────────────────────────────────────────────────

    @property
    def color(self) -> tuple:
        """RGB colour derived from the brain's current weights."""
        return brain_to_color(self.brain)

    def reset(self):
        """Put the bird back at the start position for a new episode."""
        self.y        = float(BIRD_START_Y)
        self.velocity = 0.0
        self.alive    = True
        self.score    = 0
        self.distance = 0
        self.fitness  = 0.0

    def __repr__(self):
        state = "alive" if self.alive else "dead"
        return f"Bird(y={self.y:.1f}, score={self.score}, distance={self.distance}, {state})"

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bird import Bird
from neural_network import NeuralNetwork


class PinnedRng:
    """Replays a fixed sequence from random(); cycles when exhausted."""

    def __init__(self, *values):
        self.values = values or (0.0,)
        self.calls = 0

    def random(self):
        v = self.values[self.calls % len(self.values)]
        self.calls += 1
        return v


def zero_brain(inputs=7, hidden=16, outputs=1):
    brain = NeuralNetwork(inputs, hidden, outputs, np.random.default_rng(0))
    for m in brain.layers().values():
        for r, c in m.entries():
            m.set(r, c, 0.0)
    return brain


def make_birds(n, rng, scores=None, distances=None):
    birds = [Bird(rng=rng) for _ in range(n)]
    for i, b in enumerate(birds):
        b.score = scores[i] if scores is not None else 0
        b.distance = distances[i] if distances is not None else 0
        b.alive = False
    return birds


@pytest.fixture
def rng():
    return np.random.default_rng(42)

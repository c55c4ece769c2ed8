"""
Weight-vector ("genome") helpers for FlapEvo.

A brain's genome is the concatenation of its four parameter blocks in a
fixed order:

  weights_ih (row-major) | weights_ho (row-major) | bias_h | bias_o

The genetic algorithm itself works on the matrices directly; these helpers
exist for statistics (population diversity) and visualisation (colours).
"""

import numpy as np


def flatten_brain(brain) -> np.ndarray:
    """Return all weights and biases of a brain as one float64 vector."""
    return np.concatenate([m.to_numpy().ravel() for m in brain.layers().values()])


def genetic_distance(brain_a, brain_b) -> float:
    """
    Root-mean-square difference between two brains' weights.
    0 for identical brains; grows without bound as weights drift apart.
    """
    a = flatten_brain(brain_a)
    b = flatten_brain(brain_b)
    if a.shape != b.shape:
        raise ValueError("brains with different topologies cannot be compared")
    return float(np.sqrt(np.mean((a - b) ** 2)))


def population_diversity(brains: list, sample: int = 30, rng=None) -> float:
    """
    Estimate diversity as the mean pairwise genetic distance over a random
    sample of brains. Returns 0 for fewer than two brains.
    """
    if len(brains) < 2:
        return 0.0
    if rng is None:
        rng = np.random.default_rng()
    sample_size = min(sample, len(brains))
    idx = rng.choice(len(brains), sample_size, replace=False)
    vectors = [flatten_brain(brains[i]) for i in idx]
    total, count = 0.0, 0
    for i in range(len(vectors)):
        for j in range(i + 1, len(vectors)):
            total += float(np.sqrt(np.mean((vectors[i] - vectors[j]) ** 2)))
            count += 1
    return total / count if count else 0.0


def brain_to_color(brain) -> tuple:
    """
    Map a brain to an RGB colour so that birds with similar weights have
    similar colours (a quick visual diversity indicator).
    """
    genome = flatten_brain(brain)
    # three interleaved slices → mean weight → 0..255
    channels = []
    for k in range(3):
        part = genome[k::3]
        v = float(np.tanh(part.mean())) if part.size else 0.0
        channels.append(int(round((v + 1.0) * 127.5)))
    # brighten so they're visible on a dark background
    return tuple(max(50, c) for c in channels)

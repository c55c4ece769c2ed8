"""
Genetic Algorithm for FlapEvo.

Turns a finished (all dead) generation of birds into the next one:
  1. Score      – fitness = score * 1000 + distance, normalised to sum 1
  2. Elitism    – clone the best birds that cleared at least one pipe
  3. Breed      – roulette-wheel parents → crossover → mutation
  4. Repeat until the population is full again

The controller also keeps its own clone of the best brain ever seen, so
the champion survives population replacement.
"""

import math
import numpy as np
from bird import Bird
from errors import EmptyPopulation, PopulationSizeMismatch, InvalidRate, InvalidTopology
from config import (
    POPULATION, MUTATION_RATE, ELITE_FRACTION, CROSSOVER_PROBABILITY,
    SCORE_WEIGHT, FLAT_FITNESS, ELITISM_MODE,
)

ELITISM_MODES = ("top", "champion")


class GeneticAlgorithm:
    """
    Evolution controller. One instance lives for the whole run.
    """

    def __init__(
        self,
        population_size: int   = POPULATION,
        mutation_rate:   float = MUTATION_RATE,
        elitism:         str   = ELITISM_MODE,
        rng                    = None,
    ):
        if population_size < 1:
            raise ValueError(f"population size must be at least 1, got {population_size}")
        if not 0.0 <= mutation_rate <= 1.0:
            raise InvalidRate(f"mutation rate must lie in [0, 1], got {mutation_rate}")
        if elitism not in ELITISM_MODES:
            raise ValueError(f"unknown elitism mode {elitism!r}, expected one of {ELITISM_MODES}")

        self.population_size = population_size
        self.mutation_rate   = mutation_rate
        self.elitism         = elitism
        self.rng             = rng if rng is not None else np.random.default_rng()

        self._generation = 1
        self._best_score = 0
        self._best_brain = None

    # ──────────────────────────────────────────────────────────────────────────
    # Read-only state for display
    # ──────────────────────────────────────────────────────────────────────────

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def best_score(self) -> int:
        return self._best_score

    @property
    def best_brain(self):
        """The controller's own clone of the best-ever brain (or None)."""
        return self._best_brain

    # ──────────────────────────────────────────────────────────────────────────
    # Scoring
    # ──────────────────────────────────────────────────────────────────────────

    def compute_fitness(self, birds: list):
        """
        Assign every bird a normalised fitness and sort the list in place,
        fittest first. Also records a new best-ever brain when a bird beats
        the stored best score.
        """
        total = 0.0
        for bird in birds:
            bird.fitness = bird.score * SCORE_WEIGHT + bird.distance
            if bird.score > self._best_score:
                self._best_score = bird.score
                self._best_brain = bird.brain.clone()
            total += bird.fitness

        for bird in birds:
            if total > 0:
                bird.fitness = bird.fitness / total
            else:
                bird.fitness = FLAT_FITNESS

        birds.sort(key=lambda b: b.fitness, reverse=True)

    # ──────────────────────────────────────────────────────────────────────────
    # Selection
    # ──────────────────────────────────────────────────────────────────────────

    def select_parent(self, birds: list) -> Bird:
        """
        Roulette-wheel selection over a fitness-sorted population whose
        fitness values sum to about 1.
        """
        if not birds:
            raise EmptyPopulation("cannot select a parent from an empty population")
        r = self.rng.random()
        for bird in birds:
            r -= bird.fitness
            if r <= 0:
                return bird
        # cumulative fitness fell short of r through rounding
        return birds[-1]

    # ──────────────────────────────────────────────────────────────────────────
    # Variation
    # ──────────────────────────────────────────────────────────────────────────

    def crossover(self, parent1: Bird, parent2: Bird) -> Bird:
        """
        Child starts as a clone of parent1's brain; each connection weight
        is then replaced by parent2's with probability 0.5. Biases are
        inherited from parent1 only.
        """
        if parent1.brain.topology != parent2.brain.topology:
            raise InvalidTopology(
                f"cannot cross {parent1.brain.topology} with {parent2.brain.topology}")

        child = Bird(brain=parent1.brain.clone())
        for name in ("weights_ih", "weights_ho"):
            mine   = getattr(child.brain, name)
            theirs = getattr(parent2.brain, name)
            for r, c in mine.entries():
                if self.rng.random() < CROSSOVER_PROBABILITY:
                    mine.set(r, c, theirs.get(r, c))
        return child

    # ──────────────────────────────────────────────────────────────────────────
    # Generation step
    # ──────────────────────────────────────────────────────────────────────────

    def next_generation(self, birds: list) -> list:
        """
        Produce exactly population_size new birds from a finished generation.
        `birds` is re-ordered (fittest first) as a side effect.
        """
        if not birds:
            raise EmptyPopulation("cannot breed from an empty population")
        if len(birds) != self.population_size:
            raise PopulationSizeMismatch(
                f"expected {self.population_size} birds, got {len(birds)}")

        self.compute_fitness(birds)

        new_birds = []

        if self.elitism == "top":
            elite_count = math.floor(self.population_size * ELITE_FRACTION)
            for bird in birds[:elite_count]:
                if bird.score > 0:
                    new_birds.append(Bird(brain=bird.brain.clone()))

        # the champion fills in when no elite qualified
        if not new_birds and self._best_brain is not None:
            new_birds.append(Bird(brain=self._best_brain.clone()))

        while len(new_birds) < self.population_size:
            parent1 = self.select_parent(birds)
            parent2 = self.select_parent(birds)
            child = self.crossover(parent1, parent2)
            child.brain.mutate(self.mutation_rate, self.rng)
            new_birds.append(child)

        self._generation += 1
        return new_birds

    def reset_generation(self):
        """Restart the generation counter; the best-ever record is kept."""
        self._generation = 1

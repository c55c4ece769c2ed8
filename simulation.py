"""
Simulation Engine for FlapEvo.

Orchestrates the full evolutionary loop:
  for each generation:
    1. Reset the world with the current birds
    2. Tick the world until every bird is dead (or the frame cap hits)
    3. Log stats
    4. Breed the next generation with the genetic algorithm
"""

import time
from world import World
from bird import Bird
from genetic_algorithm import GeneticAlgorithm
from genome import population_diversity
from config import (
    WORLD_WIDTH, WORLD_HEIGHT, POPULATION, MAX_GENERATIONS,
    MUTATION_RATE, HIDDEN_NODES, SPEED, MAX_FRAMES_PER_EPISODE, ELITISM_MODE,
)


class Simulation:
    """
    Main simulation controller.
    """

    def __init__(
        self,
        population:       int   = POPULATION,
        max_generations:  int   = MAX_GENERATIONS,
        mutation_rate:    float = MUTATION_RATE,
        hidden_nodes:     int   = HIDDEN_NODES,
        speed:            int   = SPEED,
        max_frames:       int   = MAX_FRAMES_PER_EPISODE,
        elitism:          str   = ELITISM_MODE,
        world_width:      int   = WORLD_WIDTH,
        world_height:     int   = WORLD_HEIGHT,
        seed:             int   = None,
        verbose:          bool  = True,
        on_tick_callback  = None,    # called after every simulation step
        on_gen_callback   = None,    # called at end of each generation
    ):
        if speed < 1:
            raise ValueError(f"speed must be at least 1, got {speed}")
        self.population      = population
        self.max_generations = max_generations
        self.hidden_nodes    = hidden_nodes
        self.speed           = speed
        self.max_frames      = max_frames
        self.verbose         = verbose
        self.world           = World(world_width, world_height, seed)
        self.rng             = self.world.rng
        self.ga              = GeneticAlgorithm(population, mutation_rate,
                                                elitism, rng=self.rng)
        self.on_tick_callback = on_tick_callback
        self.on_gen_callback  = on_gen_callback

        # History
        self.stats  = []          # list of dicts, one per generation
        self.birds  = []
        self._stop  = False

    # ──────────────────────────────────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────────────────────────────────

    @property
    def generation(self) -> int:
        return self.ga.generation

    def initial_birds(self) -> list:
        return [Bird(rng=self.rng, hidden_nodes=self.hidden_nodes)
                for _ in range(self.population)]

    def run(self):
        """Run max_generations generations, starting from the current birds."""
        if not self.birds:
            self.birds = self.initial_birds()
        for _ in range(self.max_generations):
            if self._stop:
                break
            self.step_generation()

        if self.verbose:
            print("\n=== Simulation complete ===")

    def stop(self):
        """Ask run() to stop after the current generation."""
        self._stop = True

    def reset(self):
        """
        Start over at generation 1 with a fresh random population.

        The world is emptied and the per-generation stats are dropped; the
        best-ever brain and score, and the world's high score, are kept.
        """
        self.birds = self.initial_birds()
        self.world.reset(self.birds)
        self.ga.reset_generation()
        self.stats = []
        self._stop = False

    def step_generation(self) -> dict:
        """Play one episode with the current birds, then breed the next ones."""
        if not self.birds:
            self.birds = self.initial_birds()

        t0 = time.time()
        gen_idx = self.ga.generation
        self._run_episode(self.birds)

        stats = self._compute_stats(gen_idx, self.birds)
        stats["elapsed_s"] = round(time.time() - t0, 3)
        self.stats.append(stats)

        if self.verbose:
            self._print_stats(gen_idx, stats)

        if self.on_gen_callback:
            self.on_gen_callback(gen_idx, stats, self.world, self.birds, self.ga)

        self.birds = self.ga.next_generation(self.birds)
        return stats

    # ──────────────────────────────────────────────────────────────────────────
    # One episode
    # ──────────────────────────────────────────────────────────────────────────

    def _run_episode(self, birds: list):
        """Tick the world until every bird is dead or the frame cap is hit."""
        self.world.reset(birds)
        alive = len(birds)
        while alive > 0:
            for _ in range(self.speed):
                alive = self.world.tick()
                if alive == 0:
                    break
            if self.on_tick_callback:
                self.on_tick_callback(self.world.frame_count, self.world, birds)
            if alive > 0 and self.world.frame_count >= self.max_frames:
                self.world.kill_all()
                alive = 0

    # ──────────────────────────────────────────────────────────────────────────
    # Stats
    # ──────────────────────────────────────────────────────────────────────────

    def _compute_stats(self, gen_idx: int, birds: list) -> dict:
        n_pop   = len(birds)
        scores  = [b.score for b in birds]
        dists   = [b.distance for b in birds]

        return {
            "generation":    gen_idx,
            "population":    n_pop,
            "best_score":    max(scores) if scores else 0,
            "best_ever":     max(self.ga.best_score, max(scores) if scores else 0),
            "mean_score":    sum(scores) / max(1, n_pop),
            "mean_distance": sum(dists) / max(1, n_pop),
            "frames":        self.world.frame_count,
            "diversity":     population_diversity([b.brain for b in birds], rng=self.rng),
        }

    def _print_stats(self, gen_idx: int, stats: dict):
        if gen_idx % 10 == 0 or gen_idx <= 5:
            print(
                f"Gen {gen_idx:>5}  |  "
                f"best {stats['best_score']:>4} (ever {stats['best_ever']:>4})  |  "
                f"mean score {stats['mean_score']:>6.2f}  |  "
                f"frames {stats['frames']:>6}  |  "
                f"diversity {stats['diversity']:.3f}  |  "
                f"{stats['elapsed_s']:.2f}s"
            )

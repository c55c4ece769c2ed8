"""
FlapEvo – Main Entry Point
==========================

Usage examples:
  python main.py                          # 100 generations, 50 birds
  python main.py --gens 300 --pop 100     # custom parameters
  python main.py --elitism champion       # always keep only the best-ever brain
  python main.py --hidden 8               # smaller brains (7-8-1)
  python main.py --speed 10               # 10 world ticks per step
  python main.py --no_mutation            # turn off mutations (demonstration)
"""

import argparse
import os

from simulation  import Simulation
from visualizer  import (ensure_dirs, save_world_snapshot,
                          save_evolution_chart, save_neural_diagram,
                          append_csv)
from genetic_algorithm import ELITISM_MODES
from config import (SAVE_DIR, CHART_INTERVAL, SAVE_NEURAL_SAMPLE,
                    POPULATION, MAX_GENERATIONS, MUTATION_RATE,
                    HIDDEN_NODES, ELITISM_MODE, SPEED, SPEED_CHOICES,
                    MAX_FRAMES_PER_EPISODE)


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="FlapEvo – neuro-evolution of flappy birds")
    p.add_argument("--gens",       type=int,   default=MAX_GENERATIONS,
                   help="Number of generations to run")
    p.add_argument("--pop",        type=int,   default=POPULATION,
                   help="Population size")
    p.add_argument("--mutation",   type=float, default=MUTATION_RATE,
                   help="Per-weight mutation probability")
    p.add_argument("--no_mutation",action="store_true",
                   help="Set mutation rate to 0 (demonstration)")
    p.add_argument("--hidden",     type=int,   default=HIDDEN_NODES,
                   help="Hidden layer size")
    p.add_argument("--elitism",    default=ELITISM_MODE, choices=ELITISM_MODES,
                   help="Elitism policy")
    p.add_argument("--speed",      type=int,   default=SPEED, choices=SPEED_CHOICES,
                   help="World ticks per simulation step")
    p.add_argument("--max_frames", type=int,   default=MAX_FRAMES_PER_EPISODE,
                   help="End an episode after this many frames")
    p.add_argument("--seed",       type=int,   default=None,
                   help="Random seed for reproducibility")
    p.add_argument("--outdir",     default=SAVE_DIR,
                   help="Output directory")
    p.add_argument("--chart_interval", type=int, default=CHART_INTERVAL,
                   help="Save snapshot + chart every N generations")
    args = p.parse_args(argv)
    if args.pop < 1:
        p.error("--pop must be at least 1")
    if args.hidden < 1:
        p.error("--hidden must be at least 1")
    if not 0.0 <= args.mutation <= 1.0:
        p.error("--mutation must lie in [0, 1]")
    if args.chart_interval < 1:
        p.error("--chart_interval must be at least 1")
    return args


# ──────────────────────────────────────────────────────────────────────────────
# Callbacks
# ──────────────────────────────────────────────────────────────────────────────

class SimCallbacks:
    """Bundles the per-generation callbacks used by the simulation."""

    def __init__(self, outdir: str, chart_interval: int, all_stats: list):
        self.outdir         = outdir
        self.chart_interval = chart_interval
        self.all_stats      = all_stats

    def on_generation(self, gen_idx, stats, world, birds, ga):
        self.all_stats.append(stats)
        append_csv(stats, self.outdir)

        if gen_idx % self.chart_interval == 0:
            path = save_world_snapshot(world, gen_idx, self.outdir)
            print(f"  → Snapshot: {path}")

            if SAVE_NEURAL_SAMPLE and ga.best_brain is not None:
                npath = save_neural_diagram(ga.best_brain, gen_idx,
                                            "champion", self.outdir)
                print(f"  → Neural diagram: {npath}")

            save_evolution_chart(self.all_stats, self.outdir)


# ──────────────────────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────────────────────

def main(argv=None):
    args = parse_args(argv)
    outdir = args.outdir
    ensure_dirs(outdir)

    mutation_rate = 0.0 if args.no_mutation else args.mutation

    print("=" * 60)
    print("  FlapEvo – Neuro-evolution of flappy birds")
    print("=" * 60)
    print(f"  Population : {args.pop}")
    print(f"  Generations: {args.gens}")
    print(f"  Brain      : 7-{args.hidden}-1")
    print(f"  Mutation   : {mutation_rate}")
    print(f"  Elitism    : {args.elitism}")
    print(f"  Speed      : {args.speed}x")
    print(f"  Output dir : {outdir}")
    print("=" * 60)

    all_stats = []
    cb = SimCallbacks(outdir, args.chart_interval, all_stats)

    sim = Simulation(
        population      = args.pop,
        max_generations = args.gens,
        mutation_rate   = mutation_rate,
        hidden_nodes    = args.hidden,
        speed           = args.speed,
        max_frames      = args.max_frames,
        elitism         = args.elitism,
        seed            = args.seed,
        on_gen_callback = cb.on_generation,
    )

    sim.run()

    print("\nSaving final evolution chart …")
    chart_path = save_evolution_chart(all_stats, outdir, "evolution_final.png")
    print(f"  → {chart_path}")

    if sim.ga.best_brain is not None:
        print(f"\nBest score ever: {sim.ga.best_score}")
        print(sim.ga.best_brain.summary())

    print("\nDone! All outputs saved to:", outdir)


if __name__ == "__main__":
    main()

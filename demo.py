"""
Quick demo – runs 30 generations of 50 birds with a fixed seed
and saves snapshots + charts without needing a display.
"""
import os, sys
sys.path.insert(0, os.path.dirname(__file__))

from simulation import Simulation
from visualizer import (ensure_dirs, save_world_snapshot,
                         save_evolution_chart, save_neural_diagram, append_csv)

OUT = "output/demo"
ensure_dirs(OUT)

all_stats = []

def on_gen(gen_idx, stats, world, birds, ga):
    all_stats.append(stats)
    append_csv(stats, OUT)
    if gen_idx % 5 == 0:
        save_world_snapshot(world, gen_idx, OUT)
        if ga.best_brain is not None:
            save_neural_diagram(ga.best_brain, gen_idx, "champion", OUT)

sim = Simulation(
    population      = 50,
    max_generations = 30,
    mutation_rate   = 0.08,
    speed           = 5,
    max_frames      = 5000,
    seed            = 42,
    on_gen_callback = on_gen,
)
sim.run()

save_evolution_chart(all_stats, OUT, "demo_chart.png")
print(f"\nBest score ever: {sim.ga.best_score}")
print("All outputs in:", OUT)

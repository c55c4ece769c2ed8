"""
Visualizer for FlapEvo.

Produces:
  1. World snapshots  – pipes and birds at the end of an episode
  2. Evolution chart  – best / mean score and diversity over generations
  3. Neural network diagrams – dense wiring of a brain
  4. CSV log          – per-generation stats
"""

import os
import csv
import matplotlib
matplotlib.use("Agg")          # non-interactive backend (no display needed)
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from config import SAVE_DIR, LOG_CSV, SENSOR_LABELS


# ──────────────────────────────────────────────────────────────────────────────
# Directory setup
# ──────────────────────────────────────────────────────────────────────────────

def ensure_dirs(base: str = SAVE_DIR):
    for sub in ("snapshots", "charts", "neural"):
        os.makedirs(os.path.join(base, sub), exist_ok=True)


# ──────────────────────────────────────────────────────────────────────────────
# World snapshot
# ──────────────────────────────────────────────────────────────────────────────

def save_world_snapshot(world, generation: int, base: str = SAVE_DIR):
    """
    Render pipes and birds. Dead birds are drawn faded.
    """
    fig, ax = plt.subplots(figsize=(8, 6), dpi=100)
    ax.set_xlim(0, world.width)
    ax.set_ylim(world.height, 0)          # screen coordinates: y grows downward
    ax.set_aspect("equal")
    ax.set_facecolor("#87CEEB")
    fig.patch.set_facecolor("#111111")
    ax.set_title(f"Generation {generation}  "
                 f"(frame {world.frame_count}, score {world.score})",
                 color="white", fontsize=10)
    ax.tick_params(colors="white")

    birds, pipes = world.snapshot()
    for (x, width, gap_y, gap_height) in pipes:
        ax.add_patch(mpatches.Rectangle((x, 0), width, gap_y,
                                        facecolor="#2ecc71", edgecolor="#27ae60"))
        ax.add_patch(mpatches.Rectangle((x, gap_y + gap_height), width,
                                        world.height - gap_y - gap_height,
                                        facecolor="#2ecc71", edgecolor="#27ae60"))

    for (x, y, (r, g, b), alive) in birds:
        ax.add_patch(mpatches.Circle((x, y), 18,
                                     color=(r / 255, g / 255, b / 255),
                                     alpha=0.7 if alive else 0.3))

    path = os.path.join(base, "snapshots", f"gen_{generation:06d}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Evolution statistics chart
# ──────────────────────────────────────────────────────────────────────────────

def save_evolution_chart(stats: list, base: str = SAVE_DIR,
                         filename: str = "evolution.png"):
    """
    Plot best score, mean score and genetic diversity across generations.
    """
    if not stats:
        return
    gens      = [s["generation"] for s in stats]
    best      = [s["best_score"] for s in stats]
    best_ever = [s["best_ever"]  for s in stats]
    mean      = [s["mean_score"] for s in stats]
    diversity = [s["diversity"]  for s in stats]

    fig, ax1 = plt.subplots(figsize=(12, 5), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax1.set_facecolor("#111111")

    ax1.plot(gens, best, color="#44FF44", linewidth=1.2,
             label="Best score", zorder=3)
    ax1.plot(gens, best_ever, color="#FFDD44", linewidth=1.0,
             linestyle=":", label="Best ever", zorder=3)
    ax1.plot(gens, mean, color="#FF8800", linewidth=1.0,
             alpha=0.8, label="Mean score", zorder=2)
    ax1.set_ylabel("Pipes cleared", color="white")
    ax1.set_ylim(0, max(best_ever) * 1.05 + 1)
    ax1.tick_params(axis="both", colors="white")
    ax1.set_xlabel("Generation", color="white")

    ax2 = ax1.twinx()
    ax2.plot(gens, diversity, color="#CC44FF", linewidth=1.0,
             linestyle="--", label="Diversity", zorder=2)
    ax2.set_ylabel("Genetic diversity (RMS weight distance)", color="white")
    ax2.set_ylim(0, max(diversity) * 1.1 + 1e-6)
    ax2.tick_params(colors="white")

    for spine in ax1.spines.values():
        spine.set_edgecolor("#444444")

    lines1, labels1 = ax1.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax1.legend(lines1 + lines2, labels1 + labels2,
               facecolor="#222222", labelcolor="white",
               loc="upper left", fontsize=8)

    ax1.set_title("Evolutionary Progress", color="white", fontsize=12)
    plt.tight_layout()
    path = os.path.join(base, "charts", filename)
    plt.savefig(path, dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Neural network diagram
# ──────────────────────────────────────────────────────────────────────────────

def save_neural_diagram(brain, generation: int, label: str = "",
                        base: str = SAVE_DIR):
    """
    Draw a brain as a layered graph.
    Inputs (blue) → hidden (grey) → outputs (pink).
    Green edges = positive weights, red edges = negative.
    """
    n_in, n_hid, n_out = brain.topology

    def _column(n, x):
        return [(x, (i + 1) / (n + 1)) for i in range(n)]

    inputs  = _column(n_in, 0.0)
    hidden  = _column(n_hid, 0.5)
    outputs = _column(n_out, 1.0)

    fig, ax = plt.subplots(figsize=(10, 6), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax.set_facecolor("#111111")
    ax.axis("off")
    ax.set_xlim(-0.25, 1.25)
    ax.set_ylim(-0.05, 1.08)

    def _edges(weights, src, dst):
        for r, c in weights.entries():
            w = weights.get(r, c)
            (x1, y1), (x2, y2) = src[c], dst[r]
            ax.plot([x1, x2], [y1, y2],
                    color="#44FF44" if w >= 0 else "#FF4444",
                    lw=0.3 + min(2.5, abs(w) * 1.5), alpha=0.5, zorder=1)

    _edges(brain.weights_ih, inputs, hidden)
    _edges(brain.weights_ho, hidden, outputs)

    def _nodes(points, color, labels, ha, dx):
        for i, (x, y) in enumerate(points):
            ax.add_patch(plt.Circle((x, y), 0.018, color=color, zorder=3))
            if labels is not None:
                ax.text(x + dx, y, labels(i), color="white", fontsize=6.5,
                        ha=ha, va="center", zorder=4)

    _nodes(inputs,  "#4499FF", lambda i: SENSOR_LABELS.get(i, f"S{i}"), "right", -0.03)
    _nodes(hidden,  "#AAAAAA", None, "center", 0)
    _nodes(outputs, "#FF88AA", lambda i: "jump" if n_out == 1 else f"A{i}", "left", 0.03)

    for tx, title in [(0.0, "Inputs"), (0.5, "Hidden (tanh)"), (1.0, "Output (sigmoid)")]:
        ax.text(tx, 1.04, title, color="#CCCCCC", ha="center",
                fontsize=9, fontweight="bold")

    ax.set_title(f"Gen {generation} — Brain of {label}  "
                 f"({brain.num_parameters()} parameters)",
                 color="white", fontsize=10, pad=4)

    path = os.path.join(base, "neural", f"gen_{generation:06d}_{label}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# CSV log
# ──────────────────────────────────────────────────────────────────────────────

def append_csv(stats: dict, base: str = SAVE_DIR):
    """Append one generation's stats to a CSV file."""
    if not LOG_CSV:
        return
    path = os.path.join(base, "evolution_log.csv")
    file_exists = os.path.isfile(path)
    with open(path, "a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(stats.keys()))
        if not file_exists:
            writer.writeheader()
        writer.writerow(stats)

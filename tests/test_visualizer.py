import os

from visualizer import (ensure_dirs, save_world_snapshot, save_evolution_chart,
                        save_neural_diagram, append_csv)
from world import World
from bird import Bird
from neural_network import NeuralNetwork


def _stats(n=3):
    return [
        {"generation": g, "population": 4, "best_score": g, "best_ever": g,
         "mean_score": g / 2, "mean_distance": 100.0, "frames": 300,
         "diversity": 0.5, "elapsed_s": 0.1}
        for g in range(1, n + 1)
    ]


def test_ensure_dirs(tmp_path):
    ensure_dirs(str(tmp_path))
    for sub in ("snapshots", "charts", "neural"):
        assert (tmp_path / sub).is_dir()


def test_world_snapshot(tmp_path, rng):
    ensure_dirs(str(tmp_path))
    world = World(seed=1)
    world.reset([Bird(rng=rng) for _ in range(3)])
    world.spawn_pipe()
    path = save_world_snapshot(world, 1, str(tmp_path))
    assert os.path.isfile(path)


def test_evolution_chart(tmp_path):
    ensure_dirs(str(tmp_path))
    path = save_evolution_chart(_stats(), str(tmp_path), "chart.png")
    assert os.path.isfile(path)
    assert save_evolution_chart([], str(tmp_path)) is None


def test_neural_diagram(tmp_path, rng):
    ensure_dirs(str(tmp_path))
    path = save_neural_diagram(NeuralNetwork(7, 16, 1, rng), 3, "champion", str(tmp_path))
    assert os.path.isfile(path)
    assert path.endswith("gen_000003_champion.png")


def test_append_csv_writes_header_once(tmp_path):
    for row in _stats(2):
        append_csv(row, str(tmp_path))
    lines = (tmp_path / "evolution_log.csv").read_text().splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("generation,")

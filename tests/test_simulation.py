import pytest

from simulation import Simulation


def _small_sim(**kwargs):
    params = dict(population=6, max_generations=3, max_frames=400,
                  seed=7, verbose=False)
    params.update(kwargs)
    return Simulation(**params)


def test_run_produces_one_stats_row_per_generation():
    sim = _small_sim()
    sim.run()
    assert [s["generation"] for s in sim.stats] == [1, 2, 3]
    assert sim.generation == 4
    assert len(sim.birds) == 6


def test_stats_fields():
    sim = _small_sim(max_generations=1)
    sim.run()
    stats = sim.stats[0]
    for key in ("population", "best_score", "best_ever", "mean_score",
                "mean_distance", "frames", "diversity", "elapsed_s"):
        assert key in stats
    assert stats["population"] == 6
    assert stats["mean_distance"] > 0
    assert stats["diversity"] >= 0


@pytest.mark.parametrize("speed", [1, 5])
def test_frame_cap_ends_episode(speed):
    sim = _small_sim(max_generations=1, max_frames=20, speed=speed)
    sim.run()
    assert sim.stats[0]["frames"] <= 20 + speed - 1


def test_generation_callback_sees_finished_population():
    seen = []

    def on_gen(gen_idx, stats, world, birds, ga):
        seen.append((gen_idx, all(not b.alive for b in birds), len(birds)))

    sim = _small_sim(on_gen_callback=on_gen)
    sim.run()
    assert seen == [(1, True, 6), (2, True, 6), (3, True, 6)]


def test_tick_callback_called():
    frames = []
    sim = _small_sim(max_generations=1, max_frames=30,
                     on_tick_callback=lambda f, world, birds: frames.append(f))
    sim.run()
    assert frames and frames == sorted(frames)


def test_stop_between_generations():
    sim = _small_sim(max_generations=10)
    sim.on_gen_callback = lambda *args: sim.stop()
    sim.run()
    assert len(sim.stats) == 1


def test_same_seed_same_history():
    a = _small_sim()
    b = _small_sim()
    a.run()
    b.run()
    strip = lambda rows: [{k: v for k, v in r.items() if k != "elapsed_s"} for r in rows]
    assert strip(a.stats) == strip(b.stats)


def test_invalid_speed():
    with pytest.raises(ValueError):
        _small_sim(speed=0)


def test_verbose_prints_progress(capsys):
    _small_sim(max_generations=1, verbose=True).run()
    out = capsys.readouterr().out
    assert "Gen" in out
    assert "Simulation complete" in out


def test_reset_restarts_at_generation_one_and_keeps_best():
    sim = _small_sim(max_generations=2)
    sim.run()
    best_brain, best_score = sim.ga.best_brain, sim.ga.best_score
    old_birds = sim.birds
    sim.stop()

    sim.reset()
    assert sim.generation == 1
    assert sim.stats == []
    assert sim.ga.best_brain is best_brain
    assert sim.ga.best_score == best_score
    assert len(sim.birds) == 6
    assert not any(b in old_birds for b in sim.birds)
    assert sim.world.birds == sim.birds
    assert sim.world.pipes == []

    sim.run()
    assert [s["generation"] for s in sim.stats] == [1, 2]

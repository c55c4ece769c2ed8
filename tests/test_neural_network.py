import numpy as np
import pytest

from neural_network import NeuralNetwork, sigmoid
from errors import InvalidTopology, InputSizeMismatch, InvalidRate
from conftest import zero_brain, PinnedRng


def _random_inputs(rng, n=7):
    return list(rng.random(n))


# ─── Construction ─────────────────────────────────────────────────────────────

def test_layer_shapes(rng):
    nn = NeuralNetwork(7, 16, 1, rng)
    assert nn.weights_ih.shape == (16, 7)
    assert nn.weights_ho.shape == (1, 16)
    assert nn.bias_h.shape == (16, 1)
    assert nn.bias_o.shape == (1, 1)
    assert nn.topology == (7, 16, 1)
    assert nn.num_parameters() == 16 * 7 + 16 + 16 + 1


def test_weights_are_randomized(rng):
    nn = NeuralNetwork(7, 16, 1, rng)
    for m in nn.layers().values():
        values = m.to_numpy()
        assert values.min() >= -1.0 and values.max() < 1.0
    assert np.unique(nn.weights_ih.to_numpy()).size > 1


@pytest.mark.parametrize("topology", [(0, 16, 1), (7, 0, 1), (7, 16, 0), (7, -1, 1)])
def test_invalid_topology(topology):
    with pytest.raises(InvalidTopology):
        NeuralNetwork(*topology)


# ─── Inference ────────────────────────────────────────────────────────────────

def test_zero_weights_output_exactly_half():
    nn = zero_brain()
    assert nn.infer([0.5, 0.5, 1, 0.5, 0.5, 0.5, 0.5]) == [0.5]


def test_inference_is_deterministic(rng):
    nn = NeuralNetwork(7, 16, 1, rng)
    x = _random_inputs(rng)
    first = nn.infer(x)
    for _ in range(5):
        assert nn.infer(x) == first


def test_output_in_open_unit_interval(rng):
    for _ in range(20):
        nn = NeuralNetwork(7, 16, 3, rng)
        out = nn.infer(_random_inputs(rng))
        assert len(out) == 3
        assert all(0.0 < v < 1.0 for v in out)


def test_input_size_mismatch(rng):
    nn = NeuralNetwork(7, 16, 1, rng)
    with pytest.raises(InputSizeMismatch):
        nn.infer([0.1] * 6)
    with pytest.raises(InputSizeMismatch):
        nn.infer([0.1] * 8)


def test_sigmoid_never_overflows():
    assert sigmoid(0.0) == 0.5
    assert sigmoid(-1000.0) == 0.0
    assert sigmoid(1000.0) == 1.0


def test_drifted_bias_saturates_output_to_one():
    nn = zero_brain()
    nn.bias_o.set(0, 0, 50.0)
    assert nn.infer([0.0] * 7) == [1.0]
    nn.bias_o.set(0, 0, 5.0)
    assert 0.5 < nn.infer([0.0] * 7)[0] < 1.0


# ─── Cloning ──────────────────────────────────────────────────────────────────

def test_clone_matches_source(rng):
    nn = NeuralNetwork(7, 16, 1, rng)
    twin = nn.clone()
    for name, m in nn.layers().items():
        assert twin.layers()[name] == m
        assert twin.layers()[name] is not m
    for _ in range(10):
        x = _random_inputs(rng)
        assert twin.infer(x) == nn.infer(x)


def test_mutating_clone_leaves_source_alone(rng):
    nn = NeuralNetwork(7, 16, 1, rng)
    x = _random_inputs(rng)
    before = nn.infer(x)
    twin = nn.clone()
    twin.mutate(1.0, rng)
    assert nn.infer(x) == before
    assert twin.weights_ih != nn.weights_ih


# ─── Mutation ─────────────────────────────────────────────────────────────────

def test_zero_rate_changes_nothing(rng):
    nn = NeuralNetwork(7, 16, 1, rng)
    before = {k: m.copy() for k, m in nn.layers().items()}
    nn.mutate(0.0, rng)
    for k, m in nn.layers().items():
        assert m == before[k]


def test_full_rate_offsets_are_bounded(rng):
    nn = NeuralNetwork(7, 16, 1, rng)
    before = {k: m.to_numpy() for k, m in nn.layers().items()}
    nn.mutate(1.0, rng)
    for k, m in nn.layers().items():
        delta = m.to_numpy() - before[k]
        assert np.all(np.abs(delta) <= 0.5)
        assert np.any(delta != 0)


def test_mutation_covers_biases():
    nn = zero_brain(2, 2, 1)
    # every coin passes (0.0 < rate), every offset = (1.0*2-1)*0.5 = 0.5
    nn.mutate(0.5, PinnedRng(0.0, 1.0))
    assert nn.bias_h.column(0) == [0.5, 0.5]
    assert nn.bias_o.column(0) == [0.5]
    assert nn.weights_ih.to_list() == [[0.5, 0.5], [0.5, 0.5]]


def test_mutation_is_not_clamped():
    nn = zero_brain(1, 1, 1)
    for _ in range(10):
        nn.mutate(1.0, PinnedRng(0.0, 1.0))
    assert nn.weights_ih.get(0, 0) == pytest.approx(5.0)


@pytest.mark.parametrize("rate", [-0.01, 1.01, float("nan")])
def test_invalid_rate(rng, rate):
    nn = NeuralNetwork(7, 4, 1, rng)
    with pytest.raises(InvalidRate):
        nn.mutate(rate, rng)


def test_summary_mentions_topology(rng):
    assert "7-16-1" in NeuralNetwork(7, 16, 1, rng).summary()

"""
Neural Network Brain for FlapEvo.

Fixed three-layer topology:
  inputs → hidden (tanh) → outputs (sigmoid)

Forward pass (per simulation frame):
  1. hidden = tanh(W_ih · inputs + B_h)
  2. output = sigmoid(W_ho · hidden + B_o)

The sigmoid output is read as a jump probability / threshold. Evolution
never changes the topology; it only clones, crosses over and perturbs
the weights.
"""

import math
import numpy as np
from matrix import Matrix
from errors import InvalidTopology, InputSizeMismatch, InvalidRate
from config import NUM_INPUTS, HIDDEN_NODES, OUTPUT_NODES, MUTATION_OFFSET_SCALE


def sigmoid(x: float) -> float:
    """
    Logistic function. Exact in (0, 1) for moderate x; in float64 it rounds
    to 1.0 above x ~ 37 and underflows towards 0.0 far below -700.
    """
    # split form: math.exp never overflows
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def tanh(x: float) -> float:
    return math.tanh(x)


def _valid_count(n) -> bool:
    return isinstance(n, (int, np.integer)) and not isinstance(n, bool) and n >= 1


class NeuralNetwork:
    """
    Small dense feed-forward network owned by exactly one bird.
    """

    LAYER_NAMES = ("weights_ih", "weights_ho", "bias_h", "bias_o")

    def __init__(self, input_nodes: int = NUM_INPUTS,
                 hidden_nodes: int = HIDDEN_NODES,
                 output_nodes: int = OUTPUT_NODES, rng=None):
        if not all(_valid_count(n) for n in (input_nodes, hidden_nodes, output_nodes)):
            raise InvalidTopology(
                f"every layer needs at least one node, got "
                f"{input_nodes}-{hidden_nodes}-{output_nodes}")
        if rng is None:
            rng = np.random.default_rng()

        self.input_nodes  = int(input_nodes)
        self.hidden_nodes = int(hidden_nodes)
        self.output_nodes = int(output_nodes)

        self.weights_ih = Matrix(self.hidden_nodes, self.input_nodes).randomize(rng)
        self.weights_ho = Matrix(self.output_nodes, self.hidden_nodes).randomize(rng)
        self.bias_h     = Matrix(self.hidden_nodes, 1).randomize(rng)
        self.bias_o     = Matrix(self.output_nodes, 1).randomize(rng)

    # ──────────────────────────────────────────────────────────────────────────

    @property
    def topology(self) -> tuple:
        return (self.input_nodes, self.hidden_nodes, self.output_nodes)

    def layers(self) -> dict:
        """Name → Matrix for all four parameter blocks."""
        return {name: getattr(self, name) for name in self.LAYER_NAMES}

    # ──────────────────────────────────────────────────────────────────────────

    def infer(self, inputs) -> list:
        """
        Run one forward pass.

        Args:
            inputs: sequence of input_nodes floats

        Returns:
            list of output_nodes floats in [0, 1]; strictly inside (0, 1)
            unless a pre-activation saturates float64 (|z| > ~37)
        """
        inputs = list(inputs)
        if len(inputs) != self.input_nodes:
            raise InputSizeMismatch(
                f"expected {self.input_nodes} inputs, got {len(inputs)}")

        x = Matrix.from_column(inputs)

        hidden = self.weights_ih.multiply(x).add(self.bias_h).map(tanh)
        output = self.weights_ho.multiply(hidden).add(self.bias_o).map(sigmoid)

        return output.column(0)

    def clone(self) -> "NeuralNetwork":
        """Deep copy: same topology, no storage shared with self."""
        nn = NeuralNetwork.__new__(NeuralNetwork)
        nn.input_nodes  = self.input_nodes
        nn.hidden_nodes = self.hidden_nodes
        nn.output_nodes = self.output_nodes
        for name, m in self.layers().items():
            setattr(nn, name, m.copy())
        return nn

    # ──────────────────────────────────────────────────────────────────────────

    def mutate(self, rate: float, rng=None):
        """
        Perturb every weight and bias independently with probability `rate`
        by an offset drawn from [-MUTATION_OFFSET_SCALE, MUTATION_OFFSET_SCALE).
        Values are not clamped afterwards.
        """
        if not 0.0 <= rate <= 1.0:
            raise InvalidRate(f"mutation rate must lie in [0, 1], got {rate}")
        if rng is None:
            rng = np.random.default_rng()
        for m in self.layers().values():
            for r, c in m.entries():
                if rng.random() < rate:
                    offset = (rng.random() * 2 - 1) * MUTATION_OFFSET_SCALE
                    m.set(r, c, m.get(r, c) + offset)

    # ──────────────────────────────────────────────────────────────────────────

    def num_parameters(self) -> int:
        return sum(m.rows * m.cols for m in self.layers().values())

    def summary(self) -> str:
        lines = [f"NeuralNetwork {self.input_nodes}-{self.hidden_nodes}-{self.output_nodes}"
                 f" ({self.num_parameters()} parameters)"]
        for name, m in self.layers().items():
            values = m.to_numpy()
            lines.append(
                f"  {name:<10} {m.rows:>3}x{m.cols:<3}"
                f"  mean={values.mean():+.3f}  min={values.min():+.3f}  max={values.max():+.3f}"
            )
        return "\n".join(lines)

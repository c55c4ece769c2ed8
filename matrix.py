"""
Dense 2-D matrices for FlapEvo brains.

A Matrix wraps a float64 numpy array whose shape is fixed at creation.
Combining operations (multiply, add, map) always return a fresh Matrix;
element access goes through bounds-checked get/set so crossover and
mutation never index raw storage.
"""

import numpy as np
from errors import InvalidDimensions, DimensionMismatch


def _valid_size(n) -> bool:
    return isinstance(n, (int, np.integer)) and not isinstance(n, bool) and n >= 1


class Matrix:
    """
    rows × cols buffer of float64 values, zero-filled on creation.
    """
    __slots__ = ("_data",)

    def __init__(self, rows: int, cols: int):
        if not (_valid_size(rows) and _valid_size(cols)):
            raise InvalidDimensions(
                f"matrix needs at least 1 row and 1 column, got {rows}x{cols}")
        self._data = np.zeros((int(rows), int(cols)), dtype=np.float64)

    # ──────────────────────────────────────────────────────────────────────────
    # Construction helpers
    # ──────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_list(cls, values) -> "Matrix":
        """Build from a list of equal-length rows."""
        rows = [list(r) for r in values]
        if not rows or not rows[0]:
            raise InvalidDimensions("matrix needs at least 1 row and 1 column")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise InvalidDimensions("all matrix rows must have the same length")
        m = cls(len(rows), width)
        m._data[:, :] = np.asarray(rows, dtype=np.float64)
        return m

    @classmethod
    def from_column(cls, values) -> "Matrix":
        """Build an n × 1 column vector."""
        return cls.from_list([[v] for v in values])

    @classmethod
    def _wrap(cls, array: np.ndarray) -> "Matrix":
        m = cls.__new__(cls)
        m._data = np.array(array, dtype=np.float64)
        return m

    # ──────────────────────────────────────────────────────────────────────────

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple:
        return self._data.shape

    def get(self, row: int, col: int) -> float:
        self._check_index(row, col)
        return float(self._data[row, col])

    def set(self, row: int, col: int, value: float):
        self._check_index(row, col)
        self._data[row, col] = value

    def entries(self):
        """Yield every (row, col) index pair in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield r, c

    def _check_index(self, row: int, col: int):
        # negative indices are rejected, not wrapped
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(
                f"index ({row}, {col}) out of range for {self.rows}x{self.cols} matrix")

    # ──────────────────────────────────────────────────────────────────────────
    # Operations
    # ──────────────────────────────────────────────────────────────────────────

    def randomize(self, rng=None) -> "Matrix":
        """Fill in place with values drawn uniformly from [-1, 1)."""
        if rng is None:
            rng = np.random.default_rng()
        self._data[:, :] = rng.uniform(-1.0, 1.0, size=self._data.shape)
        return self

    def multiply(self, other: "Matrix") -> "Matrix":
        """Matrix product self · other."""
        if self.cols != other.rows:
            raise DimensionMismatch(
                f"cannot multiply {self.rows}x{self.cols} by {other.rows}x{other.cols}")
        return Matrix._wrap(self._data @ other._data)

    def add(self, other: "Matrix") -> "Matrix":
        """Element-wise sum."""
        if self.shape != other.shape:
            raise DimensionMismatch(
                f"cannot add {self.rows}x{self.cols} and {other.rows}x{other.cols}")
        return Matrix._wrap(self._data + other._data)

    def map(self, func) -> "Matrix":
        """Apply a scalar → scalar function to every entry."""
        out = np.empty_like(self._data)
        for r, c in self.entries():
            out[r, c] = func(float(self._data[r, c]))
        return Matrix._wrap(out)

    def copy(self) -> "Matrix":
        return Matrix._wrap(self._data)

    # ──────────────────────────────────────────────────────────────────────────

    def column(self, col: int = 0) -> list:
        """Return one column as a plain list of floats."""
        if not 0 <= col < self.cols:
            raise IndexError(f"column {col} out of range for {self.cols} columns")
        return [float(v) for v in self._data[:, col]]

    def to_list(self) -> list:
        return self._data.tolist()

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the underlying array."""
        return self._data.copy()

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __repr__(self):
        return f"Matrix({self.rows}x{self.cols})"

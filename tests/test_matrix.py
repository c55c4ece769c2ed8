import numpy as np
import pytest

from matrix import Matrix
from errors import InvalidDimensions, DimensionMismatch, EvolutionError


# ─── Construction ─────────────────────────────────────────────────────────────

def test_new_matrix_is_zero_filled():
    m = Matrix(3, 2)
    assert m.shape == (3, 2)
    assert m.to_list() == [[0.0, 0.0], [0.0, 0.0], [0.0, 0.0]]


@pytest.mark.parametrize("rows,cols", [(0, 1), (1, 0), (-2, 3), (2.5, 1), (True, 1)])
def test_invalid_dimensions(rows, cols):
    with pytest.raises(InvalidDimensions):
        Matrix(rows, cols)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        Matrix(0, 0)
    assert issubclass(InvalidDimensions, EvolutionError)


def test_from_list_rejects_ragged_rows():
    with pytest.raises(InvalidDimensions):
        Matrix.from_list([[1, 2], [3]])
    with pytest.raises(InvalidDimensions):
        Matrix.from_list([])


def test_from_column():
    m = Matrix.from_column([1, 2, 3])
    assert m.shape == (3, 1)
    assert m.column(0) == [1.0, 2.0, 3.0]


# ─── Operations ───────────────────────────────────────────────────────────────

def test_multiply():
    a = Matrix.from_list([[1, 2], [3, 4]])
    b = Matrix.from_column([5, 6])
    assert a.multiply(b).to_list() == [[17.0], [39.0]]


def test_multiply_shape():
    a = Matrix(4, 3)
    b = Matrix(3, 5)
    assert a.multiply(b).shape == (4, 5)


def test_multiply_mismatch():
    with pytest.raises(DimensionMismatch):
        Matrix(2, 3).multiply(Matrix(2, 3))


def test_add():
    a = Matrix.from_list([[1, 2], [3, 4]])
    b = Matrix.from_list([[10, 20], [30, 40]])
    assert a.add(b).to_list() == [[11.0, 22.0], [33.0, 44.0]]


def test_add_mismatch():
    with pytest.raises(DimensionMismatch):
        Matrix(2, 1).add(Matrix(1, 2))


def test_map_preserves_shape_and_inputs():
    a = Matrix.from_list([[1, -2, 3]])
    b = a.map(lambda v: v * 2)
    assert b.to_list() == [[2.0, -4.0, 6.0]]
    assert a.to_list() == [[1.0, -2.0, 3.0]]


def test_operations_return_fresh_matrices():
    a = Matrix.from_list([[1.0]])
    b = a.add(Matrix.from_list([[0.0]]))
    b.set(0, 0, 99.0)
    assert a.get(0, 0) == 1.0


def test_randomize_range(rng):
    m = Matrix(20, 20).randomize(rng)
    values = m.to_numpy()
    assert values.min() >= -1.0
    assert values.max() < 1.0
    assert np.unique(values).size > 1


# ─── Accessors ────────────────────────────────────────────────────────────────

def test_get_set_round_trip():
    m = Matrix(2, 2)
    m.set(1, 0, 3.5)
    assert m.get(1, 0) == 3.5


@pytest.mark.parametrize("row,col", [(2, 0), (0, 2), (-1, 0), (0, -1)])
def test_accessors_are_bounds_checked(row, col):
    m = Matrix(2, 2)
    with pytest.raises(IndexError):
        m.get(row, col)
    with pytest.raises(IndexError):
        m.set(row, col, 1.0)


def test_entries_row_major():
    assert list(Matrix(2, 2).entries()) == [(0, 0), (0, 1), (1, 0), (1, 1)]


def test_copy_is_independent():
    a = Matrix.from_list([[1, 2]])
    b = a.copy()
    b.set(0, 0, 7)
    assert a.get(0, 0) == 1.0
    assert a != b
    assert a == Matrix.from_list([[1, 2]])

"""Tests for 2x2 matrix and vector algebra."""

import numpy as np
import pytest

from qmatrix.complex_number import Complex
from qmatrix.linalg import (
    apply_matrix,
    conjugate_transpose,
    determinant,
    from_array,
    identity,
    matrices_close,
    matrix,
    multiply_matrices,
    scale_matrix,
    to_array,
    trace,
    vector,
    vectors_close,
)

A = np.array([[1 + 2j, -0.5j], [3.0, 0.25 - 1j]])
B = np.array([[0.5, 1j], [-2 + 1j, 4.0]])
V = np.array([0.6, 0.8j])


@pytest.fixture
def a():
    return from_array(A)


@pytest.fixture
def b():
    return from_array(B)


# ---------------------------------------------------------------------------
# Builders and numpy interop
# ---------------------------------------------------------------------------

def test_identity():
    np.testing.assert_array_equal(to_array(identity()), np.eye(2))


def test_matrix_builder_accepts_numbers():
    m = matrix([[1, 1j], [Complex(0, -1), 2.5]])
    assert m[0][1] == Complex(0, 1)
    assert m[1][0] == Complex(0, -1)
    assert m[1][1] == Complex(2.5, 0)


def test_matrix_builder_rejects_bad_shape():
    with pytest.raises(ValueError):
        matrix([[1, 0, 0], [0, 1, 0]])
    with pytest.raises(ValueError):
        matrix([[1, 0]])


def test_array_roundtrip(a):
    np.testing.assert_array_equal(to_array(a), A)
    np.testing.assert_array_equal(to_array(from_array(V)), V)


def test_to_array_shapes(a):
    assert to_array(a).shape == (2, 2)
    assert to_array(vector(1, 0)).shape == (2,)
    assert to_array(a).dtype == np.complex128


def test_from_array_rejects_bad_shape():
    with pytest.raises(ValueError):
        from_array(np.eye(3))
    with pytest.raises(ValueError):
        from_array([1, 0, 0])


def test_values_are_tuples(a):
    assert isinstance(a, tuple)
    assert all(isinstance(row, tuple) for row in a)


# ---------------------------------------------------------------------------
# Operations vs numpy
# ---------------------------------------------------------------------------

def test_multiply_matches_numpy(a, b):
    np.testing.assert_allclose(to_array(multiply_matrices(a, b)), A @ B, atol=1e-12)
    np.testing.assert_allclose(to_array(multiply_matrices(b, a)), B @ A, atol=1e-12)


def test_multiply_by_identity(a):
    assert multiply_matrices(a, identity()) == a
    assert multiply_matrices(identity(), a) == a


def test_apply_matches_numpy(a):
    np.testing.assert_allclose(to_array(apply_matrix(a, from_array(V))), A @ V, atol=1e-12)


def test_conjugate_transpose(a):
    np.testing.assert_allclose(to_array(conjugate_transpose(a)), A.conj().T, atol=0)
    assert conjugate_transpose(conjugate_transpose(a)) == a


def test_determinant_and_trace(a):
    assert complex(determinant(a)) == pytest.approx(complex(np.linalg.det(A)))
    assert complex(trace(a)) == pytest.approx(complex(np.trace(A)))
    assert determinant(identity()) == Complex.ONE
    assert trace(identity()) == Complex(2, 0)


def test_scale_matrix(a):
    np.testing.assert_allclose(to_array(scale_matrix(a, 1j)), 1j * A, atol=1e-12)


def test_inputs_not_mutated(a, b):
    before_a, before_b = to_array(a), to_array(b)
    multiply_matrices(a, b)
    conjugate_transpose(a)
    np.testing.assert_array_equal(to_array(a), before_a)
    np.testing.assert_array_equal(to_array(b), before_b)


# ---------------------------------------------------------------------------
# Tolerance comparisons
# ---------------------------------------------------------------------------

def test_matrices_close():
    m = identity()
    nudged = matrix([[1 + 1e-13, 0], [0, 1]])
    assert matrices_close(m, nudged)
    assert not matrices_close(m, nudged, tolerance=1e-14)
    assert not matrices_close(m, matrix([[0, 1], [1, 0]]))


def test_vectors_close():
    assert vectors_close(vector(1, 0), vector(1, 1e-13))
    assert not vectors_close(vector(1, 0), vector(0, 1))

"""
2x2 complex matrix and 2-vector algebra.

Matrices are tuples of row tuples of :class:`Complex` and vectors are
2-tuples, so every value is immutable and can be shared freely. All
arithmetic goes through ``Complex`` so that noise snapping applies to every
intermediate product.

numpy is only used at the boundary (:func:`to_array`, :func:`from_array`)
for callers that want ``complex128`` arrays.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple, Union

import numpy as np
from numpy import ndarray

from qmatrix.complex_number import Complex, Number
from qmatrix.config import DEFAULT_TOLERANCE

# Type aliases
Vector2 = Tuple[Complex, Complex]
Row = Tuple[Complex, Complex]
Matrix2 = Tuple[Row, Row]


def _c(value: Complex | Number) -> Complex:
    return value if isinstance(value, Complex) else Complex.from_builtin(value)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def vector(alpha: Complex | Number, beta: Complex | Number) -> Vector2:
    """Build a state vector from two amplitudes."""
    return (_c(alpha), _c(beta))


def matrix(rows: Sequence[Sequence[Complex | Number]]) -> Matrix2:
    """Build a 2x2 matrix from nested rows of numbers or ``Complex`` values."""
    if len(rows) != 2 or any(len(r) != 2 for r in rows):
        raise ValueError(f"Expected a 2x2 matrix, got {[len(r) for r in rows]}")
    return (
        (_c(rows[0][0]), _c(rows[0][1])),
        (_c(rows[1][0]), _c(rows[1][1])),
    )


def identity() -> Matrix2:
    return (
        (Complex.ONE, Complex.ZERO),
        (Complex.ZERO, Complex.ONE),
    )


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def multiply_matrices(a: Matrix2, b: Matrix2) -> Matrix2:
    """Matrix product ``a @ b``."""
    return (
        (
            a[0][0].multiply(b[0][0]).add(a[0][1].multiply(b[1][0])),
            a[0][0].multiply(b[0][1]).add(a[0][1].multiply(b[1][1])),
        ),
        (
            a[1][0].multiply(b[0][0]).add(a[1][1].multiply(b[1][0])),
            a[1][0].multiply(b[0][1]).add(a[1][1].multiply(b[1][1])),
        ),
    )


def apply_matrix(m: Matrix2, v: Vector2) -> Vector2:
    """Matrix-vector product ``m @ v``."""
    return (
        m[0][0].multiply(v[0]).add(m[0][1].multiply(v[1])),
        m[1][0].multiply(v[0]).add(m[1][1].multiply(v[1])),
    )


def conjugate_transpose(m: Matrix2) -> Matrix2:
    """Hermitian adjoint."""
    return (
        (m[0][0].conjugate(), m[1][0].conjugate()),
        (m[0][1].conjugate(), m[1][1].conjugate()),
    )


def determinant(m: Matrix2) -> Complex:
    return m[0][0].multiply(m[1][1]).subtract(m[0][1].multiply(m[1][0]))


def trace(m: Matrix2) -> Complex:
    return m[0][0].add(m[1][1])


def scale_matrix(m: Matrix2, factor: Complex | Number) -> Matrix2:
    """Multiply every element by ``factor``."""
    f = _c(factor)
    return (
        (m[0][0].multiply(f), m[0][1].multiply(f)),
        (m[1][0].multiply(f), m[1][1].multiply(f)),
    )


def matrices_close(a: Matrix2, b: Matrix2, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """Element-wise :meth:`Complex.equals` over both matrices."""
    return all(
        a[i][j].equals(b[i][j], tolerance) for i in range(2) for j in range(2)
    )


def vectors_close(a: Vector2, b: Vector2, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return a[0].equals(b[0], tolerance) and a[1].equals(b[1], tolerance)


# ---------------------------------------------------------------------------
# numpy interop
# ---------------------------------------------------------------------------

def to_array(value: Union[Matrix2, Vector2]) -> ndarray:
    """
    Convert a matrix or vector to a ``complex128`` array.

    Returns
    -------
    numpy.ndarray
        Shape (2, 2) for a matrix, (2,) for a vector.
    """
    if isinstance(value[0], Complex):
        return np.array([complex(c) for c in value], dtype=np.complex128)
    return np.array([[complex(c) for c in row] for row in value], dtype=np.complex128)


def from_array(arr: Union[ndarray, Iterable]) -> Union[Matrix2, Vector2]:
    """
    Convert a (2, 2) or (2,) array-like into a matrix or vector.

    Raises
    ------
    ValueError
        For any other shape.
    """
    arr = np.asarray(arr, dtype=np.complex128)
    if arr.shape == (2,):
        return vector(arr[0], arr[1])
    if arr.shape == (2, 2):
        return matrix(arr.tolist())
    raise ValueError(f"Expected shape (2,) or (2, 2), got {arr.shape}")

"""
Validation checks and measurement statistics.

Everything here is a pure function of a vector or matrix. Failed checks are
reported as booleans and never raise: floating-point drift over long
sequences is expected and computation carries on with the drifted values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from qmatrix.complex_number import Complex
from qmatrix.config import BLOCH_PHASE_CUTOFF, DEFAULT_TOLERANCE, ENTROPY_CUTOFF
from qmatrix.linalg import (
    Matrix2,
    Vector2,
    conjugate_transpose,
    determinant,
    identity,
    matrices_close,
    multiply_matrices,
    trace,
)


@dataclass(frozen=True)
class Probabilities:
    """
    Measurement probabilities of a state vector.

    Attributes
    ----------
    prob0, prob1 : float
        Renormalized probabilities of |0⟩ and |1⟩; they sum to exactly 1.
    raw_total : float
        ``|alpha|^2 + |beta|^2`` before renormalization.
    is_normalized : bool
        Whether ``raw_total`` is within tolerance of 1.
    """

    prob0: float
    prob1: float
    raw_total: float
    is_normalized: bool

    def as_array(self) -> np.ndarray:
        return np.array([self.prob0, self.prob1])


@dataclass(frozen=True)
class BlochPoint:
    """Polar angles and Cartesian coordinates on the Bloch sphere."""

    theta: float
    phi: float
    x: float
    y: float
    z: float


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------

def is_unitary(m: Matrix2, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    """Check ``m† m == I`` element-wise within ``tolerance``."""
    product = multiply_matrices(conjugate_transpose(m), m)
    return matrices_close(product, identity(), tolerance)


def norm_squared(v: Vector2) -> float:
    return v[0].magnitude_squared() + v[1].magnitude_squared()


def is_normalized(v: Vector2, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return abs(norm_squared(v) - 1.0) < tolerance


def normalize_state(v: Vector2) -> Vector2:
    """Rescale to unit norm. A zero vector becomes |0⟩."""
    norm = math.sqrt(norm_squared(v))
    if norm == 0:
        return (Complex.ONE, Complex.ZERO)
    return (
        Complex(v[0].real / norm, v[0].imag / norm),
        Complex(v[1].real / norm, v[1].imag / norm),
    )


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def probabilities(v: Vector2, tolerance: float = DEFAULT_TOLERANCE) -> Probabilities:
    """
    Renormalized measurement probabilities plus the raw sum.

    A zero vector reports |0⟩ probabilities ``(1.0, 0.0)`` with
    ``raw_total == 0``.
    """
    p0 = v[0].magnitude_squared()
    p1 = v[1].magnitude_squared()
    total = p0 + p1
    if total == 0:
        return Probabilities(1.0, 0.0, 0.0, False)
    prob0 = p0 / total
    # complement keeps prob0 + prob1 == 1.0 exactly in floating point
    prob1 = 1.0 - prob0
    return Probabilities(prob0, prob1, total, abs(total - 1.0) < tolerance)


def entropy(v: Vector2) -> float:
    """Shannon entropy of the measurement distribution, in bits."""
    probs = probabilities(v).as_array()
    probs = probs[probs > ENTROPY_CUTOFF]
    return float(-np.sum(probs * np.log2(probs)))


def purity(v: Vector2) -> float:
    """Sum of squared measurement probabilities, ``p0² + p1²``."""
    p = probabilities(v)
    return p.prob0 * p.prob0 + p.prob1 * p.prob1


def bloch_angles(v: Vector2) -> tuple[float, float]:
    """
    Polar angles ``(theta, phi)`` of the state on the Bloch sphere.

    ``phi`` is the relative phase ``arg(beta) - arg(alpha)``, reported as 0
    when ``|beta|`` is negligible.
    """
    alpha, beta = normalize_state(v)
    theta = 2 * math.acos(min(1.0, alpha.magnitude()))
    phi = beta.phase() - alpha.phase() if beta.magnitude() > BLOCH_PHASE_CUTOFF else 0.0
    return theta, phi


def bloch_point(v: Vector2) -> BlochPoint:
    theta, phi = bloch_angles(v)
    return BlochPoint(
        theta=theta,
        phi=phi,
        x=math.sin(theta) * math.cos(phi),
        y=math.sin(theta) * math.sin(phi),
        z=math.cos(theta),
    )


# ---------------------------------------------------------------------------
# Full report
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StateReport:
    """All derived quantities for one state vector and composite matrix."""

    state: Vector2
    composite: Matrix2
    probabilities: Probabilities
    entropy: float
    purity: float
    is_normalized: bool
    is_unitary: bool
    determinant: Complex
    trace: Complex
    bloch: BlochPoint
    tolerance: float

    @property
    def is_valid(self) -> bool:
        return self.is_normalized and self.is_unitary


def analyze(
    state: Vector2, composite: Matrix2, tolerance: float = DEFAULT_TOLERANCE
) -> StateReport:
    """Derive every statistic and check for ``state`` and ``composite``."""
    return StateReport(
        state=state,
        composite=composite,
        probabilities=probabilities(state, tolerance),
        entropy=entropy(state),
        purity=purity(state),
        is_normalized=is_normalized(state, tolerance),
        is_unitary=is_unitary(composite, tolerance),
        determinant=determinant(composite),
        trace=trace(composite),
        bloch=bloch_point(state),
        tolerance=tolerance,
    )

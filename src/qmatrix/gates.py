"""
Single-qubit gate definitions.

The eight supported gates form a closed set, :class:`GateId`. Each maps to
a :class:`GateInfo` entry in :data:`GATE_REGISTRY`, which is built once at
import time and is read-only afterwards.

Gate set:
    - Hadamard: H
    - Pauli: X, Y, Z
    - Phase: S (pi/2), T (pi/4) and their adjoints S†, T†
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

from qmatrix.complex_number import Complex
from qmatrix.errors import UnknownGateError
from qmatrix.linalg import Matrix2

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / math.sqrt(2.0)
_PI_4 = math.pi / 4

_ZERO = Complex.ZERO
_ONE = Complex.ONE


class GateId(str, Enum):
    """Identifier of a registry gate. The value is the display symbol."""

    H = "H"
    X = "X"
    Y = "Y"
    Z = "Z"
    S = "S"
    T = "T"
    SDG = "S†"
    TDG = "T†"

    def __str__(self) -> str:
        return self.value


GateLike = Union[GateId, str]

# ---------------------------------------------------------------------------
# Matrices
# ---------------------------------------------------------------------------

H: Matrix2 = (
    (Complex(_SQRT2_INV), Complex(_SQRT2_INV)),
    (Complex(_SQRT2_INV), Complex(-_SQRT2_INV)),
)
"""Hadamard gate."""

X: Matrix2 = ((_ZERO, _ONE), (_ONE, _ZERO))
"""Pauli-X (NOT) gate."""

Y: Matrix2 = ((_ZERO, Complex(0, -1)), (Complex.I, _ZERO))
"""Pauli-Y gate."""

Z: Matrix2 = ((_ONE, _ZERO), (_ZERO, Complex(-1)))
"""Pauli-Z gate."""

S: Matrix2 = ((_ONE, _ZERO), (_ZERO, Complex.I))
"""S (phase) gate: sqrt(Z)."""

T: Matrix2 = ((_ONE, _ZERO), (_ZERO, Complex.from_polar(1, _PI_4)))
"""T gate: sqrt(S)."""

Sdg: Matrix2 = ((_ONE, _ZERO), (_ZERO, Complex(0, -1)))
"""S-dagger gate."""

Tdg: Matrix2 = ((_ONE, _ZERO), (_ZERO, Complex.from_polar(1, -_PI_4)))
"""T-dagger gate."""


# ---------------------------------------------------------------------------
# Gate metadata registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GateInfo:
    """Registry entry. The property flags are informational only."""

    gate: GateId
    matrix: Matrix2
    description: str
    unitary: bool
    hermitian: bool
    self_inverse: bool

    @property
    def symbol(self) -> str:
        return self.gate.value


def _entry(gate, matrix, description, hermitian, self_inverse):
    return GateInfo(
        gate=gate,
        matrix=matrix,
        description=description,
        unitary=True,
        hermitian=hermitian,
        self_inverse=self_inverse,
    )


GATE_REGISTRY: Mapping[GateId, GateInfo] = MappingProxyType({
    GateId.H: _entry(GateId.H, H, "Hadamard Gate - Creates superposition (|0⟩ + |1⟩)/√2", True, True),
    GateId.X: _entry(GateId.X, X, "Pauli-X Gate - Bit flip (quantum NOT gate)", True, True),
    GateId.Y: _entry(GateId.Y, Y, "Pauli-Y Gate - Bit flip + phase flip", True, True),
    GateId.Z: _entry(GateId.Z, Z, "Pauli-Z Gate - Phase flip (|1⟩ → -|1⟩)", True, True),
    GateId.S: _entry(GateId.S, S, "S Gate - π/2 phase gate (|1⟩ → i|1⟩)", False, False),
    GateId.T: _entry(GateId.T, T, "T Gate - π/4 phase gate", False, False),
    GateId.SDG: _entry(GateId.SDG, Sdg, "S Dagger - Inverse of S gate (-π/2 phase)", False, False),
    GateId.TDG: _entry(GateId.TDG, Tdg, "T Dagger - Inverse of T gate (-π/4 phase)", False, False),
})

_ALIASES: Mapping[str, GateId] = MappingProxyType({
    "SDG": GateId.SDG, "SDAG": GateId.SDG, "S+": GateId.SDG, "S_DAG": GateId.SDG,
    "TDG": GateId.TDG, "TDAG": GateId.TDG, "T+": GateId.TDG, "T_DAG": GateId.TDG,
})

SINGLE_CHAR_GATES: frozenset[str] = frozenset(
    g.value for g in GateId if len(g.value) == 1
)
"""Symbols that can appear in a compact sequence code."""


def gate_id(gate: GateLike) -> GateId:
    """
    Resolve a gate identifier.

    Accepts a :class:`GateId`, its symbol (``"S†"``), or an ASCII alias
    (``"sdg"``, ``"T+"``). Letters are case-insensitive.

    Raises
    ------
    UnknownGateError
        If the identifier is not a registry gate.
    """
    if isinstance(gate, GateId):
        return gate
    if isinstance(gate, str):
        key = gate.strip().upper()
        try:
            return GateId(key)
        except ValueError:
            pass
        if key in _ALIASES:
            return _ALIASES[key]
    raise UnknownGateError(gate, [g.value for g in GateId])


def get_gate(gate: GateLike) -> GateInfo:
    """Look up the registry entry for ``gate``."""
    return GATE_REGISTRY[gate_id(gate)]


def get_matrix(gate: GateLike) -> Matrix2:
    """Look up the unitary matrix for ``gate``."""
    return get_gate(gate).matrix

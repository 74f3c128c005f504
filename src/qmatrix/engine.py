"""
Incremental gate composition.

The engine tracks three values that must always agree:

    operations  G_1, G_2, ..., G_n   (insertion order)
    composite   G_n @ ... @ G_2 @ G_1
    state       composite @ |0⟩

Appending left-multiplies the new gate onto the composite (O(1)).
Removing rebuilds the composite from identity by folding over the remaining
operations in insertion order (O(n)), so the invariant holds no matter
where the removed operation sat.

Example
-------
>>> engine = CompositionEngine()
>>> _ = engine.append("H")
>>> _ = engine.append("Z")
>>> [str(c) for c in engine.state.state]
['0.7071', '-0.7071']
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from qmatrix import gates as g
from qmatrix.complex_number import Complex
from qmatrix.linalg import (
    Matrix2,
    Vector2,
    apply_matrix,
    identity,
    multiply_matrices,
)
from qmatrix.logging import get_logger

logger = get_logger(__name__)

INITIAL_VECTOR: Vector2 = (Complex.ONE, Complex.ZERO)
"""The fixed starting state |0⟩."""


# ---------------------------------------------------------------------------
# Operation and state records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GateOperation:
    """An applied gate. ``timestamp`` is for display, order is positional."""

    gate: g.GateId
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)

    @property
    def matrix(self) -> Matrix2:
        return g.get_matrix(self.gate)


@dataclass(frozen=True)
class CompositionState:
    """Immutable snapshot of the engine's operations, state and composite."""

    operations: tuple[GateOperation, ...]
    state: Vector2
    composite: Matrix2

    @property
    def gate_sequence(self) -> tuple[g.GateId, ...]:
        return tuple(op.gate for op in self.operations)

    def __len__(self) -> int:
        return len(self.operations)


def initial_state() -> CompositionState:
    """The reset triple: (no operations, |0⟩, identity)."""
    return CompositionState(operations=(), state=INITIAL_VECTOR, composite=identity())


def fold(operations: Iterable[GateOperation]) -> tuple[Matrix2, Vector2]:
    """Rebuild ``(composite, state)`` from scratch, most recent gate leftmost."""
    composite = identity()
    for op in operations:
        composite = multiply_matrices(op.matrix, composite)
    return composite, apply_matrix(composite, INITIAL_VECTOR)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class CompositionEngine:
    """
    Owns the ordered gate sequence and keeps state and composite in sync.

    Parameters
    ----------
    state : CompositionState, optional
        Starting snapshot. Defaults to :func:`initial_state`.
    """

    def __init__(self, state: CompositionState | None = None) -> None:
        self._state = state if state is not None else initial_state()

    # -- Properties ---------------------------------------------------------

    @property
    def state(self) -> CompositionState:
        """Current snapshot."""
        return self._state

    @property
    def operations(self) -> list[GateOperation]:
        return list(self._state.operations)

    @property
    def gate_sequence(self) -> tuple[g.GateId, ...]:
        return self._state.gate_sequence

    def __len__(self) -> int:
        return len(self._state.operations)

    # -- Mutations ----------------------------------------------------------

    def append(self, gate: g.GateLike) -> CompositionState:
        """
        Apply ``gate`` after the current sequence.

        Raises
        ------
        UnknownGateError
            If ``gate`` is not a registry gate.
        """
        gate_matrix = g.get_matrix(gate)
        op = GateOperation(gate=g.gate_id(gate))
        current = self._state
        self._state = CompositionState(
            operations=current.operations + (op,),
            state=apply_matrix(gate_matrix, current.state),
            composite=multiply_matrices(gate_matrix, current.composite),
        )
        logger.debug("append %s (id=%s), %d ops", op.gate, op.id, len(self._state))
        return self._state

    def remove(self, operation_id: str) -> CompositionState:
        """
        Remove the operation with ``operation_id`` from any position.

        Unknown ids leave the state untouched.
        """
        remaining = tuple(op for op in self._state.operations if op.id != operation_id)
        if len(remaining) == len(self._state.operations):
            logger.debug("remove: no operation with id=%s", operation_id)
            return self._state
        composite, state = fold(remaining)
        self._state = CompositionState(operations=remaining, state=state, composite=composite)
        logger.debug("remove id=%s, %d ops left", operation_id, len(remaining))
        return self._state

    def reset(self) -> CompositionState:
        self._state = initial_state()
        logger.debug("reset")
        return self._state

    def restore(self, state: CompositionState) -> CompositionState:
        """Replace the tracked triple with a previously taken snapshot."""
        self._state = state
        return self._state

    # -- Consistency --------------------------------------------------------

    def recompute(self) -> CompositionState:
        """Snapshot of the current sequence rebuilt from scratch."""
        composite, state = fold(self._state.operations)
        return CompositionState(
            operations=self._state.operations, state=state, composite=composite
        )

    def __repr__(self) -> str:
        seq = "".join(op.gate.value for op in self._state.operations)
        return f"CompositionEngine(ops={len(self)}, sequence={seq!r})"


def compose(gates: Sequence[g.GateLike]) -> CompositionState:
    """Build a snapshot by appending ``gates`` in order to a fresh engine."""
    engine = CompositionEngine()
    for gate in gates:
        engine.append(gate)
    return engine.state

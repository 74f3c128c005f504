"""
Interactive session: engine plus undo/redo history.

A session is the whole mutable surface of the package. Adding, removing and
resetting go through the engine and push a snapshot to the history; undo
and redo move the history pointer and restore the engine from the snapshot
found there.

Example
-------
>>> session = Session()
>>> _ = session.add_gates("HZ")
>>> session.report().probabilities.prob1
0.5
>>> _ = session.undo()
>>> session.share_code()
'H'
"""

from __future__ import annotations

from typing import Iterable, Optional

from qmatrix import gates as g
from qmatrix.config import LabConfig
from qmatrix.engine import CompositionEngine, CompositionState, GateOperation
from qmatrix.export import Record, export_record
from qmatrix.history import HistoryManager
from qmatrix.logging import get_logger
from qmatrix.sharing import decode_sequence, encode_sequence
from qmatrix.validation import StateReport, analyze, is_normalized, is_unitary

logger = get_logger(__name__)


class Session:
    """
    One user's gate-composition session.

    Parameters
    ----------
    config : LabConfig, optional
        Tolerance, history capacity and display precision.
    """

    def __init__(self, config: Optional[LabConfig] = None) -> None:
        self.config = config or LabConfig()
        self.engine = CompositionEngine()
        self.history = HistoryManager(self.config.history_capacity)
        self.history.record(self.engine.state)
        self._valid = True

    # -- Properties ---------------------------------------------------------

    @property
    def state(self) -> CompositionState:
        return self.engine.state

    @property
    def operations(self) -> list[GateOperation]:
        return self.engine.operations

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    # -- Mutations ----------------------------------------------------------

    def add_gate(self, gate: g.GateLike) -> CompositionState:
        return self._commit(self.engine.append(gate))

    def add_gates(self, gates: Iterable[g.GateLike]) -> CompositionState:
        """Append each gate in turn; every append is its own undo step."""
        for gate in gates:
            self.add_gate(gate)
        return self.state

    def remove(self, operation_id: str) -> CompositionState:
        """Remove an operation by id. Unknown ids change nothing and record nothing."""
        before = self.engine.state
        after = self.engine.remove(operation_id)
        if after is before:
            return after
        return self._commit(after)

    def reset(self) -> CompositionState:
        return self._commit(self.engine.reset())

    def undo(self) -> CompositionState:
        entry = self.history.undo()
        if entry is not None:
            self.engine.restore(entry)
            self._check(entry)
        return self.state

    def redo(self) -> CompositionState:
        entry = self.history.redo()
        if entry is not None:
            self.engine.restore(entry)
            self._check(entry)
        return self.state

    def load_sequence(self, code: str) -> CompositionState:
        """Reset, then replay a share code one append at a time."""
        self.reset()
        return self.add_gates(decode_sequence(code))

    # -- Derived values -----------------------------------------------------

    def report(self) -> StateReport:
        s = self.state
        return analyze(s.state, s.composite, self.config.tolerance)

    def export(self) -> Record:
        return export_record(self.state, self.config.tolerance)

    def share_code(self) -> str:
        return encode_sequence(self.state.gate_sequence)

    # -- Internal helpers ---------------------------------------------------

    def _commit(self, state: CompositionState) -> CompositionState:
        self.history.record(state)
        self._check(state)
        return state

    def _check(self, state: CompositionState) -> None:
        tol = self.config.tolerance
        valid = is_normalized(state.state, tol) and is_unitary(state.composite, tol)
        if self._valid and not valid:
            logger.warning(
                "state left tolerance %g after %d operations (drift)", tol, len(state)
            )
        self._valid = valid

    def __repr__(self) -> str:
        return (
            f"Session(ops={len(self.state)}, code={self.share_code()!r}, "
            f"history={len(self.history)})"
        )

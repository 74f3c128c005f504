"""
qmatrix: exact single-qubit gate composition.

Features:
- Complex and 2x2 matrix arithmetic with floating-point noise snapping
- The eight standard single-qubit gates (H, X, Y, Z, S, T, S†, T†)
- Incremental composite matrix and state tracking with removal anywhere
- Unitarity / normalization checks, probabilities, entropy, purity
- Bounded undo/redo history, JSON export, compact share codes

Quick Start:
    >>> from qmatrix import Session
    >>> session = Session()
    >>> _ = session.add_gate("H")
    >>> report = session.report()
    >>> report.probabilities.prob0, report.entropy
    (0.5, 1.0)
"""
__version__ = "1.0.0"

# Core components
from .complex_number import Complex
from .linalg import (
    Matrix2,
    Vector2,
    apply_matrix,
    conjugate_transpose,
    determinant,
    identity,
    multiply_matrices,
    trace,
)
from .gates import GATE_REGISTRY, GateId, GateInfo, get_gate, get_matrix
from .engine import CompositionEngine, CompositionState, GateOperation, compose
from .validation import (
    StateReport,
    analyze,
    entropy,
    is_normalized,
    is_unitary,
    probabilities,
    purity,
)
from .history import HistoryManager
from .session import Session
from .config import LabConfig
from .errors import ConfigError, ExportFormatError, QMatrixError, UnknownGateError

__all__ = [
    # Algebra
    'Complex',
    'Matrix2',
    'Vector2',
    'apply_matrix',
    'conjugate_transpose',
    'determinant',
    'identity',
    'multiply_matrices',
    'trace',
    # Gates
    'GATE_REGISTRY',
    'GateId',
    'GateInfo',
    'get_gate',
    'get_matrix',
    # Composition
    'CompositionEngine',
    'CompositionState',
    'GateOperation',
    'compose',
    'HistoryManager',
    'Session',
    # Validation
    'StateReport',
    'analyze',
    'entropy',
    'is_normalized',
    'is_unitary',
    'probabilities',
    'purity',
    # Config / errors
    'LabConfig',
    'ConfigError',
    'ExportFormatError',
    'QMatrixError',
    'UnknownGateError',
]

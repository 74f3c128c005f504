"""
JSON export of a composition snapshot.

The record carries the applied gate symbols, the final state (rectangular
and polar parts per amplitude), probabilities, validation results with the
tolerance used, and the composite matrix with its determinant and trace.
:func:`verify_record` re-derives the statistics from the exported state and
matrix and reports any value that disagrees with what was written.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

from qmatrix import gates as g
from qmatrix.complex_number import Complex
from qmatrix.config import DEFAULT_TOLERANCE
from qmatrix.engine import CompositionState, GateOperation, fold
from qmatrix.errors import ExportFormatError, UnknownGateError
from qmatrix.linalg import Matrix2, Vector2, matrices_close
from qmatrix.logging import get_logger
from qmatrix.validation import analyze

logger = get_logger(__name__)

FORMAT_NAME = "qmatrix-export"
FORMAT_VERSION = 1

Record = dict[str, Any]


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def _complex(c: Complex) -> dict[str, float]:
    return {"re": c.real, "im": c.imag}


def _amplitude(c: Complex) -> dict[str, float]:
    return {"re": c.real, "im": c.imag, "magnitude": c.magnitude(), "phase": c.phase()}


def export_record(snapshot: CompositionState, tolerance: float = DEFAULT_TOLERANCE) -> Record:
    """Build the export record for ``snapshot``."""
    report = analyze(snapshot.state, snapshot.composite, tolerance)
    alpha, beta = snapshot.state
    return {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "operations": [gate.value for gate in snapshot.gate_sequence],
        "final_state": {"alpha": _amplitude(alpha), "beta": _amplitude(beta)},
        "probabilities": {
            "prob0": report.probabilities.prob0,
            "prob1": report.probabilities.prob1,
            "raw_total": report.probabilities.raw_total,
        },
        "validation": {
            "is_normalized": report.is_normalized,
            "is_unitary": report.is_unitary,
            "tolerance": tolerance,
        },
        "composite_matrix": {
            "elements": [[_complex(c) for c in row] for row in snapshot.composite],
            "determinant": _complex(report.determinant),
            "trace": _complex(report.trace),
        },
        "statistics": {
            "entropy": report.entropy,
            "purity": report.purity,
            "bloch": {
                "theta": report.bloch.theta,
                "phi": report.bloch.phi,
                "x": report.bloch.x,
                "y": report.bloch.y,
                "z": report.bloch.z,
            },
        },
    }


def dumps(record: Record, indent: int = 2) -> str:
    return json.dumps(record, indent=indent, ensure_ascii=False)


def dump(snapshot: CompositionState, path: Union[str, Path],
         tolerance: float = DEFAULT_TOLERANCE) -> Record:
    """Write the export record for ``snapshot`` to ``path``."""
    record = export_record(snapshot, tolerance)
    Path(path).write_text(dumps(record), encoding="utf-8")
    logger.info("exported %d operations to %s", len(snapshot), path)
    return record


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def loads(text: str) -> Record:
    """Parse and shape-check an export record."""
    try:
        record = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExportFormatError(f"Export record is not valid JSON: {e}") from e
    _check_shape(record)
    return record


def load(path: Union[str, Path]) -> Record:
    return loads(Path(path).read_text(encoding="utf-8"))


def _check_shape(record: Any) -> None:
    if not isinstance(record, dict):
        raise ExportFormatError("Export record must be a JSON object")
    if record.get("format") != FORMAT_NAME:
        raise ExportFormatError(f"Not a {FORMAT_NAME} record: format={record.get('format')!r}")
    if record.get("version") != FORMAT_VERSION:
        raise ExportFormatError(f"Unsupported export version: {record.get('version')!r}")
    if not isinstance(record.get("operations"), list):
        raise ExportFormatError("Export record 'operations' must be a list")
    for key in ("final_state", "probabilities", "validation", "composite_matrix"):
        if not isinstance(record.get(key), dict):
            raise ExportFormatError(f"Export record is missing object '{key}'")


def _parse_complex(data: Any, where: str) -> Complex:
    try:
        return Complex(float(data["re"]), float(data["im"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ExportFormatError(f"Malformed complex value at {where}: {data!r}") from e


def record_state(record: Record) -> Vector2:
    """The final state vector stored in ``record``."""
    fs = record["final_state"]
    return (
        _parse_complex(fs.get("alpha"), "final_state.alpha"),
        _parse_complex(fs.get("beta"), "final_state.beta"),
    )


def record_matrix(record: Record) -> Matrix2:
    """The composite matrix stored in ``record``."""
    try:
        rows = record["composite_matrix"]["elements"]
        if len(rows) != 2 or any(len(r) != 2 for r in rows):
            raise ExportFormatError("composite_matrix.elements must be 2x2")
    except (KeyError, TypeError) as e:
        raise ExportFormatError("Malformed composite_matrix") from e
    return tuple(
        tuple(_parse_complex(rows[i][j], f"composite_matrix[{i}][{j}]") for j in range(2))
        for i in range(2)
    )


def record_gates(record: Record) -> list[g.GateId]:
    try:
        return [g.gate_id(symbol) for symbol in record["operations"]]
    except (UnknownGateError, TypeError) as e:
        raise ExportFormatError(f"Invalid operations list: {record['operations']!r}") from e


def state_from_record(record: Record) -> CompositionState:
    """Rebuild a snapshot by replaying the record's operations."""
    operations = tuple(GateOperation(gate=gate) for gate in record_gates(record))
    composite, state = fold(operations)
    return CompositionState(operations=operations, state=state, composite=composite)


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

def verify_record(record: Record, tolerance: float | None = None) -> list[str]:
    """
    Re-derive statistics from the exported state and matrix.

    Parameters
    ----------
    record : dict
        An export record (as returned by :func:`export_record` or :func:`loads`).
    tolerance : float, optional
        Comparison tolerance. Defaults to the tolerance stored in the record.

    Returns
    -------
    list of str
        One message per mismatch; empty when the record is consistent.
    """
    _check_shape(record)
    if tolerance is None:
        stored_tol = record["validation"].get("tolerance", DEFAULT_TOLERANCE)
        try:
            tolerance = float(stored_tol)
        except (TypeError, ValueError) as e:
            raise ExportFormatError(f"Malformed validation.tolerance: {stored_tol!r}") from e

    state = record_state(record)
    composite = record_matrix(record)
    report = analyze(state, composite, tolerance)
    problems: list[str] = []

    def check(name: str, stored: Any, derived: float) -> None:
        try:
            stored = float(stored)
        except (TypeError, ValueError):
            problems.append(f"{name}: stored value {stored!r} is not a number")
            return
        if not math.isclose(stored, derived, rel_tol=0.0, abs_tol=tolerance):
            problems.append(f"{name}: stored {stored!r}, derived {derived!r}")

    probs = record["probabilities"]
    check("probabilities.prob0", probs.get("prob0"), report.probabilities.prob0)
    check("probabilities.prob1", probs.get("prob1"), report.probabilities.prob1)
    check("probabilities.raw_total", probs.get("raw_total"), report.probabilities.raw_total)

    for key, amp in zip(("alpha", "beta"), state):
        stored = record["final_state"][key]
        check(f"final_state.{key}.magnitude", stored.get("magnitude"), amp.magnitude())
        check(f"final_state.{key}.phase", stored.get("phase"), amp.phase())

    validation = record["validation"]
    if validation.get("is_normalized") != report.is_normalized:
        problems.append(
            f"validation.is_normalized: stored {validation.get('is_normalized')!r}, "
            f"derived {report.is_normalized!r}"
        )
    if validation.get("is_unitary") != report.is_unitary:
        problems.append(
            f"validation.is_unitary: stored {validation.get('is_unitary')!r}, "
            f"derived {report.is_unitary!r}"
        )

    cm = record["composite_matrix"]
    for name, derived in (("determinant", report.determinant), ("trace", report.trace)):
        stored = _parse_complex(cm.get(name), f"composite_matrix.{name}")
        if not stored.equals(derived, tolerance):
            problems.append(f"composite_matrix.{name}: stored {stored}, derived {derived}")

    replayed = state_from_record(record)
    if not matrices_close(replayed.composite, composite, tolerance):
        problems.append("composite_matrix: does not match replayed operations")

    if problems:
        logger.warning("export record failed %d checks", len(problems))
    return problems

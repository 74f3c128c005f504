"""Tests for the interactive session (engine + history)."""

import math

import pytest

from qmatrix import gates as g
from qmatrix.config import LabConfig
from qmatrix.engine import compose
from qmatrix.errors import UnknownGateError
from qmatrix.linalg import identity, matrices_close, vectors_close
from qmatrix.session import Session


@pytest.fixture
def session():
    return Session()


def test_new_session(session):
    assert len(session.state) == 0
    assert not session.can_undo
    assert not session.can_redo
    assert session.share_code() == ""


def test_first_append_is_undoable(session):
    session.add_gate("H")
    assert session.can_undo
    s = session.undo()
    assert len(s) == 0
    assert matrices_close(s.composite, identity())


def test_undo_redo_round_trip(session):
    session.add_gates("HXZ")
    final = session.state
    session.undo()
    session.undo()
    assert session.state.gate_sequence == (g.GateId.H,)
    session.redo()
    session.redo()
    assert session.state is final
    assert not session.can_redo


def test_undo_restores_engine(session):
    session.add_gates("HS")
    session.undo()
    s = session.add_gate("Z")
    assert s.gate_sequence == (g.GateId.H, g.GateId.Z)
    assert vectors_close(s.state, compose("HZ").state)


def test_add_after_undo_clears_redo(session):
    session.add_gates("HX")
    session.undo()
    assert session.can_redo
    session.add_gate("Y")
    assert not session.can_redo


def test_undo_redo_at_boundaries_are_noops(session):
    assert session.undo() is session.state
    session.add_gate("T")
    assert session.redo() is session.state


def test_unknown_gate_records_nothing(session):
    session.add_gate("H")
    depth = len(session.history)
    with pytest.raises(UnknownGateError):
        session.add_gate("W")
    assert len(session.history) == depth
    assert session.state.gate_sequence == (g.GateId.H,)


def test_remove(session):
    session.add_gates("HXZ")
    op = session.operations[1]
    s = session.remove(op.id)
    assert s.gate_sequence == (g.GateId.H, g.GateId.Z)
    session.undo()
    assert len(session.state) == 3


def test_remove_unknown_id_records_nothing(session):
    session.add_gate("H")
    depth = len(session.history)
    session.remove("missing")
    assert len(session.history) == depth


def test_reset_is_undoable(session):
    session.add_gates("HS")
    session.reset()
    assert len(session.state) == 0
    session.undo()
    assert session.state.gate_sequence == (g.GateId.H, g.GateId.S)


def test_history_capacity_bounds_undo():
    session = Session(LabConfig(history_capacity=5))
    session.add_gates("HXYZSTHXYZ")
    while session.can_undo:
        session.undo()
    assert len(session.state) == 6


def test_load_sequence(session):
    session.add_gate("Y")
    s = session.load_sequence("HZqq")
    assert s.gate_sequence == (g.GateId.H, g.GateId.Z)
    session.undo()
    assert s.gate_sequence != session.state.gate_sequence


def test_share_code_skips_dagger_gates(session):
    session.add_gates(["H", "S†", "T", "T†"])
    assert session.share_code() == "HT"


def test_report(session):
    session.add_gates("HZ")
    report = session.report()
    assert report.is_valid
    assert report.probabilities.prob1 == pytest.approx(0.5)
    assert complex(report.trace) == pytest.approx(math.sqrt(2))


def test_report_uses_config_tolerance():
    session = Session(LabConfig(tolerance=1e-6))
    assert session.report().tolerance == 1e-6


def test_export(session):
    session.add_gates("HX")
    record = session.export()
    assert record["operations"] == ["H", "X"]
    assert record["validation"]["tolerance"] == session.config.tolerance


def test_repr(session):
    session.add_gates("HZ")
    assert repr(session) == "Session(ops=2, code='HZ', history=3)"

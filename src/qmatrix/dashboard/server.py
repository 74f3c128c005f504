"""
qmatrix Dashboard Server.

A Flask application exposing one composition session over a JSON API:
- Gate catalog
- Add / remove / reset / undo / redo
- Live state, composite matrix and statistics
- Export records and share codes

Usage:
    from qmatrix.dashboard import launch
    launch(port=8888)

    # Or via CLI:
    # qmatrix serve --port 8888
"""

from __future__ import annotations

import threading
from typing import Any, Optional

from qmatrix.complex_number import Complex
from qmatrix.config import LabConfig
from qmatrix.errors import ExportFormatError, QMatrixError, UnknownGateError
from qmatrix.export import verify_record
from qmatrix.gates import GATE_REGISTRY
from qmatrix.logging import apply_config, get_logger
from qmatrix.session import Session
from qmatrix.sharing import share_url

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Gate metadata for clients
# ---------------------------------------------------------------------------

def _pair(c: Complex) -> list[float]:
    return [c.real, c.imag]


GATE_CATALOG = [
    {
        "name": info.gate.name.lower(),
        "label": info.symbol,
        "description": info.description,
        "unitary": info.unitary,
        "hermitian": info.hermitian,
        "self_inverse": info.self_inverse,
        "matrix": [[_pair(c) for c in row] for row in info.matrix],
    }
    for info in GATE_REGISTRY.values()
]

PRESETS = {
    "plus": {
        "name": "Plus state |+⟩",
        "description": "Equal superposition: (|0⟩ + |1⟩)/√2",
        "gates": ["H"],
    },
    "minus": {
        "name": "Minus state |−⟩",
        "description": "X then H: (|0⟩ − |1⟩)/√2",
        "gates": ["X", "H"],
    },
    "plus_i": {
        "name": "Plus-i state |+i⟩",
        "description": "H then S: (|0⟩ + i|1⟩)/√2",
        "gates": ["H", "S"],
    },
    "minus_i": {
        "name": "Minus-i state |−i⟩",
        "description": "H then S†: (|0⟩ − i|1⟩)/√2",
        "gates": ["H", "S†"],
    },
    "t_squared": {
        "name": "T·T = S",
        "description": "Two T gates compose to an S gate",
        "gates": ["H", "T", "T"],
    },
    "identity_xx": {
        "name": "X·X = I",
        "description": "Pauli-X is self-inverse",
        "gates": ["X", "X"],
    },
}


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------

def _state_payload(session: Session) -> dict:
    """Everything a client needs to render the current session."""
    snapshot = session.state
    report = session.report()
    return {
        "operations": [
            {"id": op.id, "gate": op.gate.value, "timestamp": op.timestamp}
            for op in snapshot.operations
        ],
        "statevector": [_pair(c) for c in report.state],
        "amplitudes": [
            {
                "basis": label,
                "real": c.real,
                "imag": c.imag,
                "magnitude": c.magnitude(),
                "phase": c.phase(),
                "text": c.to_string(session.config.precision),
            }
            for label, c in zip(("0", "1"), report.state)
        ],
        "composite_matrix": [[_pair(c) for c in row] for row in report.composite],
        "determinant": _pair(report.determinant),
        "trace": _pair(report.trace),
        "probabilities": {
            "0": report.probabilities.prob0,
            "1": report.probabilities.prob1,
            "raw_total": report.probabilities.raw_total,
        },
        "entropy": report.entropy,
        "purity": report.purity,
        "bloch": {
            "theta": report.bloch.theta,
            "phi": report.bloch.phi,
            "x": report.bloch.x,
            "y": report.bloch.y,
            "z": report.bloch.z,
        },
        "is_normalized": report.is_normalized,
        "is_unitary": report.is_unitary,
        "tolerance": report.tolerance,
        "can_undo": session.can_undo,
        "can_redo": session.can_redo,
        "share_code": session.share_code(),
    }


# ---------------------------------------------------------------------------
# Flask Application
# ---------------------------------------------------------------------------

def create_app(session: Optional[Session] = None, config: Optional[LabConfig] = None) -> Any:
    """
    Create and configure the Flask application.

    Parameters
    ----------
    session : Session, optional
        Session to serve. A new one is created from ``config`` by default.
    config : LabConfig, optional
        Used only when ``session`` is not given; its log level is applied
        to the qmatrix loggers. Defaults to :meth:`LabConfig.from_env`.
    """
    try:
        from flask import Flask, jsonify, request
    except ImportError:
        raise ImportError(
            "Flask is required for the dashboard. Install it with:\n"
            "  pip install flask\n"
            "Or install qmatrix with dashboard extras:\n"
            "  pip install qmatrix[dashboard]"
        )

    if session is None:
        config = config or LabConfig.from_env()
        apply_config(config)
        session = Session(config)
    lock = threading.Lock()

    app = Flask(__name__)
    app.json.sort_keys = False
    app.extensions["qmatrix"] = {"session": session, "lock": lock}

    def _error(message: str, status: int = 400):
        return jsonify({"error": message}), status

    # ---- Routes ----

    @app.route("/api/gates")
    def api_gates():
        return jsonify(GATE_CATALOG)

    @app.route("/api/state")
    def api_state():
        with lock:
            return jsonify(_state_payload(session))

    @app.route("/api/operations", methods=["POST"])
    def api_add_operation():
        data = request.get_json(silent=True) or {}
        gate = data.get("gate")
        if not isinstance(gate, str):
            return _error("Request body must contain a 'gate' string")
        try:
            with lock:
                session.add_gate(gate)
                return jsonify(_state_payload(session)), 201
        except UnknownGateError as e:
            return _error(str(e), 404)

    @app.route("/api/operations/<operation_id>", methods=["DELETE"])
    def api_remove_operation(operation_id: str):
        with lock:
            session.remove(operation_id)
            return jsonify(_state_payload(session))

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        with lock:
            session.reset()
            return jsonify(_state_payload(session))

    @app.route("/api/undo", methods=["POST"])
    def api_undo():
        with lock:
            session.undo()
            return jsonify(_state_payload(session))

    @app.route("/api/redo", methods=["POST"])
    def api_redo():
        with lock:
            session.redo()
            return jsonify(_state_payload(session))

    @app.route("/api/load", methods=["POST"])
    def api_load():
        data = request.get_json(silent=True) or {}
        code = data.get("gates", "")
        if not isinstance(code, str):
            return _error("'gates' must be a share code string")
        with lock:
            session.load_sequence(code)
            return jsonify(_state_payload(session))

    @app.route("/api/export")
    def api_export():
        with lock:
            return jsonify(session.export())

    @app.route("/api/verify", methods=["POST"])
    def api_verify():
        record = request.get_json(silent=True)
        try:
            problems = verify_record(record)
        except ExportFormatError as e:
            return _error(str(e))
        return jsonify({"ok": not problems, "problems": problems})

    @app.route("/api/share")
    def api_share():
        base_url = request.args.get("base_url", request.host_url)
        with lock:
            gates = session.state.gate_sequence
            code = session.share_code()
        return jsonify({"code": code, "url": share_url(gates, base_url)})

    @app.route("/api/presets")
    def api_presets():
        return jsonify(PRESETS)

    @app.errorhandler(QMatrixError)
    def handle_qmatrix_error(e):
        logger.warning("request failed: %s", e)
        return _error(str(e))

    return app


def launch(port: int = 8888, host: str = "127.0.0.1", debug: bool = False,
           session: Optional[Session] = None):
    """
    Launch the qmatrix dashboard API.

    Parameters
    ----------
    port : int
        Port to serve on (default 8888).
    host : str
        Host address (default localhost).
    debug : bool
        Enable Flask debug mode.
    session : Session, optional
        Session to serve.
    """
    app = create_app(session=session)

    url = f"http://{host}:{port}"
    print(f"""
╔══════════════════════════════════════════════════════╗
║              qmatrix ⚛ Gate Composer API             ║
╠══════════════════════════════════════════════════════╣
║                                                      ║
║   API: {url:<45s} ║
║                                                      ║
║   GET  /api/state     POST /api/operations           ║
║   POST /api/undo      POST /api/redo                 ║
║                                                      ║
║   Press Ctrl+C to stop the server.                   ║
╚══════════════════════════════════════════════════════╝
""")

    app.run(host=host, port=port, debug=debug)

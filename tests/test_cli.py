"""Tests for the qmatrix command-line interface."""

import json

import pytest

from qmatrix import gates as g
from qmatrix.cli import build_parser, main, parse_sequence


# ---------------------------------------------------------------------------
# Sequence parsing
# ---------------------------------------------------------------------------

class TestParseSequence:

    def test_share_code(self):
        assert parse_sequence("HZX") == [g.GateId.H, g.GateId.Z, g.GateId.X]

    def test_share_code_drops_unknown(self):
        assert parse_sequence("H?Z") == [g.GateId.H, g.GateId.Z]

    def test_token_list(self):
        assert parse_sequence("H, sdg, T†") == [g.GateId.H, g.GateId.SDG, g.GateId.TDG]

    def test_space_separated(self):
        assert parse_sequence("h x") == [g.GateId.H, g.GateId.X]

    def test_share_code_with_dagger(self):
        assert parse_sequence("HS†T") == [g.GateId.H, g.GateId.SDG, g.GateId.T]
        assert parse_sequence("T†h") == [g.GateId.TDG, g.GateId.H]

    def test_dagger_code_rejects_unknown_symbol(self):
        from qmatrix.errors import UnknownGateError

        with pytest.raises(UnknownGateError):
            parse_sequence("HQ†")

    def test_unknown_token_raises(self):
        from qmatrix.errors import UnknownGateError

        with pytest.raises(UnknownGateError):
            parse_sequence("H, W")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestCommands:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_run(self, capsys):
        assert main(["run", "HZ"]) == 0
        out = capsys.readouterr().out
        assert "Sequence: H Z" in out
        assert "|0⟩: 0.7071" in out
        assert "|1⟩: -0.7071" in out
        assert "Normalized: yes   Unitary: yes" in out

    def test_run_dagger_code(self, capsys):
        assert main(["run", "HS†"]) == 0
        assert "Sequence: H S†" in capsys.readouterr().out

    def test_run_polar(self, capsys):
        assert main(["run", "X", "--polar", "--precision", "2"]) == 0
        out = capsys.readouterr().out
        assert "|1⟩: 1.00" in out

    def test_run_unknown_gate(self, capsys):
        assert main(["run", "H, W"]) == 2
        assert "Unknown gate" in capsys.readouterr().err

    def test_export_stdout(self, capsys):
        assert main(["export", "H, S†"]) == 0
        record = json.loads(capsys.readouterr().out)
        assert record["operations"] == ["H", "S†"]

    def test_export_and_verify(self, tmp_path, capsys):
        path = tmp_path / "state.json"
        assert main(["export", "HST", "-o", str(path)]) == 0
        assert main(["verify", str(path)]) == 0
        assert "OK (HST)" in capsys.readouterr().out

    def test_verify_detects_tampering(self, tmp_path, capsys):
        path = tmp_path / "state.json"
        main(["export", "HZ", "-o", str(path)])
        record = json.loads(path.read_text(encoding="utf-8"))
        record["probabilities"]["prob0"] = 0.9
        path.write_text(json.dumps(record), encoding="utf-8")
        capsys.readouterr()

        assert main(["verify", str(path)]) == 1
        assert "prob0" in capsys.readouterr().out

    def test_verify_missing_file(self, tmp_path, capsys):
        assert main(["verify", str(tmp_path / "missing.json")]) == 2
        assert "error:" in capsys.readouterr().err

    def test_verify_bad_json(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        assert main(["verify", str(path)]) == 2

    def test_verify_null_tolerance(self, tmp_path, capsys):
        path = tmp_path / "state.json"
        main(["export", "HZ", "-o", str(path)])
        record = json.loads(path.read_text(encoding="utf-8"))
        record["validation"]["tolerance"] = None
        path.write_text(json.dumps(record), encoding="utf-8")
        capsys.readouterr()

        assert main(["verify", str(path)]) == 2
        assert "validation.tolerance" in capsys.readouterr().err

    def test_gates(self, capsys):
        assert main(["gates"]) == 0
        out = capsys.readouterr().out
        for symbol in ("H", "X", "Y", "Z", "S", "T", "S†", "T†"):
            assert symbol in out
        assert "self-inverse" in out

    def test_info(self, capsys):
        assert main(["info"]) == 0
        assert "qmatrix v" in capsys.readouterr().out

    def test_env_tolerance(self, monkeypatch, capsys):
        monkeypatch.setenv("QMATRIX_TOLERANCE", "1e-6")
        assert main(["run", "H"]) == 0
        assert "tolerance 1e-06" in capsys.readouterr().out

    def test_bad_env_config(self, monkeypatch, capsys):
        monkeypatch.setenv("QMATRIX_HISTORY_CAPACITY", "zero")
        assert main(["run", "H"]) == 2


def test_parser_commands():
    parser = build_parser()
    args = parser.parse_args(["serve", "--port", "9000"])
    assert args.port == 9000
    assert args.host == "127.0.0.1"

"""Tests for share codes and share URLs."""

import pytest

from qmatrix import gates as g
from qmatrix.engine import CompositionEngine, compose
from qmatrix.linalg import vectors_close
from qmatrix.sharing import (
    decode_sequence,
    encode_sequence,
    parse_share_url,
    replay,
    share_url,
)


@pytest.mark.parametrize("gates,code", [
    ([], ""),
    (["H", "Z", "X"], "HZX"),
    ([g.GateId.Y, g.GateId.S, g.GateId.T], "YST"),
    (["H", "S†", "T", "tdg"], "HT"),
])
def test_encode(gates, code):
    assert encode_sequence(gates) == code


def test_decode_drops_unknown_characters():
    assert decode_sequence("HZQx!T") == [g.GateId.H, g.GateId.Z, g.GateId.T]


def test_decode_is_case_sensitive():
    assert decode_sequence("hzx") == []


def test_decode_encode_round_trip():
    code = "HXYZSTTSZYXH"
    assert encode_sequence(decode_sequence(code)) == code


def test_replay_matches_compose():
    s = replay("HST")
    assert s.gate_sequence == (g.GateId.H, g.GateId.S, g.GateId.T)
    assert vectors_close(s.state, compose("HST").state)


def test_replay_onto_existing_engine():
    engine = CompositionEngine()
    engine.append("X")
    s = replay("H", engine)
    assert s.gate_sequence == (g.GateId.X, g.GateId.H)


def test_share_url():
    url = share_url(["H", "Z"], "https://example.org/app")
    assert url == "https://example.org/app?gates=HZ"


def test_share_url_keeps_existing_query():
    url = share_url(["X"], "https://example.org/app?theme=dark&gates=old")
    assert "theme=dark" in url
    assert "gates=X" in url
    assert "old" not in url


def test_parse_share_url():
    assert parse_share_url("https://example.org/?gates=HZT") == [
        g.GateId.H, g.GateId.Z, g.GateId.T,
    ]
    assert parse_share_url("https://example.org/") == []

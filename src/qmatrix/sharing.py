"""
Compact gate-sequence codes for sharing.

A sequence is encoded by concatenating single-character gate symbols in
append order, e.g. ``"HZX"``. S† and T† have no single-character symbol
and are left out of the code. Decoding ignores every character that is not
a single-character registry symbol (matching is case-sensitive).
"""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from qmatrix import gates as g
from qmatrix.engine import CompositionEngine, CompositionState
from qmatrix.logging import get_logger

logger = get_logger(__name__)

QUERY_PARAM = "gates"


def encode_sequence(gates: Iterable[g.GateLike]) -> str:
    """Concatenate the single-character symbols of ``gates``."""
    symbols = []
    for gate in gates:
        symbol = g.gate_id(gate).value
        if symbol in g.SINGLE_CHAR_GATES:
            symbols.append(symbol)
        else:
            logger.debug("%s has no single-character code, skipped", symbol)
    return "".join(symbols)


def decode_sequence(code: str) -> list[g.GateId]:
    """Gates named by ``code``, unknown characters dropped."""
    return [g.GateId(ch) for ch in code if ch in g.SINGLE_CHAR_GATES]


def replay(code: str, engine: Optional[CompositionEngine] = None) -> CompositionState:
    """Append every gate in ``code`` to ``engine`` (a fresh one by default)."""
    if engine is None:
        engine = CompositionEngine()
    for gate in decode_sequence(code):
        engine.append(gate)
    return engine.state


def share_url(gates: Iterable[g.GateLike], base_url: str) -> str:
    """``base_url`` with the sequence code in the ``gates`` query parameter."""
    parts = urlsplit(base_url)
    query = parse_qs(parts.query)
    query[QUERY_PARAM] = [encode_sequence(gates)]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


def parse_share_url(url: str) -> list[g.GateId]:
    """Decode the ``gates`` query parameter of a share URL."""
    values = parse_qs(urlsplit(url).query).get(QUERY_PARAM, [""])
    return decode_sequence(values[0])

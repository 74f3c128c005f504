"""Tests for the Complex value type."""

import dataclasses
import math

import pytest

from qmatrix.complex_number import Complex


# ---------------------------------------------------------------------------
# Construction and snapping
# ---------------------------------------------------------------------------

def test_tiny_components_snap_to_zero():
    c = Complex(1e-16, -9e-16)
    assert c.real == 0.0
    assert c.imag == 0.0


def test_snap_threshold_is_exclusive():
    assert Complex(1e-15).real == 1e-15
    assert Complex(0, -2e-15).imag == -2e-15


def test_negative_zero_is_snapped():
    c = Complex(-1.0, -0.0)
    assert math.copysign(1.0, c.imag) == 1.0
    assert c.phase() == pytest.approx(math.pi)


def test_immutable():
    c = Complex(1, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        c.real = 5


def test_constants():
    assert Complex.zero() == Complex(0, 0)
    assert Complex.one() == Complex(1, 0)
    assert Complex.i() == Complex(0, 1)
    assert Complex.zero() is Complex.ZERO


def test_from_polar_snaps_cosine_noise():
    c = Complex.from_polar(1, math.pi / 2)
    assert c.real == 0.0
    assert c.imag == pytest.approx(1.0)


def test_from_builtin():
    assert Complex.from_builtin(3 - 2j) == Complex(3, -2)
    assert Complex.from_builtin(2) == Complex(2, 0)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

def test_add_subtract():
    a, b = Complex(1, 2), Complex(3, -1)
    assert a.add(b) == Complex(4, 1)
    assert a.subtract(b) == Complex(-2, 3)


def test_multiply():
    assert Complex(1, 2).multiply(Complex(3, -1)) == Complex(5, 5)
    assert Complex.I.multiply(Complex.I) == Complex(-1, 0)


def test_conjugate_and_magnitude():
    c = Complex(3, 4)
    assert c.conjugate() == Complex(3, -4)
    assert c.magnitude() == 5.0
    assert c.magnitude_squared() == 25.0
    assert c.multiply(c.conjugate()) == Complex(25, 0)


@pytest.mark.parametrize("c,expected", [
    (Complex(1, 0), 0.0),
    (Complex(0, 1), math.pi / 2),
    (Complex(0, -1), -math.pi / 2),
    (Complex(-1, 0), math.pi),
    (Complex(-1, -1), -3 * math.pi / 4),
])
def test_phase(c, expected):
    assert c.phase() == pytest.approx(expected)


def test_normalize():
    n = Complex(3, 4).normalize()
    assert n.real == pytest.approx(0.6)
    assert n.imag == pytest.approx(0.8)
    assert n.magnitude() == pytest.approx(1.0)


def test_normalize_zero_returns_zero():
    assert Complex(0, 0).normalize() == Complex.ZERO


def test_equals_uses_tolerance():
    a = Complex(1, 0)
    assert a.equals(Complex(1 + 1e-13, -1e-13))
    assert not a.equals(Complex(1 + 1e-13, 0), tolerance=1e-14)
    assert a.equals(1)


def test_operators_delegate():
    a = Complex(1, 1)
    assert a + 1 == Complex(2, 1)
    assert 1 + a == Complex(2, 1)
    assert a - Complex(0, 1) == Complex(1, 0)
    assert 1 - Complex(0, 1) == Complex(1, -1)
    assert 2 * a == Complex(2, 2)
    assert a * 1j == Complex(-1, 1)
    assert -Complex(1, -1) == Complex(-1, 1)
    assert abs(Complex(3, 4)) == 5.0
    assert complex(Complex(1, 2)) == 1 + 2j


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("c,precision,expected", [
    (Complex(0.5, 0.5), 2, "0.50 + 0.50i"),
    (Complex(2, -0.5), 3, "2.000 - 0.500i"),
    (Complex(1 / math.sqrt(2), 0), 4, "0.7071"),
    (Complex(0, 0), 2, "0.00"),
    (Complex(0, 1), 4, "i"),
    (Complex(0, -1), 4, "-i"),
    (Complex(0, 2.5), 1, "2.5i"),
    (Complex(1, -1), 1, "1.0 - i"),
    (Complex(1, 1), 2, "1.00 + i"),
    (Complex(1e-6, 1), 4, "i"),
    (Complex(-0.25, 1e-7), 2, "-0.25"),
])
def test_to_string(c, precision, expected):
    assert c.to_string(precision) == expected


def test_str_uses_default_precision():
    assert str(Complex(0.123456, 0)) == "0.1235"


@pytest.mark.parametrize("c,precision,expected", [
    (Complex(0, 0), 4, "0"),
    (Complex(2, 0), 2, "2.00"),
    (Complex.from_polar(1, math.pi / 4), 4, "1.0000·e^(i0.7854)"),
    (Complex(-1, 0), 3, "1.000·e^(i3.142)"),
    (Complex(0, -2), 2, "2.00·e^(i-1.57)"),
])
def test_to_polar_string(c, precision, expected):
    assert c.to_polar_string(precision) == expected

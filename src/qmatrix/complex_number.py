"""
Immutable complex-number value type.

Python's built-in ``complex`` is not used for the kernel because every
intermediate value must be cleaned of floating-point noise: components
smaller than :data:`~qmatrix.config.SNAP_EPSILON` are stored as exactly
zero. That also pins ``phase()`` to (-pi, pi], since a snapped imaginary
part is never ``-0.0``.

Example
-------
>>> a = Complex(1, 1)
>>> a.multiply(a.conjugate())
Complex(real=2.0, imag=0.0)
>>> str(Complex(0, -1))
'-i'
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Union

from qmatrix.config import DEFAULT_PRECISION, DEFAULT_TOLERANCE, SNAP_EPSILON

Number = Union[int, float, complex]


def _snap(value: float) -> float:
    value = float(value)
    return 0.0 if abs(value) < SNAP_EPSILON else value


@dataclass(frozen=True)
class Complex:
    """
    Complex number with value semantics.

    Parameters
    ----------
    real : float
        Real part.
    imag : float
        Imaginary part (default 0).
    """

    real: float
    imag: float = 0.0

    ZERO: ClassVar[Complex]
    ONE: ClassVar[Complex]
    I: ClassVar[Complex]

    def __post_init__(self) -> None:
        object.__setattr__(self, "real", _snap(self.real))
        object.__setattr__(self, "imag", _snap(self.imag))

    # -- Construction -------------------------------------------------------

    @classmethod
    def from_polar(cls, magnitude: float, phase: float) -> Complex:
        """Build ``magnitude * e^(i*phase)``."""
        return cls(magnitude * math.cos(phase), magnitude * math.sin(phase))

    @classmethod
    def from_builtin(cls, value: Number) -> Complex:
        """Convert a Python number."""
        value = complex(value)
        return cls(value.real, value.imag)

    @classmethod
    def zero(cls) -> Complex:
        return cls.ZERO

    @classmethod
    def one(cls) -> Complex:
        return cls.ONE

    @classmethod
    def i(cls) -> Complex:
        return cls.I

    # -- Arithmetic ---------------------------------------------------------

    def add(self, other: Complex) -> Complex:
        return Complex(self.real + other.real, self.imag + other.imag)

    def subtract(self, other: Complex) -> Complex:
        return Complex(self.real - other.real, self.imag - other.imag)

    def multiply(self, other: Complex) -> Complex:
        return Complex(
            self.real * other.real - self.imag * other.imag,
            self.real * other.imag + self.imag * other.real,
        )

    def conjugate(self) -> Complex:
        return Complex(self.real, -self.imag)

    def magnitude(self) -> float:
        return math.sqrt(self.real * self.real + self.imag * self.imag)

    def magnitude_squared(self) -> float:
        return self.real * self.real + self.imag * self.imag

    def phase(self) -> float:
        """Argument in (-pi, pi]."""
        return math.atan2(self.imag, self.real)

    def normalize(self) -> Complex:
        """Unit-magnitude value with the same phase; zero stays zero."""
        mag = self.magnitude()
        if mag == 0:
            return Complex.ZERO
        return Complex(self.real / mag, self.imag / mag)

    def equals(self, other: Complex | Number, tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """Component-wise comparison within ``tolerance``."""
        other = _coerce(other)
        return (
            abs(self.real - other.real) < tolerance
            and abs(self.imag - other.imag) < tolerance
        )

    # -- Operators ----------------------------------------------------------

    def __add__(self, other: Complex | Number) -> Complex:
        return self.add(_coerce(other))

    __radd__ = __add__

    def __sub__(self, other: Complex | Number) -> Complex:
        return self.subtract(_coerce(other))

    def __rsub__(self, other: Number) -> Complex:
        return _coerce(other).subtract(self)

    def __mul__(self, other: Complex | Number) -> Complex:
        return self.multiply(_coerce(other))

    __rmul__ = __mul__

    def __neg__(self) -> Complex:
        return Complex(-self.real, -self.imag)

    def __abs__(self) -> float:
        return self.magnitude()

    def __complex__(self) -> complex:
        return complex(self.real, self.imag)

    # -- Rendering ----------------------------------------------------------

    def to_string(self, precision: int = DEFAULT_PRECISION) -> str:
        """
        Rectangular form ``a + bi``.

        Components smaller than ``10**-precision`` are dropped, and a unit
        imaginary coefficient is printed as ``i`` / ``-i``.
        """
        cutoff = 10.0 ** -precision
        re = 0.0 if abs(self.real) < cutoff else self.real
        im = 0.0 if abs(self.imag) < cutoff else self.imag

        if im == 0:
            return f"{re:.{precision}f}"
        if re == 0:
            if im == 1:
                return "i"
            if im == -1:
                return "-i"
            return f"{im:.{precision}f}i"

        sign = " + " if im >= 0 else " - "
        im_str = "i" if abs(im) == 1 else f"{abs(im):.{precision}f}i"
        return f"{re:.{precision}f}{sign}{im_str}"

    def to_polar_string(self, precision: int = DEFAULT_PRECISION) -> str:
        """Polar form ``r·e^(iθ)``; a zero phase prints just ``r``."""
        mag = self.magnitude()
        if mag == 0:
            return "0"
        phase = self.phase()
        if abs(phase) < 10.0 ** -precision:
            return f"{mag:.{precision}f}"
        return f"{mag:.{precision}f}·e^(i{phase:.{precision}f})"

    def __str__(self) -> str:
        return self.to_string()


Complex.ZERO = Complex(0.0, 0.0)
Complex.ONE = Complex(1.0, 0.0)
Complex.I = Complex(0.0, 1.0)


def _coerce(value: Complex | Number) -> Complex:
    if isinstance(value, Complex):
        return value
    return Complex.from_builtin(value)

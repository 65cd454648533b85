"""Physical length and angle value objects.

Lengths are canonicalised to millimetres so that changing the display DPI or
the viewport scale never rewrites shape data; only render-time pixel
conversions change. Pixel conversions read a process-wide DPI provider which
is installed once at startup (or temporarily overridden in tests).
"""
from __future__ import annotations

import math
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator, Optional, Union

from .errors import InvalidArgument

MM_PER_INCH = 25.4
MM_PER_CM = 10.0
DEFAULT_DPI = 96.0
EPSILON_MM = 1e-9
EPSILON_RAD = 1e-9


class Unit(str, Enum):
    MM = "mm"
    CM = "cm"
    INCH = "in"
    PX = "px"


UnitLike = Union[Unit, str]

_UNIT_ALIASES = {
    "mm": Unit.MM,
    "millimeter": Unit.MM,
    "cm": Unit.CM,
    "centimeter": Unit.CM,
    "in": Unit.INCH,
    "inch": Unit.INCH,
    "px": Unit.PX,
    "pixel": Unit.PX,
}


def _coerce_unit(value: UnitLike) -> Unit:
    if isinstance(value, Unit):
        return value
    try:
        return _UNIT_ALIASES[str(value).strip().lower()]
    except KeyError as exc:
        raise InvalidArgument(f"Unsupported unit: {value!r}") from exc


def _require_finite(value: float, what: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{what} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidArgument(f"{what} must be a finite number, got {value!r}")
    return number


# ---------------------------------------------------------------------------
# DPI provider

def _default_dpi() -> float:
    return DEFAULT_DPI


_dpi_provider: Callable[[], float] = _default_dpi


def set_dpi_provider(provider: Callable[[], float]) -> None:
    """Install the zero-argument callable that reports the current DPI."""
    global _dpi_provider
    if not callable(provider):
        raise InvalidArgument("DPI provider must be callable")
    _dpi_provider = provider


def reset_dpi_provider() -> None:
    global _dpi_provider
    _dpi_provider = _default_dpi


def get_dpi() -> float:
    dpi = _require_finite(_dpi_provider(), "DPI")
    if dpi <= 0.0:
        raise InvalidArgument(f"DPI must be positive, got {dpi}")
    return dpi


@contextmanager
def use_dpi(dpi: float) -> Iterator[None]:
    """Temporarily report ``dpi`` from the provider."""
    global _dpi_provider
    value = _require_finite(dpi, "DPI")
    previous = _dpi_provider
    _dpi_provider = lambda: value
    try:
        yield
    finally:
        _dpi_provider = previous


def _resolve_dpi(dpi: Optional[float]) -> float:
    if dpi is None:
        return get_dpi()
    value = _require_finite(dpi, "DPI")
    if value <= 0.0:
        raise InvalidArgument(f"DPI must be positive, got {value}")
    return value


# ---------------------------------------------------------------------------
# Measurement

class Measurement:
    """Immutable physical length stored in millimetres."""

    __slots__ = ("_mm",)

    def __init__(self, value: float, unit: UnitLike = Unit.MM):
        number = _require_finite(value, "Measurement value")
        u = _coerce_unit(unit)
        if u is Unit.MM:
            mm = number
        elif u is Unit.CM:
            mm = number * MM_PER_CM
        elif u is Unit.INCH:
            mm = number * MM_PER_INCH
        else:
            mm = number / get_dpi() * MM_PER_INCH
        object.__setattr__(self, "_mm", mm)

    def __setattr__(self, name, value):
        raise AttributeError("Measurement is immutable")

    @property
    def value_mm(self) -> float:
        return self._mm

    # -- factories ---------------------------------------------------------
    @classmethod
    def from_mm(cls, mm: float) -> "Measurement":
        return cls(mm, Unit.MM)

    @classmethod
    def from_px(cls, px: float, dpi: Optional[float] = None) -> "Measurement":
        use = _resolve_dpi(dpi)
        return cls(_require_finite(px, "Pixel value") / use * MM_PER_INCH, Unit.MM)

    @classmethod
    def zero(cls) -> "Measurement":
        return cls(0.0, Unit.MM)

    # -- arithmetic --------------------------------------------------------
    def add(self, other: "Measurement") -> "Measurement":
        return Measurement(self._mm + other.value_mm)

    def subtract(self, other: "Measurement") -> "Measurement":
        return Measurement(self._mm - other.value_mm)

    def multiply(self, factor: float) -> "Measurement":
        return Measurement(self._mm * _require_finite(factor, "Factor"))

    def divide(self, factor: float) -> "Measurement":
        divisor = _require_finite(factor, "Divisor")
        if divisor == 0.0:
            raise InvalidArgument("Cannot divide a Measurement by zero")
        return Measurement(self._mm / divisor)

    def __add__(self, other: "Measurement") -> "Measurement":
        if not isinstance(other, Measurement):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "Measurement") -> "Measurement":
        if not isinstance(other, Measurement):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: float) -> "Measurement":
        if isinstance(factor, Measurement):
            return NotImplemented
        return self.multiply(factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> "Measurement":
        if isinstance(factor, Measurement):
            return NotImplemented
        return self.divide(factor)

    def __neg__(self) -> "Measurement":
        return Measurement(-self._mm)

    def __abs__(self) -> "Measurement":
        return Measurement(abs(self._mm))

    # -- comparison --------------------------------------------------------
    def equals(self, other: "Measurement") -> bool:
        return abs(self._mm - other.value_mm) < EPSILON_MM

    def compare_to(self, other: "Measurement") -> float:
        """Negative, zero or positive like a classic comparator."""
        return self._mm - other.value_mm

    # -- conversion --------------------------------------------------------
    def to_pixels(self, dpi: Optional[float] = None) -> float:
        return self._mm * _resolve_dpi(dpi) / MM_PER_INCH

    def to_unit(self, unit: UnitLike, dpi: Optional[float] = None) -> float:
        u = _coerce_unit(unit)
        if u is Unit.MM:
            return self._mm
        if u is Unit.CM:
            return self._mm / MM_PER_CM
        if u is Unit.INCH:
            return self._mm / MM_PER_INCH
        return self.to_pixels(dpi)

    def __float__(self) -> float:
        return self._mm

    def __repr__(self) -> str:
        return f"Measurement({self._mm!r}, 'mm')"

    def __str__(self) -> str:
        return f"{self._mm:.2f} mm"


# ---------------------------------------------------------------------------
# Angle

class Angle:
    """Immutable angle stored in radians."""

    __slots__ = ("_rad",)

    def __init__(self, value: float, unit: str = "rad"):
        number = _require_finite(value, "Angle")
        if unit == "deg":
            number = math.radians(number)
        elif unit != "rad":
            raise InvalidArgument(f"Unsupported angle unit: {unit!r}")
        object.__setattr__(self, "_rad", number)

    def __setattr__(self, name, value):
        raise AttributeError("Angle is immutable")

    @classmethod
    def from_degrees(cls, degrees: float) -> "Angle":
        return cls(degrees, "deg")

    @classmethod
    def from_radians(cls, radians: float) -> "Angle":
        return cls(radians, "rad")

    def to_radians(self) -> float:
        return self._rad

    def to_degrees(self) -> float:
        return math.degrees(self._rad)

    def add(self, other: "Angle") -> "Angle":
        return Angle(self._rad + other.to_radians())

    def subtract(self, other: "Angle") -> "Angle":
        return Angle(self._rad - other.to_radians())

    def multiply(self, factor: float) -> "Angle":
        return Angle(self._rad * _require_finite(factor, "Factor"))

    def equals(self, other: "Angle") -> bool:
        return abs(self._rad - other.to_radians()) < EPSILON_RAD

    def __repr__(self) -> str:
        return f"Angle({self._rad!r}, 'rad')"

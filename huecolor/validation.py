"""Argument checks shared by the color converters and the light-state builder."""

import math


class InvalidArgument(ValueError):
    """A numeric input lies outside the documented domain of an operation."""


def require_finite(name: str, value: float) -> float:
    """Return ``value`` as a float, rejecting NaN, infinities and non-numbers."""
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be a number, got {value!r}")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be a number, got {value!r}") from None
    if math.isnan(value) or math.isinf(value):
        raise InvalidArgument(f"{name} must be finite, got {value!r}")
    return value


def require_fraction(name: str, value: float) -> float:
    """Return ``value`` if it is a finite number in [0, 1]."""
    value = require_finite(name, value)
    if not 0.0 <= value <= 1.0:
        raise InvalidArgument(f"{name} must be in [0, 1], got {value!r}")
    return value


def require_positive(name: str, value: float) -> float:
    value = require_finite(name, value)
    if value <= 0:
        raise InvalidArgument(f"{name} must be positive, got {value!r}")
    return value


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))

"""Easing curves for shaping volume fades."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

from .const import CURVE_BEZIER, CURVE_LINEAR, CURVE_LOGARITHMIC

# Type alias for easing functions
EasingFunc = Callable[[float], float]


def linear(t: float) -> float:
    """Linear easing - constant rate of change."""
    return t


def bezier(t: float) -> float:
    """Rational approximation of a quadratic bezier ease-in.

    Slow start, accelerating towards the end. Reaches 1/3 at the midpoint.
    """
    return t / (1 + (1 - t))


def logarithmic(t: float) -> float:
    """Smoothstep - symmetric ease-in/ease-out.

    Perceptually the most natural curve for loudness changes.
    """
    return t * t * (3 - 2 * t)


class FadeCurve(StrEnum):
    """Selectable fade curve."""

    LINEAR = CURVE_LINEAR
    BEZIER = CURVE_BEZIER
    LOGARITHMIC = CURVE_LOGARITHMIC

    @property
    def func(self) -> EasingFunc:
        """The easing function for this curve."""
        return EASING_FUNCTIONS[self]


# Mapping of curves to their implementations
EASING_FUNCTIONS: dict[FadeCurve, EasingFunc] = {
    FadeCurve.LINEAR: linear,
    FadeCurve.BEZIER: bezier,
    FadeCurve.LOGARITHMIC: logarithmic,
}

CURVE_NAMES: list[str] = [curve.value for curve in FadeCurve]

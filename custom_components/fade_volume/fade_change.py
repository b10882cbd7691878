"""FadeChange and FadeStep models for the Fade Volume integration."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum

from .const import MAX_VOLUME, MIN_VOLUME, TICK_INTERVAL_S, TICK_RATE_HZ
from .easing import EasingFunc, FadeCurve
from .fade_params import FadeParams

# Absorbs float error in duration * rate (e.g. 0.3 * 10)
_STEP_EPSILON = 1e-9


class FadeOutcome(StrEnum):
    """How a fade loop ended."""

    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class FadeStep:
    """A single step in a fade sequence."""

    index: int
    t: float
    shaped_t: float
    volume: float


@dataclass(frozen=True)
class FadeChange:
    """A planned volume fade from a start value to a target value.

    The plan is fixed once created: the step count is derived from the
    nominal duration and the fixed tick rate and is never recomputed from
    elapsed time. Steps are generated on demand, indexed from 1, and only
    for indices below ``total_steps``; the exact target is written by the
    caller once the loop ends.
    """

    start_volume: float
    target_volume: float
    total_steps: int
    curve: FadeCurve = FadeCurve.LINEAR
    tick_interval_s: float = TICK_INTERVAL_S

    # Selected once at plan time
    _easing: EasingFunc = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_easing", self.curve.func)

    @classmethod
    def plan(cls, params: FadeParams, start_volume: float) -> FadeChange:
        """Build a fade plan from validated parameters and the current volume."""
        return cls(
            start_volume=start_volume,
            target_volume=params.volume,
            total_steps=step_count(params.duration_s),
            curve=params.curve,
        )

    @property
    def delta(self) -> float:
        """Signed volume change over the whole fade."""
        return self.target_volume - self.start_volume

    def is_exhausted(self, index: int) -> bool:
        """True when the step budget has been used up at *index*."""
        return index >= self.total_steps

    def step_at(self, index: int) -> FadeStep:
        """Compute the step for 1-based *index*.

        The resulting volume is clamped to the valid volume range.
        """
        t = index / self.total_steps
        shaped_t = self._easing(t)
        volume = self.start_volume + shaped_t * self.delta
        return FadeStep(
            index=index,
            t=t,
            shaped_t=shaped_t,
            volume=min(MAX_VOLUME, max(MIN_VOLUME, volume)),
        )


def step_count(duration_s: float) -> int:
    """Number of ticks for a fade of *duration_s* seconds at the fixed tick rate."""
    return max(0, math.floor(duration_s * TICK_RATE_HZ + _STEP_EPSILON))

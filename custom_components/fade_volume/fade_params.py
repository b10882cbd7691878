"""FadeParams model for the Fade Volume integration."""

from __future__ import annotations

from dataclasses import dataclass

from .const import (
    ATTR_CURVE,
    ATTR_DURATION,
    ATTR_VOLUME,
    DEFAULT_CURVE,
    DEFAULT_DURATION,
    DEFAULT_VOLUME,
    MAIN_PARAMS,
    MAX_DURATION,
    MAX_VOLUME,
    MIN_DURATION,
    MIN_VOLUME,
)
from .easing import CURVE_NAMES, FadeCurve
from .exceptions import InvalidInput


@dataclass(frozen=True)
class FadeParams:
    """Validated parameters for a volume fade.

    volume is the target volume level (0.0-1.0) and duration_s the nominal
    fade duration in seconds (0.1-60.0).
    """

    volume: float = DEFAULT_VOLUME
    duration_s: float = DEFAULT_DURATION
    curve: FadeCurve = FadeCurve(DEFAULT_CURVE)

    @classmethod
    def from_service_data(
        cls,
        data: dict,
        *,
        default_volume: float = DEFAULT_VOLUME,
        default_duration: float = DEFAULT_DURATION,
        default_curve: str = DEFAULT_CURVE,
    ) -> FadeParams:
        """Create FadeParams from service call data with validation.

        Missing values fall back to the supplied defaults, which come from
        the integration options.

        Args:
            data: Service call data with target fields already removed
            default_volume: Volume used when none is given
            default_duration: Duration used when none is given
            default_curve: Curve name used when none is given

        Returns:
            FadeParams with normalized values

        Raises:
            InvalidInput: If validation fails
        """
        cls._validate_known_params(data)

        volume = cls._coerce_float(data.get(ATTR_VOLUME, default_volume), ATTR_VOLUME)
        if not MIN_VOLUME <= volume <= MAX_VOLUME:
            raise InvalidInput(
                f"Volume must be between {MIN_VOLUME} and {MAX_VOLUME}, got {volume}"
            )

        duration_s = cls._coerce_float(data.get(ATTR_DURATION, default_duration), ATTR_DURATION)
        if not MIN_DURATION <= duration_s <= MAX_DURATION:
            raise InvalidInput(
                f"Duration must be between {MIN_DURATION} and {MAX_DURATION} seconds, "
                f"got {duration_s}"
            )

        curve_name = str(data.get(ATTR_CURVE, default_curve)).lower()
        if curve_name not in CURVE_NAMES:
            raise InvalidInput(
                f"Unknown curve: {curve_name}. Valid curves are: {', '.join(CURVE_NAMES)}"
            )

        return cls(volume=volume, duration_s=duration_s, curve=FadeCurve(curve_name))

    @staticmethod
    def _validate_known_params(data: dict) -> None:
        """Validate that all parameters are known.

        Raises:
            InvalidInput: If unknown parameters are provided.
        """
        unknown = set(data.keys()) - MAIN_PARAMS
        if unknown:
            raise InvalidInput(
                f"Unknown parameter(s): {', '.join(sorted(unknown))}. "
                f"Valid parameters are: {', '.join(sorted(MAIN_PARAMS))}"
            )

    @staticmethod
    def _coerce_float(value: object, name: str) -> float:
        """Convert a service value to float, rejecting non-numeric input."""
        if isinstance(value, bool):
            raise InvalidInput(f"{name} must be a number, got {value!r}")
        try:
            return float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as err:
            raise InvalidInput(f"{name} must be a number, got {value!r}") from err

"""Domain errors raised by the tracker core."""

from dataclasses import dataclass


class TrackerError(Exception):
    """Base class for tracker domain errors."""


class AnalysisError(TrackerError):
    """Raised when food analysis fails or returns unusable data."""


class MealNotFoundError(TrackerError, LookupError):
    """Raised when a meal id does not exist for the requested day."""


class OnboardingRequiredError(TrackerError):
    """Raised when an operation needs profile data collected at onboarding."""


class InvalidProfileError(TrackerError, ValueError):
    """Raised when profile data is outside plausible bounds."""


@dataclass(frozen=True)
class WeightChange:
    """Relative change between a new weight and the most recent earlier entry."""

    previous_weight_kg: float
    new_weight_kg: float
    delta_kg: float
    delta_ratio: float


class UnconfirmedWeightChangeError(TrackerError):
    """Raised when a large weight change is committed without confirmation."""

    def __init__(self, change: WeightChange) -> None:
        super().__init__(
            f"Weight changed by {change.delta_ratio:.0%} "
            f"({change.previous_weight_kg} kg -> {change.new_weight_kg} kg)"
        )
        self.change = change

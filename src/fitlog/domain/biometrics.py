"""Domain models for body measurements."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class Circumferences:
    """Optional body circumferences in centimeters."""

    waist: float | None = None
    abdomen: float | None = None
    hips: float | None = None
    neck: float | None = None
    arm_right: float | None = None
    thigh_right: float | None = None
    calf_right: float | None = None


@dataclass(frozen=True)
class BodyRatios:
    """Ratios derived from circumferences."""

    waist_hip_ratio: float | None = None
    waist_height_ratio: float | None = None


@dataclass(frozen=True)
class BiometricEntry:
    """Body measurements recorded for one date."""

    id: str
    day: date
    weight_kg: float
    bmi: float
    circumferences_cm: Circumferences = field(default_factory=Circumferences)
    ratios: BodyRatios = field(default_factory=BodyRatios)

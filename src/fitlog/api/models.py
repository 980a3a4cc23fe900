"""Request models for the HTTP API.

Field bounds reject implausible physiological values before they reach the
tracker service.
"""

import base64
import binascii
from datetime import date

from pydantic import BaseModel, Field, field_validator

from fitlog.domain.biometrics import Circumferences
from fitlog.domain.logs import Macros, MealItem, MealType
from fitlog.domain.profile import ActivityFactor, ProfileInput, Sex


class MacrosIn(BaseModel):
    """Macronutrients of a meal item."""

    kcal: float = Field(ge=0.0)
    p: float = Field(ge=0.0)
    c: float = Field(ge=0.0)
    f: float = Field(ge=0.0)


class MealItemIn(BaseModel):
    """Meal item as entered or accepted from analysis."""

    name: str = Field(min_length=1)
    quantity: float = Field(ge=0.0)
    unit: str = "g"
    macros: MacrosIn

    def to_domain(self) -> MealItem:
        """Convert to the domain meal item."""
        return MealItem(
            name=self.name,
            quantity=self.quantity,
            unit=self.unit,
            macros=Macros(
                kcal=self.macros.kcal,
                p=self.macros.p,
                c=self.macros.c,
                f=self.macros.f,
            ),
        )


class MealIn(BaseModel):
    """Meal payload for create and edit."""

    type: MealType
    items: list[MealItemIn] = Field(min_length=1)


class WaterIn(BaseModel):
    """Water intake delta in milliliters; negative values subtract."""

    delta_ml: int = Field(ge=-10000, le=10000)


class ExerciseIn(BaseModel):
    """Exercise session payload."""

    name: str = Field(min_length=1)
    duration_minutes: int = Field(ge=1, le=1440)
    met: float = Field(ge=0.5, le=25.0)


class CircumferencesIn(BaseModel):
    """Optional body circumferences in centimeters."""

    waist: float | None = Field(default=None, ge=10, le=300)
    abdomen: float | None = Field(default=None, ge=10, le=300)
    hips: float | None = Field(default=None, ge=10, le=300)
    neck: float | None = Field(default=None, ge=10, le=300)
    arm_right: float | None = Field(default=None, ge=10, le=300)
    thigh_right: float | None = Field(default=None, ge=10, le=300)
    calf_right: float | None = Field(default=None, ge=10, le=300)

    def to_domain(self) -> Circumferences:
        """Convert to domain circumferences."""
        return Circumferences(**self.model_dump())


class WeightCheckIn(BaseModel):
    """Weight to compare against the latest earlier entry."""

    day: date
    weight_kg: float = Field(ge=20, le=400)


class BiometricIn(WeightCheckIn):
    """Biometric entry payload."""

    circumferences_cm: CircumferencesIn = Field(default_factory=CircumferencesIn)
    confirmed: bool = False


class ProfileIn(BaseModel):
    """Profile fields collected at onboarding.

    The age bound depends on the tracker's timezone and is checked by the service.
    """

    name: str = Field(min_length=1, max_length=80)
    sex: Sex
    birth_date: date
    height_cm: float = Field(ge=50, le=272)
    current_weight_kg: float = Field(ge=20, le=400)
    target_weight_kg: float = Field(ge=30, le=400)
    activity_factor: ActivityFactor
    abdominal_circ_cm: float | None = Field(default=None, ge=30, le=300)

    def to_domain(self) -> ProfileInput:
        """Convert to the domain profile input."""
        return ProfileInput(**self.model_dump())


class XpIn(BaseModel):
    """Direct XP award."""

    amount: int = Field(ge=0, le=100000)


class ChallengeIn(BaseModel):
    """Custom challenge payload."""

    title: str = Field(min_length=1, max_length=120)
    xp_reward: int = Field(ge=0, le=10000)


class AnalysisTextIn(BaseModel):
    """Free-text meal description to analyze."""

    text: str = Field(min_length=1, max_length=2000)


class AnalysisImageIn(BaseModel):
    """Base64 encoded meal photo, optionally as a data URL."""

    image_base64: str = Field(min_length=1)

    def image_bytes(self) -> bytes:
        """Decode the image payload."""
        _, _, encoded = self.image_base64.rpartition(",")
        return base64.b64decode(encoded, validate=True)

    @field_validator("image_base64")
    @classmethod
    def _check_base64(cls, value: str) -> str:
        _, _, encoded = value.rpartition(",")
        try:
            base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("image_base64 is not valid base64") from exc
        return value

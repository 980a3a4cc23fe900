"""User profile domain model."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

Sex = Literal["M", "F"]
Goal = Literal["loss", "maintenance", "hypertrophy"]
ActivityFactor = Literal[1.2, 1.375, 1.55, 1.725]

DEFAULT_KCAL_GOAL = 2000
DEFAULT_WATER_GOAL_ML = 2000


@dataclass(frozen=True)
class UserProfile:
    """Profile data and the targets derived from it."""

    name: str = ""
    sex: Sex = "M"
    birth_date: date | None = None
    height_cm: float = 0.0
    current_weight_kg: float = 0.0
    target_weight_kg: float = 0.0
    abdominal_circ_cm: float | None = None
    activity_factor: ActivityFactor = 1.2
    goal: Goal = "maintenance"
    calculated_tmb: int = 0
    daily_kcal_goal: int = DEFAULT_KCAL_GOAL
    daily_water_goal: int = DEFAULT_WATER_GOAL_ML
    onboarding_completed: bool = False


@dataclass(frozen=True)
class ProfileInput:
    """Profile fields supplied by the user at onboarding or on edit."""

    name: str
    sex: Sex
    birth_date: date
    height_cm: float
    current_weight_kg: float
    target_weight_kg: float
    activity_factor: ActivityFactor
    abdominal_circ_cm: float | None = None

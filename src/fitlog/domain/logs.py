"""Domain models for daily nutrition logs."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

MealType = Literal["breakfast", "lunch", "snack", "dinner"]


@dataclass(frozen=True)
class Macros:
    """Energy and macronutrients for a single food item."""

    kcal: float
    p: float
    c: float
    f: float


@dataclass(frozen=True)
class MealItem:
    """Food item within a meal."""

    name: str
    quantity: float
    unit: str
    macros: Macros


@dataclass(frozen=True)
class Meal:
    """Logged meal with its items."""

    id: str
    type: MealType
    timestamp_updated: datetime
    items: list[MealItem]


@dataclass(frozen=True)
class Exercise:
    """Logged exercise session."""

    id: str
    name: str
    duration_minutes: int
    met: float
    calories_burned: int


@dataclass(frozen=True)
class DaySummary:
    """Totals derived from a day's meals and water intake."""

    total_kcal: int = 0
    total_protein: int = 0
    water_intake_ml: int = 0


@dataclass(frozen=True)
class DayLog:
    """All records for one calendar day."""

    day: date
    summary: DaySummary = field(default_factory=DaySummary)
    meals: list[Meal] = field(default_factory=list)
    exercises: list[Exercise] = field(default_factory=list)

    @property
    def has_activity(self) -> bool:
        """Return True when at least one meal or exercise was logged."""
        return bool(self.meals or self.exercises)


@dataclass(frozen=True)
class DailyBalance:
    """Energy and hydration balance for a day."""

    day: date
    consumed_kcal: int
    burned_kcal: int
    goal_kcal: int
    remaining_kcal: int
    water_intake_ml: int
    water_goal_ml: int
    water_progress_percent: int

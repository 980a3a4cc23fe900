"""Metabolic and body metrics.

Every function here is pure. Integer results use half-up rounding so that
1648.5 kcal becomes 1649, matching how targets are shown to users.
"""

import math
from datetime import date

from fitlog.domain.profile import Goal, Sex

LEVEL_XP_STEP = 500
WATER_ML_PER_KG = 35
LOSS_KCAL_ADJUSTMENT = -500
HYPERTROPHY_KCAL_ADJUSTMENT = 300


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def age(birth_date: date, as_of: date | None = None) -> int:
    """Return age in whole years at ``as_of`` (today by default)."""
    reference = as_of or date.today()
    years = reference.year - birth_date.year
    if (reference.month, reference.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


def basal_metabolic_rate(
    weight_kg: float, height_cm: float, age_years: int, sex: Sex
) -> int:
    """Mifflin-St Jeor basal metabolic rate in kcal/day."""
    tmb = 10 * weight_kg + 6.25 * height_cm - 5 * age_years
    tmb += 5 if sex == "M" else -161
    return round_half_up(tmb)


def daily_calorie_target(bmr: float, activity_factor: float, goal: Goal) -> int:
    """Return the daily kcal target for an activity level and goal."""
    target = bmr * activity_factor
    if goal == "loss":
        target += LOSS_KCAL_ADJUSTMENT
    elif goal == "hypertrophy":
        target += HYPERTROPHY_KCAL_ADJUSTMENT
    return round_half_up(target)


def goal_from_weights(current_weight_kg: float, target_weight_kg: float) -> Goal:
    """Infer the goal from current and target weight."""
    if target_weight_kg < current_weight_kg:
        return "loss"
    if target_weight_kg > current_weight_kg:
        return "hypertrophy"
    return "maintenance"


def water_goal_ml(weight_kg: float) -> int:
    """Return the daily water goal in milliliters."""
    return round_half_up(weight_kg * WATER_ML_PER_KG)


def bmi(weight_kg: float, height_cm: float) -> float:
    """Return body mass index rounded to one decimal."""
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 1)


def exercise_calories(met: float, weight_kg: float, duration_minutes: float) -> int:
    """Return kcal burned for an activity of the given MET and duration."""
    return round_half_up(met * weight_kg * (duration_minutes / 60))


def body_ratio(numerator: float | None, denominator: float | None) -> float | None:
    """Return a two-decimal ratio, or None when a side is missing."""
    if not numerator or not denominator:
        return None
    return round(numerator / denominator, 2)


def level_from_xp(total_xp: int) -> int:
    """Return the level reached with ``total_xp`` experience points."""
    return max(total_xp, 0) // LEVEL_XP_STEP + 1


def level_progress(total_xp: int) -> tuple[int, int]:
    """Return XP earned within the current level and XP left to the next one."""
    into_level = max(total_xp, 0) % LEVEL_XP_STEP
    return into_level, LEVEL_XP_STEP - into_level

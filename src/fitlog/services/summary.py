"""Daily summary calculations."""

from dataclasses import replace
from datetime import date

from fitlog.domain.logs import DayLog, DaySummary, Meal
from fitlog.services.metrics import round_half_up


def recompute_summary(meals: list[Meal], water_ml: int) -> DaySummary:
    """Return the summary derived from a day's meals and water intake."""
    total_kcal = 0.0
    total_protein = 0.0
    for meal in meals:
        for item in meal.items:
            total_kcal += item.macros.kcal
            total_protein += item.macros.p
    return DaySummary(
        total_kcal=round_half_up(total_kcal),
        total_protein=round_half_up(total_protein),
        water_intake_ml=water_ml,
    )


def apply_water_delta(current_ml: int, delta_ml: int) -> int:
    """Apply a water delta, never going below zero."""
    return max(0, current_ml + delta_ml)


def empty_day(day: date) -> DayLog:
    """Return a day log with no records."""
    return DayLog(day=day)


def with_meals(day_log: DayLog, meals: list[Meal]) -> DayLog:
    """Return a copy of the day with new meals and a fresh summary."""
    return replace(
        day_log,
        meals=meals,
        summary=recompute_summary(meals, day_log.summary.water_intake_ml),
    )


def with_water_delta(day_log: DayLog, delta_ml: int) -> DayLog:
    """Return a copy of the day with adjusted water and a fresh summary."""
    water = apply_water_delta(day_log.summary.water_intake_ml, delta_ml)
    return replace(day_log, summary=recompute_summary(day_log.meals, water))

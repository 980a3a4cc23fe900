"""Streak calculations over the day log history."""

from collections.abc import Mapping
from datetime import date, timedelta

from fitlog.domain.gamification import StreakResult
from fitlog.domain.logs import DayLog

STREAK_WINDOW_DAYS = 365


def compute_streaks(
    day_logs: Mapping[date, DayLog], water_goal_ml: int, today: date
) -> StreakResult:
    """Return logging and water streaks ending today, plus the total log count.

    A day counts towards the logging streak when it has at least one meal or
    exercise. Today never breaks a streak: if it is empty, or short on water, the
    walk continues from yesterday. Streaks are capped at ``STREAK_WINDOW_DAYS``.
    """
    total_logged = sum(
        len(day_log.meals) + len(day_log.exercises) for day_log in day_logs.values()
    )

    logging_streak = 0
    water_streak = 0
    water_running = True
    for offset in range(STREAK_WINDOW_DAYS):
        is_today = offset == 0
        day_log = day_logs.get(today - timedelta(days=offset))
        if day_log is None or not day_log.has_activity:
            if is_today:
                continue
            break

        logging_streak += 1
        if not water_running:
            continue
        if day_log.summary.water_intake_ml >= water_goal_ml:
            water_streak += 1
        elif not is_today:
            water_running = False

    return StreakResult(
        logging_streak=logging_streak,
        water_streak=water_streak,
        total_logged_count=total_logged,
    )

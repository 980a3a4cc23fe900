"""XP ledger and level progression."""

import logging
from dataclasses import replace
from datetime import datetime

from fitlog.domain.gamification import AwardResult, MetricsSnapshot, Stats, StreakResult
from fitlog.services.badges import default_badges, evaluate_badges
from fitlog.services.metrics import level_from_xp

ONBOARDING_XP = 50
BIOMETRIC_ENTRY_XP = 30
MEAL_XP = 0
WATER_XP = 0
EXERCISE_XP = 0

_logger = logging.getLogger(__name__)


def initial_stats() -> Stats:
    """Return stats for a brand new user."""
    return Stats(badges=default_badges())


def snapshot_from_stats(stats: Stats) -> MetricsSnapshot:
    """Build the badge metrics snapshot for the current stats."""
    return MetricsSnapshot(
        logging_streak=stats.streak_days,
        water_streak=stats.water_streak_days,
        total_logs=stats.total_logs_count,
        level=stats.current_level,
    )


def apply_streaks(stats: Stats, streaks: StreakResult) -> Stats:
    """Return stats carrying freshly computed streak counters."""
    return replace(
        stats,
        streak_days=streaks.logging_streak,
        water_streak_days=streaks.water_streak,
        total_logs_count=streaks.total_logged_count,
    )


def award_xp(stats: Stats, amount: int, now: datetime) -> AwardResult:
    """Add XP, update the level and run a single badge pass.

    Badge XP earned during the pass is added and the level recomputed, but it is
    not fed into another pass: a level reached through badge XP is picked up by
    the next award.
    """
    if amount < 0:
        raise ValueError("XP amount must be non-negative")

    starting_level = stats.current_level
    total_xp = stats.total_xp + amount
    leveled = replace(stats, total_xp=total_xp, current_level=level_from_xp(total_xp))

    evaluation = evaluate_badges(leveled.badges, snapshot_from_stats(leveled), now)
    total_xp += evaluation.xp_gained
    final = replace(
        leveled,
        badges=evaluation.badges,
        total_xp=total_xp,
        current_level=level_from_xp(total_xp),
    )
    if final.current_level > starting_level:
        _logger.info(
            "Level up: %s -> %s (xp=%s)",
            starting_level,
            final.current_level,
            final.total_xp,
        )
    return AwardResult(
        stats=final,
        badge_xp=evaluation.xp_gained,
        unlocked=evaluation.unlocked,
        leveled_up=final.current_level > starting_level,
    )

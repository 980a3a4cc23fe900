"""Domain models for XP, levels, badges and challenges."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

BadgeMetric = Literal["logging_streak", "water_streak", "total_logs", "level"]


@dataclass(frozen=True)
class Tier:
    """Single unlockable step of a badge."""

    level: int
    target: int
    xp_reward: int
    unlocked: bool = False
    unlocked_at: datetime | None = None


@dataclass(frozen=True)
class Badge:
    """Badge tracking one metric through ordered tiers."""

    id: str
    category: str
    name: str
    description_template: str
    icon: str
    metric: BadgeMetric
    tiers: list[Tier]
    current_value: int = 0


@dataclass(frozen=True)
class Challenge:
    """User-defined goal that pays a fixed XP reward once."""

    id: str
    title: str
    xp_reward: int
    completed: bool = False


@dataclass(frozen=True)
class Stats:
    """Gamification state for the user."""

    total_xp: int = 0
    current_level: int = 1
    badges: list[Badge] = field(default_factory=list)
    custom_challenges: list[Challenge] = field(default_factory=list)
    streak_days: int = 0
    water_streak_days: int = 0
    total_logs_count: int = 0


@dataclass(frozen=True)
class StreakResult:
    """Streak metrics derived from the log history."""

    logging_streak: int
    water_streak: int
    total_logged_count: int


@dataclass(frozen=True)
class MetricsSnapshot:
    """Values of every metric a badge can track."""

    logging_streak: int
    water_streak: int
    total_logs: int
    level: int

    def value_for(self, metric: BadgeMetric) -> int:
        """Return the value tracked by a badge metric."""
        return int(getattr(self, metric))


@dataclass(frozen=True)
class UnlockedTier:
    """Tier unlocked during a badge evaluation."""

    badge_id: str
    badge_name: str
    tier_level: int
    target: int
    xp_reward: int


@dataclass(frozen=True)
class BadgeEvaluation:
    """Outcome of one badge evaluation pass."""

    badges: list[Badge]
    xp_gained: int
    unlocked: list[UnlockedTier]


@dataclass(frozen=True)
class AwardResult:
    """Outcome of an XP award, including badge XP earned on the way."""

    stats: Stats
    badge_xp: int
    unlocked: list[UnlockedTier]
    leveled_up: bool

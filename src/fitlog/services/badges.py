"""Badge catalog and tier progression."""

import logging
from dataclasses import dataclass, replace
from datetime import datetime

from fitlog.domain.gamification import (
    Badge,
    BadgeEvaluation,
    BadgeMetric,
    MetricsSnapshot,
    Tier,
    UnlockedTier,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BadgeDefinition:
    """Static description of a badge and its tier ladder."""

    id: str
    category: str
    name: str
    description_template: str
    icon: str
    metric: BadgeMetric
    targets: tuple[int, ...]
    base_xp: int

    def build(self) -> Badge:
        """Return a fresh badge with every tier locked."""
        return Badge(
            id=self.id,
            category=self.category,
            name=self.name,
            description_template=self.description_template,
            icon=self.icon,
            metric=self.metric,
            tiers=[
                Tier(level=index, target=target, xp_reward=self.base_xp * index)
                for index, target in enumerate(self.targets, start=1)
            ],
            current_value=1 if self.metric == "level" else 0,
        )


BADGE_CATALOG: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        id="water_streak",
        category="hydration",
        name="Water Master",
        description_template="Hit your water goal {target} days in a row.",
        icon="💧",
        metric="water_streak",
        targets=(3, 7, 15, 30, 365),
        base_xp=50,
    ),
    BadgeDefinition(
        id="consistency_streak",
        category="consistency",
        name="Consistency Fire",
        description_template="Log something {target} days in a row.",
        icon="🔥",
        metric="logging_streak",
        targets=(3, 7, 15, 30, 365),
        base_xp=100,
    ),
    BadgeDefinition(
        id="total_logs",
        category="diet",
        name="Iron Journal",
        description_template="Record {target} meals or workouts in total.",
        icon="📝",
        metric="total_logs",
        targets=(10, 50, 100, 500, 1000),
        base_xp=20,
    ),
    BadgeDefinition(
        id="level_climber",
        category="consistency",
        name="Steady Climb",
        description_template="Reach user level {target}.",
        icon="👑",
        metric="level",
        targets=(5, 10, 20, 50, 100),
        base_xp=200,
    ),
)


def default_badges() -> list[Badge]:
    """Return the catalog with every tier locked."""
    return [definition.build() for definition in BADGE_CATALOG]


def sync_catalog(badges: list[Badge]) -> list[Badge]:
    """Append catalog badges missing from a stored list, keeping existing state."""
    known = {badge.id for badge in badges}
    missing = [
        definition.build()
        for definition in BADGE_CATALOG
        if definition.id not in known
    ]
    return [*badges, *missing]


def evaluate_badges(
    badges: list[Badge], snapshot: MetricsSnapshot, now: datetime
) -> BadgeEvaluation:
    """Unlock every tier whose target is met and report the XP earned.

    Tiers are checked in ascending target order and the walk stops at the first
    tier that stays locked, so a tier never unlocks ahead of a lower one. Already
    unlocked tiers are left untouched, which makes repeated calls idempotent.
    """
    updated_badges: list[Badge] = []
    unlocked: list[UnlockedTier] = []
    xp_gained = 0
    for badge in badges:
        value = snapshot.value_for(badge.metric)
        tiers: list[Tier] = []
        blocked = False
        for tier in sorted(badge.tiers, key=lambda item: item.target):
            if tier.unlocked or blocked:
                tiers.append(tier)
                continue
            if value < tier.target:
                blocked = True
                tiers.append(tier)
                continue
            tiers.append(replace(tier, unlocked=True, unlocked_at=now))
            xp_gained += tier.xp_reward
            unlocked.append(
                UnlockedTier(
                    badge_id=badge.id,
                    badge_name=badge.name,
                    tier_level=tier.level,
                    target=tier.target,
                    xp_reward=tier.xp_reward,
                )
            )
            _logger.info(
                "Badge tier unlocked: badge=%s tier=%s xp=%s",
                badge.id,
                tier.level,
                tier.xp_reward,
            )
        updated_badges.append(replace(badge, current_value=value, tiers=tiers))
    return BadgeEvaluation(
        badges=updated_badges, xp_gained=xp_gained, unlocked=unlocked
    )

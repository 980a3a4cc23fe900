"""Custom challenge ledger."""

from dataclasses import replace
from datetime import datetime
from uuid import uuid4

from fitlog.domain.gamification import AwardResult, Challenge, Stats
from fitlog.services.ledger import award_xp


def add_challenge(stats: Stats, title: str, xp_reward: int) -> tuple[Stats, Challenge]:
    """Append a new open challenge."""
    if xp_reward < 0:
        raise ValueError("Challenge XP reward must be non-negative")
    challenge = Challenge(id=uuid4().hex[:12], title=title, xp_reward=xp_reward)
    updated = replace(stats, custom_challenges=[*stats.custom_challenges, challenge])
    return updated, challenge


def complete_challenge(
    stats: Stats, challenge_id: str, now: datetime
) -> AwardResult | None:
    """Mark a challenge as completed and award its XP.

    Returns None when the challenge is unknown or already completed.
    """
    challenge = find_challenge(stats, challenge_id)
    if challenge is None or challenge.completed:
        return None
    challenges = [
        replace(item, completed=True) if item.id == challenge_id else item
        for item in stats.custom_challenges
    ]
    return award_xp(
        replace(stats, custom_challenges=challenges), challenge.xp_reward, now
    )


def delete_challenge(stats: Stats, challenge_id: str) -> Stats:
    """Remove a challenge; XP already awarded is kept."""
    return replace(
        stats,
        custom_challenges=[
            item for item in stats.custom_challenges if item.id != challenge_id
        ],
    )


def find_challenge(stats: Stats, challenge_id: str) -> Challenge | None:
    """Return a challenge by id, if present."""
    for challenge in stats.custom_challenges:
        if challenge.id == challenge_id:
            return challenge
    return None

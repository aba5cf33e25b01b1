"""Badge evaluation for finished rounds."""

from __future__ import annotations

from collections.abc import Iterable

from blitz_app.core.models import Badge, DifficultyLevel, RoundSummary

_SCORE_MILESTONES = ((10, Badge.SCORE_10), (20, Badge.SCORE_20), (30, Badge.SCORE_30))
_STREAK_MILESTONES = ((5, Badge.STREAK_5), (10, Badge.STREAK_10))


def earned_badges(
    summary: RoundSummary, played_levels: Iterable[DifficultyLevel] = ()
) -> tuple[Badge, ...]:
    """Return the badges earned by ``summary`` in display order."""
    badges: list[Badge] = []
    if summary.score > 0:
        badges.append(Badge.FIRST_GAME)

    badges.extend(badge for threshold, badge in _SCORE_MILESTONES if summary.score >= threshold)
    badges.extend(
        badge for threshold, badge in _STREAK_MILESTONES if summary.best_streak >= threshold
    )

    if set(DifficultyLevel) <= {summary.level, *played_levels}:
        badges.append(Badge.ALL_LEVELS)
    return tuple(badges)

from datetime import datetime, timedelta

import pytest

from blitz_app.core.models import DifficultyLevel, RoundSummary
from blitz_app.core.services.leaderboard import Leaderboard


def _summary(score, level=DifficultyLevel.UP_TO_10, when=None):
    return RoundSummary(
        score=score,
        level=level,
        questions_answered=score + 2,
        correct_answers=score,
        timestamp=when or datetime.now(),
    )


def test_top_scores_sorted_and_limited():
    board = Leaderboard()
    for score in (3, 12, 7, 12, 1):
        board.publish_score(_summary(score), "player")
    board.publish_score(_summary(40, level=DifficultyLevel.UP_TO_20), "other")

    top = board.top_scores(DifficultyLevel.UP_TO_10, limit=3)
    assert [entry.score for entry in top] == [12, 12, 7]
    assert all(entry.level is DifficultyLevel.UP_TO_10 for entry in top)


def test_ties_keep_earlier_entry_first():
    board = Leaderboard()
    now = datetime.now()
    board.publish_score(_summary(5, when=now), "late")
    board.publish_score(_summary(5, when=now - timedelta(hours=1)), "early")
    assert [e.username for e in board.top_scores(DifficultyLevel.UP_TO_10)] == ["early", "late"]


def test_publish_trims_name_and_rejects_blank():
    board = Leaderboard()
    entry = board.publish_score(_summary(2), "  Grace  ")
    assert entry.username == "Grace"
    assert entry.accuracy == 50
    with pytest.raises(ValueError):
        board.publish_score(_summary(2), "   ")


def test_add_entry_validates_counts():
    board = Leaderboard()
    with pytest.raises(ValueError):
        board.add_entry("x", score=-1, level=DifficultyLevel.UP_TO_10)
    with pytest.raises(ValueError):
        board.add_entry("x", score=1, level=DifficultyLevel.UP_TO_10, questions_answered=1, correct_answers=2)


def test_global_leaderboard_covers_every_level():
    board = Leaderboard()
    board.publish_score(_summary(4, level=DifficultyLevel.UP_TO_15), "p")
    levels = board.global_leaderboard()
    assert set(levels) == set(DifficultyLevel)
    assert [e.score for e in levels[DifficultyLevel.UP_TO_15]] == [4]
    assert levels[DifficultyLevel.UP_TO_10] == []

    board.clear()
    assert board.top_scores(DifficultyLevel.UP_TO_15) == []

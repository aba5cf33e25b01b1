"""Service holding the shared ranked leaderboard."""

from __future__ import annotations

from datetime import datetime
from threading import Lock
from uuid import uuid4

from blitz_app.constants.game_constants import LEADERBOARD_LIMIT
from blitz_app.core.models import DifficultyLevel, LeaderboardEntry, RoundSummary


class LeaderboardError(Exception):
    """Raised when a leaderboard cannot be reached or returns an error."""


class Leaderboard:
    """Thread-safe table of published scores, ranked per level."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._entries: list[LeaderboardEntry] = []

    def publish_score(self, summary: RoundSummary, display_name: str) -> LeaderboardEntry:
        """Add a finished round under ``display_name``."""
        return self.add_entry(
            username=display_name,
            score=summary.score,
            level=summary.level,
            questions_answered=summary.questions_answered,
            correct_answers=summary.correct_answers,
            date=summary.timestamp,
        )

    def add_entry(
        self,
        username: str,
        score: int,
        level: DifficultyLevel,
        questions_answered: int = 0,
        correct_answers: int = 0,
        date: datetime | None = None,
    ) -> LeaderboardEntry:
        """Validate and store a single score; raises ``ValueError`` on bad input."""
        cleaned_name = username.strip()
        if not cleaned_name:
            raise ValueError("Cannot publish a score without a username.")
        if score < 0:
            raise ValueError("Score must not be negative.")
        if not 0 <= correct_answers <= questions_answered:
            raise ValueError("Correct answers must be between 0 and the questions answered.")

        entry = LeaderboardEntry(
            id=uuid4().hex,
            username=cleaned_name,
            score=score,
            level=level,
            date=date or datetime.now(),
            questions_answered=questions_answered,
            correct_answers=correct_answers,
        )
        with self._lock:
            self._entries.append(entry)
        return entry

    def top_scores(
        self, level: DifficultyLevel, limit: int = LEADERBOARD_LIMIT
    ) -> list[LeaderboardEntry]:
        """Return the best ``limit`` entries for ``level``, highest score first."""
        with self._lock:
            entries = [entry for entry in self._entries if entry.level == level]
        ranked = sorted(entries, key=lambda e: (-e.score, e.date))
        return ranked[: max(0, limit)]

    def global_leaderboard(
        self, limit: int = LEADERBOARD_LIMIT
    ) -> dict[DifficultyLevel, list[LeaderboardEntry]]:
        """Return the top entries of every level."""
        return {level: self.top_scores(level, limit) for level in DifficultyLevel}

    def clear(self) -> None:
        """Remove all published scores."""
        with self._lock:
            self._entries.clear()

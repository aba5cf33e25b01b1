"""Local history of finished rounds, kept in a JSON file."""

from __future__ import annotations

from datetime import datetime, time
import json
import logging
from pathlib import Path
from uuid import uuid4

from blitz_app.constants.game_constants import RECENT_SCORES_LIMIT
from blitz_app.core.models import DifficultyLevel, RoundSummary, StoredScore

logger = logging.getLogger(__name__)


class ScoreStoreError(Exception):
    """Raised when the score file cannot be read or written."""


class LocalScoreStore:
    """Stores finished rounds and answers best-score queries.

    With ``file_path=None`` the store only keeps scores in memory.
    """

    def __init__(self, file_path: Path | None = None) -> None:
        self._file_path = file_path
        self._scores: list[StoredScore] = []
        if file_path is not None and file_path.exists():
            self._scores = _load_scores(file_path)
            logger.info("Loaded %d score(s) from %s", len(self._scores), file_path)

    def save(self, summary: RoundSummary) -> StoredScore:
        """Record a finished round and rewrite the score file."""
        stored = StoredScore(
            id=uuid4().hex,
            score=summary.score,
            level=summary.level,
            date=summary.timestamp,
            questions_answered=summary.questions_answered,
            correct_answers=summary.correct_answers,
        )
        self._scores.append(stored)
        if self._file_path is not None:
            _write_scores(self._file_path, self._scores)
        return stored

    def best_score(self, level: DifficultyLevel, today: bool = False) -> StoredScore | None:
        """Return the highest score for ``level``, limited to today when ``today`` is set."""
        candidates = self._scores_since(_start_of_today()) if today else self._scores
        ranked = _rank_by_score(score for score in candidates if score.level == level)
        return ranked[0] if ranked else None

    def best_scores(self, today: bool = False) -> dict[DifficultyLevel, StoredScore | None]:
        """Return the best score of every level."""
        return {level: self.best_score(level, today=today) for level in DifficultyLevel}

    def is_new_high_score(self, score: int, level: DifficultyLevel, today: bool = False) -> bool:
        """Return whether ``score`` beats the best so far (or nothing was played yet)."""
        best = self.best_score(level, today=today)
        if best is None:
            return True
        return score > best.score

    def scores_for_level(self, level: DifficultyLevel) -> list[StoredScore]:
        """Return every score of ``level``, highest first."""
        return _rank_by_score(score for score in self._scores if score.level == level)

    def recent_scores(self, limit: int = RECENT_SCORES_LIMIT) -> list[StoredScore]:
        """Return the latest ``limit`` rounds, newest first."""
        ordered = sorted(self._scores, key=lambda score: score.date, reverse=True)
        return ordered[:limit]

    def played_levels(self) -> set[DifficultyLevel]:
        """Return the levels with at least one stored round."""
        return {score.level for score in self._scores}

    def _scores_since(self, moment: datetime) -> list[StoredScore]:
        return [score for score in self._scores if score.date >= moment]


def _start_of_today() -> datetime:
    return datetime.combine(datetime.now().date(), time.min)


def _rank_by_score(scores) -> list[StoredScore]:
    # Highest first; the earlier round wins a tie.
    return sorted(scores, key=lambda score: (-score.score, score.date))


def _load_scores(file_path: Path) -> list[StoredScore]:
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ScoreStoreError(f"Cannot read scores from {file_path}: {exc}") from exc
    if not isinstance(raw, list):
        raise ScoreStoreError(f"Score file {file_path} must contain a JSON list.")

    scores: list[StoredScore] = []
    for item in raw:
        try:
            scores.append(
                StoredScore(
                    id=str(item["id"]),
                    score=int(item["score"]),
                    level=DifficultyLevel(str(item["level"])),
                    date=datetime.fromisoformat(item["date"]),
                    questions_answered=int(item["questions_answered"]),
                    correct_answers=int(item["correct_answers"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ScoreStoreError(f"Malformed score record in {file_path}: {item!r}") from exc
    return scores


def _write_scores(file_path: Path, scores: list[StoredScore]) -> None:
    document = [
        {
            "id": score.id,
            "score": score.score,
            "level": score.level.value,
            "date": score.date.isoformat(),
            "questions_answered": score.questions_answered,
            "correct_answers": score.correct_answers,
        }
        for score in scores
    ]
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    except OSError as exc:
        raise ScoreStoreError(f"Cannot write scores to {file_path}: {exc}") from exc

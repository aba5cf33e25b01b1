"""Domain models for the MathBlitz game."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto

from blitz_app.constants.game_constants import (
    LOW_TIME_THRESHOLD_SECONDS,
    ROUND_DURATION_SECONDS,
)


def as_local_time(moment: datetime) -> datetime:
    """Return ``moment`` as naive local time, the convention for every stored date."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def accuracy_percentage(correct_answers: int, questions_answered: int) -> float:
    """Share of correct answers in percent, or 0 when nothing was answered."""
    if questions_answered <= 0:
        return 0.0
    return correct_answers / questions_answered * 100


class DifficultyLevel(str, Enum):
    """Playable levels; the value is the largest operand of the level."""

    UP_TO_10 = "10"
    UP_TO_12 = "12"
    UP_TO_15 = "15"
    UP_TO_20 = "20"

    @property
    def max_number(self) -> int:
        return int(self.value)

    @property
    def display_name(self) -> str:
        return f"Up to {self.value}"

    @property
    def short_name(self) -> str:
        return f"×{self.value}"

    @property
    def difficulty(self) -> str:
        return _DIFFICULTY_LABELS[self]


_DIFFICULTY_LABELS = {
    DifficultyLevel.UP_TO_10: "Easy",
    DifficultyLevel.UP_TO_12: "Medium",
    DifficultyLevel.UP_TO_15: "Hard",
    DifficultyLevel.UP_TO_20: "Expert",
}


class GameState(Enum):
    """Lifecycle of a single round."""

    READY = auto()
    PLAYING = auto()
    FINISHED = auto()


@dataclass(frozen=True, slots=True)
class Question:
    """Multiplication question with exactly four choices."""

    multiplicand: int
    multiplier: int
    choices: tuple[int, ...]
    correct_answer_index: int

    @property
    def correct_answer(self) -> int:
        return self.multiplicand * self.multiplier

    @property
    def question_text(self) -> str:
        return f"{self.multiplicand} × {self.multiplier}"

    def is_correct(self, choice_index: int) -> bool:
        return choice_index == self.correct_answer_index


@dataclass(frozen=True, slots=True)
class RoundState:
    """Counters of one round. Transitions live in ``services.scoring``."""

    state: GameState = GameState.READY
    score: int = 0
    time_remaining: float = ROUND_DURATION_SECONDS
    questions_answered: int = 0
    correct_answers: int = 0
    current_streak: int = 0
    best_streak: int = 0


@dataclass(frozen=True, slots=True)
class RoundSnapshot:
    """Everything a view binds to, emitted after each controller transition."""

    round_state: RoundState
    question: Question
    level: DifficultyLevel
    round_duration: float = ROUND_DURATION_SECONDS
    selected_answer_index: int | None = None
    is_answer_locked: bool = False
    show_correct_feedback: bool = False
    show_wrong_feedback: bool = False
    shake_count: int = 0

    @property
    def state(self) -> GameState:
        return self.round_state.state

    @property
    def score(self) -> int:
        return self.round_state.score

    @property
    def time_remaining(self) -> float:
        return self.round_state.time_remaining

    @property
    def formatted_time(self) -> str:
        whole_seconds = int(self.round_state.time_remaining)
        return f"{whole_seconds // 60}:{whole_seconds % 60:02d}"

    @property
    def timer_progress(self) -> float:
        if self.round_duration <= 0:
            return 0.0
        return self.round_state.time_remaining / self.round_duration

    @property
    def is_time_low(self) -> bool:
        return self.round_state.time_remaining <= LOW_TIME_THRESHOLD_SECONDS

    @property
    def accuracy(self) -> float:
        return accuracy_percentage(
            self.round_state.correct_answers, self.round_state.questions_answered
        )


@dataclass(frozen=True, slots=True)
class RoundSummary:
    """Finished-round figures handed to persistence and the leaderboard.

    ``timestamp`` is naive local time; aware values are converted on creation.
    """

    score: int
    level: DifficultyLevel
    questions_answered: int
    correct_answers: int
    best_streak: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", as_local_time(self.timestamp))

    @property
    def accuracy(self) -> float:
        return accuracy_percentage(self.correct_answers, self.questions_answered)


class Badge(Enum):
    """Achievements awarded on the results screen."""

    FIRST_GAME = ("First Steps", "Finish your first game")
    SCORE_10 = ("Double Digits", "Score 10+ points in one game")
    SCORE_20 = ("Math Whiz", "Score 20+ points in one game")
    SCORE_30 = ("Math Master", "Score 30+ points in one game")
    STREAK_5 = ("On Fire", "Get 5 correct answers in a row")
    STREAK_10 = ("Unstoppable", "Get 10 correct answers in a row")
    ALL_LEVELS = ("All-Rounder", "Play every difficulty level")

    @property
    def title(self) -> str:
        return self.value[0]

    @property
    def description(self) -> str:
        return self.value[1]


@dataclass(frozen=True, slots=True)
class RoundResult:
    """Outcome of a finished round as shown on the results screen."""

    summary: RoundSummary
    is_new_best_today: bool
    is_new_best_all_time: bool
    badges: tuple[Badge, ...] = ()


@dataclass(slots=True)
class StoredScore:
    """A finished round kept in the local score history."""

    id: str
    score: int
    level: DifficultyLevel
    date: datetime
    questions_answered: int
    correct_answers: int

    def __post_init__(self) -> None:
        self.date = as_local_time(self.date)

    @property
    def accuracy(self) -> float:
        return accuracy_percentage(self.correct_answers, self.questions_answered)


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    """Published score as returned by the shared leaderboard."""

    id: str
    username: str
    score: int
    level: DifficultyLevel
    date: datetime
    questions_answered: int = 0
    correct_answers: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", as_local_time(self.date))

    @property
    def accuracy(self) -> float:
        return accuracy_percentage(self.correct_answers, self.questions_answered)

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "username": self.username,
            "score": self.score,
            "level": self.level.value,
            "date": self.date.isoformat(),
            "questions_answered": self.questions_answered,
            "correct_answers": self.correct_answers,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "LeaderboardEntry":
        """Build an entry from its JSON form; raises ``ValueError`` if malformed."""
        try:
            return cls(
                id=str(payload["id"]),
                username=str(payload["username"]),
                score=int(payload["score"]),
                level=DifficultyLevel(str(payload["level"])),
                date=datetime.fromisoformat(str(payload["date"])),
                questions_answered=int(payload.get("questions_answered") or 0),
                correct_answers=int(payload.get("correct_answers") or 0),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed leaderboard entry: {payload!r}") from exc

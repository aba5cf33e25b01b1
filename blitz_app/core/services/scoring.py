"""Scoring transitions over ``RoundState``.

Every function returns a new state and leaves its argument untouched.
"""

from __future__ import annotations

from dataclasses import replace

from blitz_app.constants.game_constants import ROUND_DURATION_SECONDS
from blitz_app.core.models import GameState, RoundState, accuracy_percentage


def answer_correctly(state: RoundState) -> RoundState:
    """Score a correct answer and extend the streak."""
    current_streak = state.current_streak + 1
    return replace(
        state,
        score=state.score + 1,
        questions_answered=state.questions_answered + 1,
        correct_answers=state.correct_answers + 1,
        current_streak=current_streak,
        best_streak=max(state.best_streak, current_streak),
    )


def answer_incorrectly(state: RoundState) -> RoundState:
    """Penalize a wrong answer and break the streak."""
    # Score never drops below zero; the best streak is kept.
    return replace(
        state,
        score=max(0, state.score - 1),
        questions_answered=state.questions_answered + 1,
        current_streak=0,
    )


def accuracy(state: RoundState) -> float:
    """Return the share of correct answers in percent."""
    return accuracy_percentage(state.correct_answers, state.questions_answered)


def reset(duration: float = ROUND_DURATION_SECONDS) -> RoundState:
    """Return the initial state of a round lasting ``duration`` seconds."""
    return RoundState(state=GameState.READY, time_remaining=duration)


def tick(state: RoundState, elapsed: float) -> RoundState:
    """Count ``elapsed`` seconds off the clock, clamping at zero."""
    remaining = round(state.time_remaining - elapsed, 3)
    return replace(state, time_remaining=max(0.0, remaining))

"""Controller running a single timed round on the Qt event loop."""

from __future__ import annotations

from dataclasses import replace
import logging

from PySide6.QtCore import QObject, QTimer, Signal

from blitz_app.constants.game_constants import (
    ANSWER_FEEDBACK_DELAY_MS,
    FEEDBACK_FLASH_MS,
    ROUND_DURATION_SECONDS,
    TICK_INTERVAL_MS,
)
from blitz_app.core.badges import earned_badges
from blitz_app.core.models import (
    DifficultyLevel,
    GameState,
    Question,
    RoundResult,
    RoundSnapshot,
    RoundState,
    RoundSummary,
)
from blitz_app.core.question_generator import QuestionGenerator
from blitz_app.core.services import scoring
from blitz_app.core.services.leaderboard import Leaderboard, LeaderboardError
from blitz_app.core.services.leaderboard_client import RemoteLeaderboard
from blitz_app.core.services.profile_store import ProfileStore
from blitz_app.core.services.score_store import LocalScoreStore, ScoreStoreError

logger = logging.getLogger(__name__)


class GameRoundController(QObject):
    """Runs a round: countdown, answer submission with lockout, result recording.

    The countdown and the deferred advance to the next question are ``QTimer``
    timeouts, so they are serialized with ``submit_answer`` calls on the same
    event loop. Every start, reset and finish bumps an epoch; a deferred advance
    only runs when the epoch it was scheduled in is still current.
    """

    snapshot_changed = Signal(object)
    round_finished = Signal(object)

    def __init__(
        self,
        level: DifficultyLevel,
        generator: QuestionGenerator | None = None,
        score_store: LocalScoreStore | None = None,
        leaderboard: Leaderboard | RemoteLeaderboard | None = None,
        profile: ProfileStore | None = None,
        round_duration: float = ROUND_DURATION_SECONDS,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        answer_delay_ms: int = ANSWER_FEEDBACK_DELAY_MS,
        feedback_flash_ms: int = FEEDBACK_FLASH_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._level = level
        self._generator = generator or QuestionGenerator.for_level(level)
        self._score_store = score_store
        self._leaderboard = leaderboard
        self._profile = profile
        self._round_duration = round_duration
        self._tick_seconds = tick_interval_ms / 1000

        self._round_state: RoundState = scoring.reset(round_duration)
        self._question: Question = self._generator.generate()
        self._selected_index: int | None = None
        self._answer_locked: bool = False
        self._show_correct: bool = False
        self._show_wrong: bool = False
        self._shake_count: int = 0
        self._epoch: int = 0
        self._pending_epoch: int | None = None
        self._last_result: RoundResult | None = None

        self._countdown_timer = QTimer(self)
        self._countdown_timer.setInterval(tick_interval_ms)
        self._countdown_timer.timeout.connect(self.tick)

        self._advance_timer = QTimer(self)
        self._advance_timer.setSingleShot(True)
        self._advance_timer.setInterval(answer_delay_ms)
        self._advance_timer.timeout.connect(self._advance_to_next_question)

        self._feedback_timer = QTimer(self)
        self._feedback_timer.setSingleShot(True)
        self._feedback_timer.setInterval(feedback_flash_ms)
        self._feedback_timer.timeout.connect(self._clear_feedback)

    # --- Observable state ---

    @property
    def level(self) -> DifficultyLevel:
        return self._level

    @property
    def state(self) -> GameState:
        return self._round_state.state

    @property
    def round_state(self) -> RoundState:
        return self._round_state

    @property
    def current_question(self) -> Question:
        return self._question

    @property
    def selected_answer_index(self) -> int | None:
        return self._selected_index

    @property
    def is_answer_locked(self) -> bool:
        return self._answer_locked

    @property
    def is_countdown_running(self) -> bool:
        return self._countdown_timer.isActive()

    @property
    def last_result(self) -> RoundResult | None:
        return self._last_result

    def snapshot(self) -> RoundSnapshot:
        return RoundSnapshot(
            round_state=self._round_state,
            question=self._question,
            level=self._level,
            round_duration=self._round_duration,
            selected_answer_index=self._selected_index,
            is_answer_locked=self._answer_locked,
            show_correct_feedback=self._show_correct,
            show_wrong_feedback=self._show_wrong,
            shake_count=self._shake_count,
        )

    # --- Game control ---

    def start_game(self) -> None:
        self._reset_round()
        self._round_state = replace(self._round_state, state=GameState.PLAYING)
        self._countdown_timer.start()
        logger.info("Round started (level %s)", self._level.value)
        self._emit_snapshot()

    def reset_game(self) -> None:
        self._reset_round()
        self._emit_snapshot()

    def submit_answer(self, choice_index: int) -> bool:
        """Score ``choice_index`` for the active question.

        Returns ``False`` without touching any state when no round is being
        played, a previous answer is still showing feedback, or the index does
        not address a choice.
        """
        if self._round_state.state is not GameState.PLAYING or self._answer_locked:
            return False
        if not 0 <= choice_index < len(self._question.choices):
            logger.debug("Ignoring out-of-range choice index %d", choice_index)
            return False

        self._answer_locked = True
        self._selected_index = choice_index
        if self._question.is_correct(choice_index):
            self._round_state = scoring.answer_correctly(self._round_state)
            self._show_correct, self._show_wrong = True, False
        else:
            self._round_state = scoring.answer_incorrectly(self._round_state)
            self._show_correct, self._show_wrong = False, True
            self._shake_count += 1
        logger.debug(
            "Answered %s with %d: %s",
            self._question.question_text,
            self._question.choices[choice_index],
            "correct" if self._show_correct else "wrong",
        )

        self._feedback_timer.start()
        self._pending_epoch = self._epoch
        self._advance_timer.start()
        self._emit_snapshot()
        return True

    def tick(self, elapsed: float | None = None) -> None:
        """Count down by ``elapsed`` seconds (one tick interval by default)."""
        if self._round_state.state is not GameState.PLAYING:
            return
        step = self._tick_seconds if elapsed is None else elapsed
        self._round_state = scoring.tick(self._round_state, step)
        if self._round_state.time_remaining <= 0:
            self._finish_round()
        else:
            self._emit_snapshot()

    # --- Internals ---

    def _reset_round(self) -> None:
        self._stop_timers()
        self._epoch += 1
        self._round_state = scoring.reset(self._round_duration)
        self._selected_index = None
        self._answer_locked = False
        self._show_correct = False
        self._show_wrong = False
        self._shake_count = 0
        self._last_result = None
        self._generator.reset()
        self._question = self._generator.generate()

    def _stop_timers(self) -> None:
        self._countdown_timer.stop()
        self._advance_timer.stop()
        self._feedback_timer.stop()
        self._pending_epoch = None

    def _advance_to_next_question(self) -> None:
        if self._pending_epoch != self._epoch:
            return
        if self._round_state.state is not GameState.PLAYING:
            return
        self._pending_epoch = None
        self._selected_index = None
        self._answer_locked = False
        self._question = self._generator.generate()
        self._emit_snapshot()

    def _clear_feedback(self) -> None:
        self._show_correct = False
        self._show_wrong = False
        self._emit_snapshot()

    def _finish_round(self) -> None:
        self._stop_timers()
        self._epoch += 1
        self._show_correct = False
        self._show_wrong = False
        self._round_state = replace(self._round_state, time_remaining=0.0, state=GameState.FINISHED)

        summary = RoundSummary(
            score=self._round_state.score,
            level=self._level,
            questions_answered=self._round_state.questions_answered,
            correct_answers=self._round_state.correct_answers,
            best_streak=self._round_state.best_streak,
        )
        logger.info(
            "Round finished (level %s): score=%d answered=%d correct=%d",
            self._level.value,
            summary.score,
            summary.questions_answered,
            summary.correct_answers,
        )
        self._last_result = self._record_result(summary)
        self._emit_snapshot()
        self.round_finished.emit(self._last_result)

    def _record_result(self, summary: RoundSummary) -> RoundResult:
        is_new_best_today = True
        is_new_best_all_time = True
        played_levels = {summary.level}

        if self._score_store is not None:
            is_new_best_today = self._score_store.is_new_high_score(
                summary.score, summary.level, today=True
            )
            is_new_best_all_time = self._score_store.is_new_high_score(summary.score, summary.level)
            try:
                self._score_store.save(summary)
            except ScoreStoreError:
                logger.warning("Could not save the round locally", exc_info=True)
            played_levels |= self._score_store.played_levels()

        self._publish(summary)
        return RoundResult(
            summary=summary,
            is_new_best_today=is_new_best_today,
            is_new_best_all_time=is_new_best_all_time,
            badges=earned_badges(summary, played_levels),
        )

    def _publish(self, summary: RoundSummary) -> None:
        if self._leaderboard is None:
            return
        username = self._profile.username if self._profile is not None else ""
        if not username.strip():
            logger.info("No username set; skipping leaderboard publish")
            return
        try:
            self._leaderboard.publish_score(summary, username)
        except LeaderboardError:
            logger.warning("Could not publish the round to the leaderboard", exc_info=True)

    def _emit_snapshot(self) -> None:
        self.snapshot_changed.emit(self.snapshot())

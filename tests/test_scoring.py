from blitz_app.core.models import GameState, RoundState
from blitz_app.core.services import scoring


def test_answer_correctly_from_zero():
    state = scoring.answer_correctly(RoundState())
    assert (state.score, state.current_streak, state.best_streak) == (1, 1, 1)
    assert (state.questions_answered, state.correct_answers) == (1, 1)

    state = scoring.answer_correctly(state)
    assert (state.score, state.current_streak, state.best_streak) == (2, 2, 2)


def test_answer_incorrectly_floors_score_at_zero():
    state = scoring.answer_incorrectly(RoundState())
    assert state.score == 0
    assert state.questions_answered == 1
    assert state.correct_answers == 0

    state = scoring.answer_incorrectly(RoundState(score=1))
    assert state.score == 0


def test_answer_incorrectly_resets_streak_but_keeps_best():
    state = RoundState()
    for _ in range(3):
        state = scoring.answer_correctly(state)
    state = scoring.answer_incorrectly(state)
    assert state.current_streak == 0
    assert state.best_streak == 3
    assert state.score == 2


def test_transitions_do_not_mutate_input():
    original = RoundState(score=4)
    scoring.answer_correctly(original)
    scoring.answer_incorrectly(original)
    assert original == RoundState(score=4)


def test_accuracy():
    assert scoring.accuracy(RoundState()) == 0
    assert scoring.accuracy(RoundState(questions_answered=4, correct_answers=4)) == 100
    assert scoring.accuracy(RoundState(questions_answered=4, correct_answers=1)) == 25


def test_reset_returns_initial_state():
    state = scoring.reset()
    assert state.state is GameState.READY
    assert state.time_remaining == 60
    assert (state.score, state.questions_answered, state.correct_answers) == (0, 0, 0)
    assert (state.current_streak, state.best_streak) == (0, 0)


def test_tick_counts_down_and_clamps():
    state = RoundState(time_remaining=0.25)
    state = scoring.tick(state, 0.1)
    assert state.time_remaining == 0.15
    state = scoring.tick(state, 1.0)
    assert state.time_remaining == 0.0


def test_many_small_ticks_reach_zero_exactly():
    state = scoring.reset()
    for _ in range(600):
        state = scoring.tick(state, 0.1)
    assert state.time_remaining == 0.0

import random

import pytest

from blitz_app.core.models import DifficultyLevel
from blitz_app.core.question_generator import QuestionGenerator, swap_tens_and_ones


def _assert_valid(question, max_number):
    assert 1 <= question.multiplicand <= max_number
    assert 1 <= question.multiplier <= max_number
    assert len(question.choices) == 4
    assert len(set(question.choices)) == 4
    assert all(choice > 0 for choice in question.choices)
    product = question.multiplicand * question.multiplier
    assert question.choices.count(product) == 1
    assert question.choices[question.correct_answer_index] == product
    assert question.is_correct(question.correct_answer_index)


@pytest.mark.parametrize("level", list(DifficultyLevel))
def test_generated_questions_are_well_formed(level):
    generator = QuestionGenerator.for_level(level, rng=random.Random(level.max_number))
    for _ in range(300):
        question = generator.generate()
        _assert_valid(question, level.max_number)
        assert max(question.choices) <= level.max_number ** 2


@pytest.mark.parametrize("level", list(DifficultyLevel))
def test_no_unordered_pair_repeats_within_window(level):
    generator = QuestionGenerator.for_level(level, rng=random.Random(99))
    pairs = [frozenset((q.multiplicand, q.multiplier)) for q in (generator.generate() for _ in range(400))]
    for start in range(len(pairs) - 5):
        window = pairs[start:start + 6]
        assert len(set(window)) == len(window)


def test_history_is_bounded_to_five_pairs(seeded_generator):
    questions = [seeded_generator.generate() for _ in range(8)]
    expected = [(q.multiplicand, q.multiplier) for q in questions[-5:]]
    assert seeded_generator.recent_pairs() == expected


def test_reset_clears_history(seeded_generator):
    seeded_generator.generate()
    seeded_generator.generate()
    seeded_generator.reset()
    assert seeded_generator.recent_pairs() == []


def test_same_seed_gives_same_questions():
    first = QuestionGenerator(10, rng=random.Random(7))
    second = QuestionGenerator(10, rng=random.Random(7))
    assert [first.generate() for _ in range(20)] == [second.generate() for _ in range(20)]


def test_tiny_range_falls_back_instead_of_looping():
    generator = QuestionGenerator(1, rng=random.Random(0))
    for _ in range(3):
        question = generator.generate()
        assert (question.multiplicand, question.multiplier) == (1, 1)
        assert sorted(question.choices) == [1, 2, 3, 4]
        assert question.choices[question.correct_answer_index] == 1


def test_max_number_must_be_positive():
    with pytest.raises(ValueError):
        QuestionGenerator(0)


@pytest.mark.parametrize(
    ("number", "expected"),
    [(12, 21), (40, 4), (132, 123), (144, 144), (400, 400), (56, 65)],
)
def test_swap_tens_and_ones_keeps_hundreds(number, expected):
    assert swap_tens_and_ones(number) == expected


def test_question_text():
    generator = QuestionGenerator(10, rng=random.Random(3))
    question = generator.generate()
    assert question.question_text == f"{question.multiplicand} × {question.multiplier}"
    assert question.correct_answer == question.multiplicand * question.multiplier

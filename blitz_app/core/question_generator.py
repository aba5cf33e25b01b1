"""Multiplication question generator with plausible distractors."""

from __future__ import annotations

from collections import deque
import logging
import random

from blitz_app.constants.game_constants import (
    MAX_GENERATION_ATTEMPTS,
    NUMBER_OF_CHOICES,
    RECENT_QUESTION_WINDOW,
)
from blitz_app.core.models import DifficultyLevel, Question

logger = logging.getLogger(__name__)

_SMALL_OFFSETS = (-2, -1, 1, 2)


class QuestionGenerator:
    """Produces questions for one operand bound, avoiding recent repeats.

    Operand pairs are treated as unordered when checking the history, so
    ``3 × 7`` and ``7 × 3`` count as the same question. Both the operand draw
    and the distractor search are capped; past the cap the generator relaxes
    the repeat or magnitude constraint instead of failing.
    """

    def __init__(self, max_number: int, rng: random.Random | None = None) -> None:
        if max_number < 1:
            raise ValueError("max_number must be at least 1.")
        self._max_number = max_number
        self._rng = rng or random.Random()
        self._recent: deque[tuple[int, int]] = deque(maxlen=RECENT_QUESTION_WINDOW)
        self._strategies = (
            self._off_by_small_amount,
            self._addition_confusion,
            self._wrong_multiplication,
            self._percentage_off,
            self._swapped_digits,
        )

    @classmethod
    def for_level(
        cls, level: DifficultyLevel, rng: random.Random | None = None
    ) -> "QuestionGenerator":
        return cls(level.max_number, rng)

    @property
    def max_number(self) -> int:
        return self._max_number

    def recent_pairs(self) -> list[tuple[int, int]]:
        """Return the remembered operand pairs, oldest first."""
        return list(self._recent)

    def generate(self) -> Question:
        """Return a new question that avoids the recently used operand pairs."""
        multiplicand, multiplier = self._draw_operands()
        self._recent.append((multiplicand, multiplier))

        correct_answer = multiplicand * multiplier
        choices = self._build_choices(correct_answer)
        return Question(
            multiplicand=multiplicand,
            multiplier=multiplier,
            choices=tuple(choices),
            correct_answer_index=choices.index(correct_answer),
        )

    def reset(self) -> None:
        """Forget the recently used operand pairs."""
        self._recent.clear()

    def _draw_operands(self) -> tuple[int, int]:
        pair = (1, 1)
        for _ in range(MAX_GENERATION_ATTEMPTS):
            pair = (self._random_operand(), self._random_operand())
            if not self._was_recently_used(*pair):
                return pair
        logger.warning(
            "No fresh operand pair after %d attempts (max_number=%d); allowing a repeat",
            MAX_GENERATION_ATTEMPTS,
            self._max_number,
        )
        return pair

    def _was_recently_used(self, a: int, b: int) -> bool:
        return any(recent in ((a, b), (b, a)) for recent in self._recent)

    def _build_choices(self, correct_answer: int) -> list[int]:
        upper_bound = self._max_number * self._max_number
        choices = [correct_answer]
        attempts = 0
        while len(choices) < NUMBER_OF_CHOICES and attempts < MAX_GENERATION_ATTEMPTS:
            attempts += 1
            candidate = self._rng.choice(self._strategies)(correct_answer)
            if 0 < candidate <= upper_bound and candidate not in choices:
                choices.append(candidate)

        if len(choices) < NUMBER_OF_CHOICES:
            logger.warning(
                "Only %d distractor(s) for %d within bound %d; filling above the answer",
                len(choices) - 1,
                correct_answer,
                upper_bound,
            )
            candidate = correct_answer
            while len(choices) < NUMBER_OF_CHOICES:
                candidate += 1
                if candidate not in choices:
                    choices.append(candidate)

        self._rng.shuffle(choices)
        return choices

    def _random_operand(self) -> int:
        return self._rng.randint(1, self._max_number)

    # Distractor strategies

    def _off_by_small_amount(self, correct_answer: int) -> int:
        return correct_answer + self._rng.choice(_SMALL_OFFSETS)

    def _addition_confusion(self, correct_answer: int) -> int:
        return self._random_operand() + self._random_operand()

    def _wrong_multiplication(self, correct_answer: int) -> int:
        return self._random_operand() * self._random_operand()

    def _percentage_off(self, correct_answer: int) -> int:
        return int(correct_answer * self._rng.uniform(0.7, 1.3))

    def _swapped_digits(self, correct_answer: int) -> int:
        if correct_answer < 10:
            return correct_answer + self._rng.randint(1, 5)
        return swap_tens_and_ones(correct_answer)


def swap_tens_and_ones(number: int) -> int:
    """Swap the tens and ones digits, keeping the hundreds digit (132 -> 123)."""
    hundreds = number // 100
    tens = (number // 10) % 10
    ones = number % 10
    return hundreds * 100 + ones * 10 + tens

import random

import pytest
from PySide6.QtCore import QCoreApplication

from blitz_app.core.models import DifficultyLevel
from blitz_app.core.question_generator import QuestionGenerator


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture()
def seeded_generator():
    return QuestionGenerator.for_level(DifficultyLevel.UP_TO_12, rng=random.Random(1234))

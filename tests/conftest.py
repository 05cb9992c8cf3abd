import random

import pytest

from quiz_runner.models import QuestionRecord, SINGLE_CHOICE, MULTIPLE_CHOICE, FREE_TEXT


@pytest.fixture
def rng():
    """Seeded random source so shuffles are repeatable."""
    return random.Random(1234)


@pytest.fixture
def single_q():
    return QuestionRecord(kind=SINGLE_CHOICE, prompt="Pick B", options=("A", "B", "C"), correct_index=1)


@pytest.fixture
def multi_q():
    return QuestionRecord(
        kind=MULTIPLE_CHOICE, prompt="Pick A and C",
        options=("A", "B", "C", "D"), correct_indices=frozenset({0, 2}),
    )


@pytest.fixture
def text_q():
    return QuestionRecord(kind=FREE_TEXT, prompt="Capital of France?", correct_text=" Paris ")


@pytest.fixture
def mixed_questions(single_q, multi_q, text_q):
    return [single_q, multi_q, text_q]

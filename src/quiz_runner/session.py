"""Quiz session lifecycle: loading, restarts and option-shuffle caching."""
import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from quiz_runner.errors import EmptyQuestionSetError
from quiz_runner.models import QuestionRecord, ShuffleMap, PendingAdvance
from quiz_runner.shuffle import (
    shuffled, build_shuffle_map, identity_shuffle_map, to_original, to_shuffled,
)

logger = logging.getLogger(__name__)

UNANSWERED = "unanswered"
ANSWERED = "answered"
EVALUATED = "evaluated"


@dataclass
class Session:
    """One attempt at a question set, from start to score.

    ``order[i]`` is the position in ``original_questions`` of
    ``active_questions[i]``. A stored choice answer is in shuffled space
    exactly when ``option_shuffles`` holds a map for its position.
    """
    original_questions: list
    active_questions: list
    order: list
    rng: random.Random
    shuffle_options_enabled: bool = False
    current_index: int = 0
    answers: dict = field(default_factory=dict)
    evaluated: dict = field(default_factory=dict)
    option_shuffles: dict = field(default_factory=dict)
    pending_advance: Optional[PendingAdvance] = None

    @property
    def total(self) -> int:
        return len(self.active_questions)

    @property
    def is_complete(self) -> bool:
        return self.current_index >= self.total

    @property
    def current_question(self) -> QuestionRecord | None:
        if self.is_complete:
            return None
        return self.active_questions[self.current_index]

    @property
    def progress_percent(self) -> float:
        return min(100.0, (self.current_index + 1) / self.total * 100)

    def is_evaluated(self, position: int) -> bool:
        return self.evaluated.get(position, False)


def start(
    questions,
    shuffle_questions: bool = False,
    shuffle_options: bool = False,
    rng: random.Random | None = None,
) -> Session:
    """Create a new session over questions, optionally in random order."""
    original = list(questions)
    if not original:
        raise EmptyQuestionSetError()
    rng = rng or random.Random()
    order = list(range(len(original)))
    if shuffle_questions:
        order = shuffled(order, rng)
    logger.debug(
        "Starting session with %d questions (shuffle_questions=%s, shuffle_options=%s)",
        len(original), shuffle_questions, shuffle_options,
    )
    return Session(
        original_questions=original,
        active_questions=[original[i] for i in order],
        order=order,
        rng=rng,
        shuffle_options_enabled=shuffle_options,
    )


def restart_filtered(session: Session, positions, shuffle_questions: bool = False) -> Session:
    """New session over the given positions of ``session.original_questions``."""
    positions = sorted(set(positions))
    for p in positions:
        if not 0 <= p < len(session.original_questions):
            raise IndexError(f"Question position {p} out of range")
    selected = [session.original_questions[p] for p in positions]
    return start(
        selected,
        shuffle_questions=shuffle_questions,
        shuffle_options=session.shuffle_options_enabled,
        rng=session.rng,
    )


def restart_all(session: Session, shuffle_questions: bool = False) -> Session:
    return restart_filtered(session, range(len(session.original_questions)), shuffle_questions)


def get_or_create_shuffle_map(session: Session, position: int) -> ShuffleMap:
    question = session.active_questions[position]
    if not session.shuffle_options_enabled or not question.has_options:
        return identity_shuffle_map(question)
    cached = session.option_shuffles.get(position)
    if cached is not None:
        return cached
    shuffle_map = build_shuffle_map(question, session.rng)
    session.option_shuffles[position] = shuffle_map
    # An answer recorded before this map existed is in original space.
    if session.answers.get(position) is not None:
        session.answers[position] = to_shuffled(session.answers[position], shuffle_map)
    return shuffle_map


def set_shuffle_options_enabled(session: Session, enabled: bool) -> None:
    """Turn option shuffling on or off, invalidating every cached permutation."""
    if enabled == session.shuffle_options_enabled:
        return
    if not enabled:
        for position, shuffle_map in session.option_shuffles.items():
            answer = session.answers.get(position)
            if answer is not None:
                session.answers[position] = to_original(answer, shuffle_map)
    session.option_shuffles.clear()
    session.shuffle_options_enabled = enabled
    session.pending_advance = None
    logger.debug("Option shuffling %s; shuffle caches cleared", "enabled" if enabled else "disabled")


def original_space_answer(session: Session, position: int):
    """The stored answer for position, translated to original option indices."""
    answer = session.answers.get(position)
    shuffle_map = session.option_shuffles.get(position)
    if shuffle_map is None:
        return answer
    return to_original(answer, shuffle_map)


def question_state(session: Session, position: int) -> str:
    if session.is_evaluated(position):
        return EVALUATED
    if session.answers.get(position) is not None:
        return ANSWERED
    return UNANSWERED

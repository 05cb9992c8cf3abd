"""Per-question answer evaluation.

Grading always happens in original option space through :func:`grade`, so
that :func:`evaluate` and the session scorer can never disagree on whether a
question was answered correctly.
"""
import logging

from quiz_runner.errors import NoAnswerSelectedError
from quiz_runner.models import (
    QuestionRecord, ShuffleMap, EvaluationResult,
    MULTIPLE_CHOICE, FREE_TEXT,
)
from quiz_runner.session import Session, get_or_create_shuffle_map, original_space_answer

logger = logging.getLogger(__name__)


def normalize_text(text) -> str:
    return str(text).strip().lower() if text is not None else ""


def is_scorable(question: QuestionRecord) -> bool:
    """Whether question carries enough data to be graded automatically."""
    if question.kind == FREE_TEXT:
        return bool(normalize_text(question.correct_text))
    if not question.has_options:
        return False
    if question.kind == MULTIPLE_CHOICE:
        return bool(question.correct_indices) and all(
            0 <= i < len(question.options) for i in question.correct_indices
        )
    return question.correct_index is not None and 0 <= question.correct_index < len(question.options)


def grade(question: QuestionRecord, answer) -> bool:
    """Grade an original-space answer. Unscorable questions are always correct."""
    if not is_scorable(question):
        return True
    if question.kind == FREE_TEXT:
        return bool(normalize_text(answer)) and normalize_text(answer) == normalize_text(question.correct_text)
    if answer is None:
        return False
    if question.kind == MULTIPLE_CHOICE:
        return frozenset(answer) == question.correct_indices
    return answer == question.correct_index


def correct_display(question: QuestionRecord, shuffle_map: ShuffleMap) -> str:
    """Human readable correct answer, numbered as the options are displayed."""
    if question.kind == FREE_TEXT:
        if question.correct_text is None or not question.correct_text.strip():
            return "N/A"
        return question.correct_text
    if question.kind == MULTIPLE_CHOICE:
        return ", ".join(str(i + 1) for i in sorted(shuffle_map.shuffled_correct_indices))
    idx = shuffle_map.shuffled_correct_index
    if idx is None or not 0 <= idx < len(shuffle_map.shuffled_options):
        return "Unknown"
    if shuffle_map.shuffled_options[idx]:
        return f"{idx + 1}. {shuffle_map.shuffled_options[idx]}"
    return f"Answer {idx + 1}"


def evaluate(session: Session, position: int) -> EvaluationResult:
    """Lock the answer for position and report whether it is correct.

    Raises NoAnswerSelectedError, leaving the question open, when nothing is
    selected on a multiple-choice question with options or on a scorable
    single-choice question. Calling this again on an
    evaluated question only recomputes the result.
    """
    question = session.active_questions[position]
    shuffle_map = get_or_create_shuffle_map(session, position)
    scorable = is_scorable(question)
    if question.kind == MULTIPLE_CHOICE:
        needs_answer = question.has_options
    else:
        needs_answer = scorable and question.kind != FREE_TEXT
    if (
        needs_answer
        and session.answers.get(position) is None
        and not session.is_evaluated(position)
    ):
        raise NoAnswerSelectedError(position)

    correct = grade(question, original_space_answer(session, position))
    if not session.is_evaluated(position):
        session.evaluated[position] = True
        if not scorable:
            logger.warning("Question %d cannot be graded automatically; counted as correct", position + 1)
        logger.debug("Evaluated question %d: correct=%s", position + 1, correct)
    return EvaluationResult(
        correct=correct,
        correct_display=correct_display(question, shuffle_map),
        scorable=scorable,
    )

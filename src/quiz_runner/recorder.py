"""Recording user answers against the questions of a session."""
from quiz_runner.errors import InvalidQuestionStateError
from quiz_runner.evaluator import evaluate
from quiz_runner.models import EvaluationResult, SINGLE_CHOICE, MULTIPLE_CHOICE, FREE_TEXT
from quiz_runner.session import Session, get_or_create_shuffle_map


def _check_open(session: Session, position: int, kind: str) -> None:
    question = session.active_questions[position]
    if session.is_evaluated(position):
        raise InvalidQuestionStateError(f"Question {position + 1} is already evaluated")
    if question.kind != kind:
        raise InvalidQuestionStateError(
            f"Question {position + 1} is {question.kind}, not {kind}"
        )
    session.pending_advance = None


def _check_option(session: Session, position: int, option_index: int) -> None:
    # Establishes the option space the index is recorded in.
    shuffle_map = get_or_create_shuffle_map(session, position)
    if not 0 <= option_index < len(shuffle_map.shuffled_options):
        raise ValueError(f"Option {option_index} out of range for question {position + 1}")


def record_choice(session: Session, position: int, option_index: int) -> EvaluationResult:
    """Record a single-choice answer and evaluate it immediately."""
    _check_open(session, position, SINGLE_CHOICE)
    _check_option(session, position, option_index)
    session.answers[position] = option_index
    return evaluate(session, position)


def toggle_choice(session: Session, position: int, option_index: int) -> None:
    _check_open(session, position, MULTIPLE_CHOICE)
    _check_option(session, position, option_index)
    selection = set(session.answers.get(position) or ())
    if option_index in selection:
        selection.remove(option_index)
    else:
        selection.add(option_index)
    session.answers[position] = frozenset(selection) if selection else None


def record_text(session: Session, position: int, text: str) -> None:
    _check_open(session, position, FREE_TEXT)
    session.answers[position] = text

"""Moving through a session, including the delayed auto-advance."""
import logging
import time

from quiz_runner.errors import NoAnswerSelectedError
from quiz_runner.evaluator import evaluate
from quiz_runner.models import MovedTo, Blocked, QuizComplete, PendingAdvance, SINGLE_CHOICE
from quiz_runner.session import Session

logger = logging.getLogger(__name__)


def advance(session: Session):
    """Submit the current question if needed, then move forward.

    Multiple-choice and free-text questions are evaluated here. A
    multiple-choice question with nothing selected blocks the move. An
    unanswered single-choice question is skipped without being locked.
    """
    cancel_auto_advance(session)
    if session.is_complete:
        return QuizComplete()
    position = session.current_index
    question = session.active_questions[position]
    if not session.is_evaluated(position) and question.kind != SINGLE_CHOICE:
        try:
            evaluate(session, position)
        except NoAnswerSelectedError as e:
            return Blocked(str(e))
    session.current_index += 1
    if session.is_complete:
        logger.debug("Quiz complete after question %d", position + 1)
        return QuizComplete()
    return MovedTo(session.current_index)


def go_back(session: Session) -> int:
    cancel_auto_advance(session)
    if session.current_index > 0:
        session.current_index -= 1
    return session.current_index


def schedule_auto_advance(session: Session, delay: float, now: float | None = None) -> PendingAdvance:
    """Replace any pending auto-advance with one due after delay seconds."""
    now = time.monotonic() if now is None else now
    session.pending_advance = PendingAdvance(position=session.current_index, due_at=now + delay)
    return session.pending_advance


def cancel_auto_advance(session: Session) -> None:
    session.pending_advance = None


def run_due_auto_advance(session: Session, now: float | None = None):
    """Fire the pending auto-advance if it is due. Returns the outcome or None."""
    pending = session.pending_advance
    if pending is None:
        return None
    now = time.monotonic() if now is None else now
    if now < pending.due_at:
        return None
    session.pending_advance = None
    if pending.position != session.current_index:
        logger.debug("Dropping stale auto-advance for question %d", pending.position + 1)
        return None
    return advance(session)

"""End-of-quiz score aggregation."""
import logging

from quiz_runner.evaluator import grade
from quiz_runner.models import ScoreReport
from quiz_runner.session import Session, original_space_answer

logger = logging.getLogger(__name__)


def score(session: Session) -> ScoreReport:
    """Tally every question of the session, in presentation order."""
    correct = 0
    missed = []
    missed_positions = []
    for position, question in enumerate(session.active_questions):
        if grade(question, original_space_answer(session, position)):
            correct += 1
        else:
            missed.append(question)
            missed_positions.append(session.order[position])
    total = len(session.active_questions)
    report = ScoreReport(
        correct_count=correct,
        incorrect_count=total - correct,
        # Half rounds up: 1 of 8 correct is 13%.
        accuracy_percent=(200 * correct + total) // (2 * total),
        missed_questions=missed,
        missed_positions=missed_positions,
    )
    logger.debug("Scored session: %d/%d correct", correct, total)
    return report

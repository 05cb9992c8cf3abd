"""Exceptions raised by the quiz engine."""


class QuizError(Exception):
    """Base class for all quiz engine errors."""


class EmptyQuestionSetError(QuizError):
    def __init__(self, message: str = "Question set is empty"):
        super().__init__(message)


class InvalidQuestionStateError(QuizError):
    """An answer was recorded against a locked question or one of another kind."""


class NoAnswerSelectedError(QuizError):
    def __init__(self, position: int):
        self.position = position
        super().__init__(f"No answer selected for question {position + 1}")


class QuestionSetLoadError(QuizError):
    """A question-set file could not be read or parsed."""

"""Runtime configuration for the quiz CLI."""
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_QUESTION_DIR = str(Path.home() / ".quiz_runner" / "question_sets")
DEFAULT_AUTO_ADVANCE_DELAY = 1.5
DEFAULT_LOG_LEVEL = "WARNING"

_TRUE = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE


@dataclass
class QuizConfig:
    question_dir: str = DEFAULT_QUESTION_DIR
    shuffle_questions: bool = False
    shuffle_options: bool = False
    auto_advance_delay: float = DEFAULT_AUTO_ADVANCE_DELAY
    log_level: str = DEFAULT_LOG_LEVEL

    @staticmethod
    def from_env() -> "QuizConfig":
        delay = os.environ.get("QUIZ_RUNNER_AUTO_ADVANCE_DELAY")
        try:
            delay = float(delay) if delay is not None else DEFAULT_AUTO_ADVANCE_DELAY
        except ValueError:
            raise ValueError(f"QUIZ_RUNNER_AUTO_ADVANCE_DELAY must be a number, got {delay!r}")
        if delay < 0:
            raise ValueError("QUIZ_RUNNER_AUTO_ADVANCE_DELAY must not be negative")
        return QuizConfig(
            question_dir=os.environ.get("QUIZ_RUNNER_QUESTION_DIR", DEFAULT_QUESTION_DIR),
            shuffle_questions=_env_bool("QUIZ_RUNNER_SHUFFLE_QUESTIONS", False),
            shuffle_options=_env_bool("QUIZ_RUNNER_SHUFFLE_OPTIONS", False),
            auto_advance_delay=delay,
            log_level=os.environ.get("QUIZ_RUNNER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )

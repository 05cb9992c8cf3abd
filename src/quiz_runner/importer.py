"""Loading question sets from JSON and YAML files."""
import json
import logging
from pathlib import Path

from quiz_runner.errors import QuestionSetLoadError
from quiz_runner.models import QuestionRecord

logger = logging.getLogger(__name__)

QUESTION_FILE_SUFFIXES = (".json", ".yaml", ".yml")


def read_file_data(file_path: str):
    path = Path(file_path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix in (".yaml", ".yml"):
        import yaml
        return yaml.safe_load(text)
    return json.loads(text)


def load_question_file(file_path: str) -> list[QuestionRecord]:
    """Parse a question-set file into records. The top level must be a list."""
    try:
        data = read_file_data(file_path)
    except FileNotFoundError:
        raise QuestionSetLoadError(f"Could not load {file_path}: file not found")
    except Exception as e:
        raise QuestionSetLoadError(f"Could not load {file_path}: {e}") from e
    if not isinstance(data, list):
        raise QuestionSetLoadError(f"Could not load {file_path}: expected a list of questions")
    try:
        questions = QuestionRecord.from_dicts(data)
    except (TypeError, ValueError, AttributeError) as e:
        raise QuestionSetLoadError(f"Could not load {file_path}: {e}") from e
    logger.debug("Loaded %d questions from %s", len(questions), file_path)
    return questions


def list_question_files(directory: str) -> list[Path]:
    path = Path(directory)
    if not path.is_dir():
        return []
    return sorted(
        p for p in path.iterdir()
        if p.is_file() and p.suffix.lower() in QUESTION_FILE_SUFFIXES
    )

"""Data classes for the quiz domain model."""
from dataclasses import dataclass, field
from typing import Optional

SINGLE_CHOICE = "single-choice"
MULTIPLE_CHOICE = "multiple-choice"
FREE_TEXT = "free-text"

KINDS = (SINGLE_CHOICE, MULTIPLE_CHOICE, FREE_TEXT)

# Values of the "type" field used by exported question-set files.
_TYPE_ALIASES = {
    "single": SINGLE_CHOICE,
    "multiple": MULTIPLE_CHOICE,
    "fill_in_blank": FREE_TEXT,
}


def _first(data: dict, *keys):
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def infer_kind(correct_indices) -> str:
    return MULTIPLE_CHOICE if correct_indices else SINGLE_CHOICE


@dataclass(frozen=True)
class QuestionRecord:
    kind: str
    prompt: str
    options: tuple = ()
    correct_index: Optional[int] = None
    correct_indices: frozenset = frozenset()
    correct_text: Optional[str] = None
    image: Optional[str] = None

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Unknown question kind: {self.kind!r}")

    @property
    def has_options(self) -> bool:
        return len(self.options) > 0

    @staticmethod
    def from_dict(data: dict) -> "QuestionRecord":
        """Build a record from a parsed question dict.

        Accepts the camelCase keys of exported question sets
        (``question``, ``correctAnswerIndex``, ...) as well as the
        snake_case field names.
        """
        options = _first(data, "options") or []
        correct_index = _first(data, "correct_index", "correctAnswerIndex")
        correct_indices = _first(data, "correct_indices", "correctAnswerIndices") or []
        correct_text = _first(data, "correct_text", "correctAnswer")
        kind = data.get("kind") or _TYPE_ALIASES.get(data.get("type"))
        if kind is None:
            kind = infer_kind(correct_indices)
        return QuestionRecord(
            kind=kind,
            prompt=str(_first(data, "prompt", "question") or ""),
            options=tuple(str(o) for o in options),
            correct_index=int(correct_index) if correct_index is not None else None,
            correct_indices=frozenset(int(i) for i in correct_indices),
            correct_text=str(correct_text) if correct_text is not None else None,
            image=data.get("image"),
        )

    @staticmethod
    def from_dicts(items: list) -> list["QuestionRecord"]:
        return [QuestionRecord.from_dict(item) for item in items]


@dataclass(frozen=True)
class ShuffleMap:
    shuffled_options: tuple
    original_to_shuffled: tuple
    shuffled_to_original: tuple
    shuffled_correct_index: Optional[int] = None
    shuffled_correct_indices: frozenset = frozenset()


@dataclass(frozen=True)
class EvaluationResult:
    correct: bool
    correct_display: str = ""
    scorable: bool = True


@dataclass
class ScoreReport:
    correct_count: int
    incorrect_count: int
    accuracy_percent: int
    missed_questions: list = field(default_factory=list)
    missed_positions: list = field(default_factory=list)  # into original_questions

    @property
    def total(self) -> int:
        return self.correct_count + self.incorrect_count


@dataclass(frozen=True)
class MovedTo:
    position: int


@dataclass(frozen=True)
class Blocked:
    reason: str


@dataclass(frozen=True)
class QuizComplete:
    pass


@dataclass
class PendingAdvance:
    position: int
    due_at: float

"""Option permutations and the index tables that map them back."""
import logging
import random

from quiz_runner.models import QuestionRecord, ShuffleMap

logger = logging.getLogger(__name__)


def shuffled(items, rng: random.Random) -> list:
    """Return a shuffled copy of items. ``random.shuffle`` is Fisher-Yates."""
    result = list(items)
    rng.shuffle(result)
    return result


def _translate_index(index, table: tuple):
    if index is None or not 0 <= index < len(table):
        return None
    return table[index]


def _translate_indices(indices, table: tuple) -> frozenset:
    return frozenset(table[i] for i in indices if 0 <= i < len(table))


def identity_shuffle_map(question: QuestionRecord) -> ShuffleMap:
    identity = tuple(range(len(question.options)))
    return ShuffleMap(
        shuffled_options=tuple(question.options),
        original_to_shuffled=identity,
        shuffled_to_original=identity,
        shuffled_correct_index=question.correct_index,
        shuffled_correct_indices=frozenset(question.correct_indices),
    )


def build_shuffle_map(question: QuestionRecord, rng: random.Random) -> ShuffleMap:
    """Randomly permute the options of question and build both index tables."""
    shuffled_to_original = tuple(shuffled(range(len(question.options)), rng))
    original_to_shuffled = [0] * len(shuffled_to_original)
    for shuffled_idx, original_idx in enumerate(shuffled_to_original):
        original_to_shuffled[original_idx] = shuffled_idx
    original_to_shuffled = tuple(original_to_shuffled)
    logger.debug("Built option permutation %s", shuffled_to_original)
    return ShuffleMap(
        shuffled_options=tuple(question.options[i] for i in shuffled_to_original),
        original_to_shuffled=original_to_shuffled,
        shuffled_to_original=shuffled_to_original,
        shuffled_correct_index=_translate_index(question.correct_index, original_to_shuffled),
        shuffled_correct_indices=_translate_indices(question.correct_indices, original_to_shuffled),
    )


def to_original(answer, shuffle_map: ShuffleMap):
    """Translate a stored shuffled-space answer to original space."""
    if answer is None or isinstance(answer, str):
        return answer
    if isinstance(answer, (set, frozenset)):
        return frozenset(shuffle_map.shuffled_to_original[i] for i in answer)
    return shuffle_map.shuffled_to_original[answer]


def to_shuffled(answer, shuffle_map: ShuffleMap):
    """Translate a stored original-space answer to shuffled space."""
    if answer is None or isinstance(answer, str):
        return answer
    if isinstance(answer, (set, frozenset)):
        return frozenset(shuffle_map.original_to_shuffled[i] for i in answer)
    return shuffle_map.original_to_shuffled[answer]

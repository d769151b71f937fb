"""Distractor selection and option shuffling."""

import random
import re
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from quiz.models import VocabularyEntry

T = TypeVar('T')

DISTRACTOR_COUNT = 3


def shuffled(items: Iterable[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a Fisher-Yates shuffled copy of items."""
    rng = rng or random
    arr = list(items)
    for i in range(len(arr) - 1, 0, -1):
        j = rng.randrange(i + 1)
        arr[i], arr[j] = arr[j], arr[i]
    return arr


def shuffle_options(
    correct: str,
    distractors: Sequence[str],
    rng: Optional[random.Random] = None,
) -> Tuple[List[str], int]:
    """
    Combine the correct value with its distractors and shuffle.

    Distractors equal to the correct value or to an earlier distractor are
    dropped. Returns (options, correct_index).
    """
    values = [correct]
    for d in distractors:
        if d not in values:
            values.append(d)
    options = shuffled(values, rng)
    return options, options.index(correct)


def pick_values(
    candidates: Sequence[VocabularyEntry],
    attr: str,
    exclude: str,
    rng: Optional[random.Random] = None,
    count: int = DISTRACTOR_COUNT,
) -> List[str]:
    """
    Draw up to `count` distinct attribute values from shuffled candidates.

    Values equal to `exclude` (the correct answer) are skipped.
    """
    out: List[str] = []
    for entry in shuffled(candidates, rng):
        value = getattr(entry, attr)
        if not value or value == exclude or value in out:
            continue
        out.append(value)
        if len(out) >= count:
            break
    return out


def others(word: VocabularyEntry, pool: Iterable[VocabularyEntry]) -> List[VocabularyEntry]:
    return [w for w in pool if w.id != word.id]


def near_tier(word: VocabularyEntry, pool: Iterable[VocabularyEntry]) -> List[VocabularyEntry]:
    """Other words within one difficulty tier of word."""
    return [
        w for w in others(word, pool)
        if abs(w.difficulty_tier - word.difficulty_tier) <= 1
    ]


def definition_neighbours(
    word: VocabularyEntry, pool: Iterable[VocabularyEntry],
) -> List[VocabularyEntry]:
    """Same category within one tier, or anything on the same tier."""
    return [
        w for w in others(word, pool)
        if (w.category == word.category and abs(w.difficulty_tier - word.difficulty_tier) <= 1)
        or w.difficulty_tier == word.difficulty_tier
    ]


def same_part_of_speech(
    word: VocabularyEntry, pool: Iterable[VocabularyEntry],
) -> List[VocabularyEntry]:
    return [w for w in others(word, pool) if w.part_of_speech == word.part_of_speech]


def _word_pattern(text: str) -> 're.Pattern':
    return re.compile(r'\b' + re.escape(text) + r'\b', re.IGNORECASE)


def blank_out(sentence: str, word: str, marker: str = '___') -> str:
    """Replace the first whole-word occurrence of word (any case) with marker."""
    blanked, n = _word_pattern(word).subn(marker, sentence, count=1)
    if n:
        return blanked
    # Inflected forms ("vividly") still contain the word as a prefix
    return sentence.replace(word, marker, 1)


def substitute_word(sentence: str, original: str, replacement: str) -> str:
    """Replace every whole-word occurrence of original (any case) with replacement."""
    return _word_pattern(original).sub(lambda _m: replacement, sentence)

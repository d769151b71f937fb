"""Procedural misspellings used as distractors for spelling questions."""

import random
import string
from typing import Callable, List, Optional

VOWELS = 'aeiou'

# Phonetically similar consonant swaps; an empty value drops the letter
SIMILAR_CONSONANTS = {
    'b': 'p', 'p': 'b', 'd': 't', 't': 'd', 'g': 'k', 'k': 'g',
    's': 'c', 'c': 's', 'f': 'v', 'v': 'f', 'm': 'n', 'n': 'm',
    'l': 'r', 'r': 'l', 'j': 'g', 'z': 's', 'w': 'v', 'h': '',
}


def _delete_letter(word: str, rng: random.Random) -> str:
    if len(word) < 2:
        return ''
    pos = rng.randrange(1, len(word))
    return word[:pos] + word[pos + 1:]


def _double_letter(word: str, rng: random.Random) -> str:
    pos = rng.randrange(len(word))
    return word[:pos] + word[pos] + word[pos:]


def _swap_adjacent(word: str, rng: random.Random) -> str:
    if len(word) < 2:
        return ''
    pos = rng.randrange(len(word) - 1)
    return word[:pos] + word[pos + 1] + word[pos] + word[pos + 2:]


def _replace_vowel(word: str, rng: random.Random) -> str:
    positions = [i for i, ch in enumerate(word) if ch in VOWELS]
    if not positions:
        return ''
    pos = rng.choice(positions)
    others = VOWELS.replace(word[pos], '')
    return word[:pos] + rng.choice(others) + word[pos + 1:]


def _insert_letter(word: str, rng: random.Random) -> str:
    pos = rng.randrange(1, len(word)) if len(word) > 1 else 1
    return word[:pos] + rng.choice(string.ascii_lowercase) + word[pos:]


def _swap_similar_consonant(word: str, rng: random.Random) -> str:
    positions = [i for i, ch in enumerate(word) if ch in SIMILAR_CONSONANTS]
    if not positions:
        return ''
    pos = rng.choice(positions)
    return word[:pos] + SIMILAR_CONSONANTS[word[pos]] + word[pos + 1:]


STRATEGIES: List[Callable[[str, random.Random], str]] = [
    _delete_letter,
    _double_letter,
    _swap_adjacent,
    _replace_vowel,
    _insert_letter,
    _swap_similar_consonant,
]


def misspell(word: str, count: int, rng: Optional[random.Random] = None) -> List[str]:
    """
    Generate up to `count` distinct plausible misspellings of `word`.

    Each attempt applies one strategy picked uniformly at random to the
    lowercased word. At most 10 * count attempts are made. A candidate is
    kept only if it differs from the word and its length is within
    [2, len(word) + 2].

    Returns:
        Misspellings in order of first acceptance (may be shorter than count)
    """
    rng = rng or random
    lower = word.lower()
    if not lower or count <= 0:
        return []

    found: List[str] = []
    for _ in range(count * 10):
        if len(found) >= count:
            break
        strategy = rng.choice(STRATEGIES)
        candidate = strategy(lower, rng)
        if (candidate and candidate != lower and candidate != word
                and 2 <= len(candidate) <= len(lower) + 2
                and candidate not in found):
            found.append(candidate)
    return found

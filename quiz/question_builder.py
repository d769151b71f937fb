"""
Per-type question synthesis with fallback chaining.

Each builder returns a BuildResult: either a finished Question or a
no-candidate reason. build_with_fallback walks the fixed fallback order
until a builder succeeds; DEFINITION is the terminal step and always
succeeds for a word drawn from a non-empty pool.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from quiz.distractors import (
    DISTRACTOR_COUNT,
    blank_out,
    definition_neighbours,
    near_tier,
    others,
    pick_values,
    same_part_of_speech,
    shuffle_options,
    shuffled,
    substitute_word,
)
from quiz.misspell import misspell
from quiz.models import Question, VocabularyEntry
from quiz.question_types import QuestionType, RelationshipType
from quiz.vocabulary import VocabularyPool

logger = logging.getLogger("wordquest.quiz")

TRUE = 'True'
FALSE = 'False'
MIN_SPELLING_LENGTH = 3
MIN_SENTENCE_DISTRACTORS = 3

FALLBACK_ORDER = (
    QuestionType.DEFINITION,
    QuestionType.REVERSE_DEFINITION,
    QuestionType.FILL_BLANK,
    QuestionType.SPELLING,
    QuestionType.TRUE_FALSE,
    QuestionType.EXAMPLE_SENTENCE,
    QuestionType.SYNONYM,
    QuestionType.ANTONYM,
)


@dataclass
class BuildResult:
    question: Optional[Question] = None
    reason: str = ''

    @property
    def ok(self) -> bool:
        return self.question is not None


def _no_candidate(reason: str) -> BuildResult:
    return BuildResult(question=None, reason=reason)


@dataclass
class BuildStats:
    """Counters for question building. No vocabulary text."""
    built: Dict[str, int] = field(default_factory=dict)
    no_candidate: Dict[str, int] = field(default_factory=dict)
    fallbacks_used: int = 0
    terminal_definition: int = 0

    def record(self, qtype: QuestionType, result: BuildResult) -> None:
        bucket = self.built if result.ok else self.no_candidate
        bucket[qtype.value] = bucket.get(qtype.value, 0) + 1

    def to_log_dict(self) -> Dict[str, int]:
        out = {f"built_{k}": v for k, v in self.built.items()}
        out.update({f"none_{k}": v for k, v in self.no_candidate.items()})
        out['fallbacks_used'] = self.fallbacks_used
        out['terminal_definition'] = self.terminal_definition
        return out


def _question(word: VocabularyEntry, qtype: QuestionType, prompt: str,
              options: List[str], correct_index: int) -> BuildResult:
    return BuildResult(question=Question(
        word_id=word.id,
        word=word.word,
        question_type=qtype.value,
        prompt=prompt,
        options=options,
        correct_index=correct_index,
    ))


def build_definition(word, pool, rng) -> BuildResult:
    candidates = definition_neighbours(word, pool.words)
    wrong = pick_values(candidates, 'definition', word.definition, rng)
    options, idx = shuffle_options(word.definition, wrong, rng)
    return _question(word, QuestionType.DEFINITION,
                     f'What does "{word.word}" mean?', options, idx)


def build_fill_blank(word, pool, rng) -> BuildResult:
    if not word.example_sentence:
        return _no_candidate('no example sentence')
    wrong = pick_values(same_part_of_speech(word, pool.words), 'word', word.word, rng)
    if not wrong:
        return _no_candidate('no words share the part of speech')
    sentence = blank_out(word.example_sentence, word.word)
    options, idx = shuffle_options(word.word, wrong, rng)
    return _question(word, QuestionType.FILL_BLANK,
                     f'Fill in the blank: "{sentence}"', options, idx)


def build_synonym(word, pool, rng) -> BuildResult:
    synonym = pool.first_related(word, RelationshipType.SYNONYM)
    if synonym is None:
        return _no_candidate('no synonym edge')
    candidates = [w for w in pool.words if w.id not in (word.id, synonym.id)]
    wrong = pick_values(candidates, 'word', synonym.word, rng)
    options, idx = shuffle_options(synonym.word, wrong, rng)
    return _question(word, QuestionType.SYNONYM,
                     f'Which word is closest in meaning to "{word.word}"?', options, idx)


def build_reverse_definition(word, pool, rng) -> BuildResult:
    wrong = pick_values(near_tier(word, pool.words), 'word', word.word, rng)
    options, idx = shuffle_options(word.word, wrong, rng)
    return _question(word, QuestionType.REVERSE_DEFINITION,
                     f'Which word means "{word.definition}"?', options, idx)


def build_true_false(word, pool, rng) -> BuildResult:
    if rng.random() < 0.5:
        shown, answer = word.definition, TRUE
    else:
        # Definitions identical to the word's own would make "False" wrong
        decoys = [w for w in others(word, pool.words) if w.definition != word.definition]
        if not decoys:
            return _no_candidate('no other definition for the false case')
        shown, answer = shuffled(decoys, rng)[0].definition, FALSE
    options = [TRUE, FALSE]
    return _question(word, QuestionType.TRUE_FALSE,
                     f'"{word.word}" means "{shown}". True or False?',
                     options, options.index(answer))


def build_example_sentence(word, pool, rng) -> BuildResult:
    if not word.example_sentence:
        return _no_candidate('no example sentence')
    usable = [w for w in others(word, pool.words) if w.example_sentence]
    if len(usable) < MIN_SENTENCE_DISTRACTORS:
        return _no_candidate('too few other example sentences')
    wrong = [
        substitute_word(w.example_sentence, w.word, word.word)
        for w in shuffled(usable, rng)[:DISTRACTOR_COUNT]
    ]
    options, idx = shuffle_options(word.example_sentence, wrong, rng)
    return _question(word, QuestionType.EXAMPLE_SENTENCE,
                     f'Which sentence uses "{word.word}" correctly?', options, idx)


def build_antonym(word, pool, rng) -> BuildResult:
    antonym = pool.first_related(word, RelationshipType.ANTONYM)
    if antonym is None:
        return _no_candidate('no antonym edge')
    excluded = set(pool.related_ids(word, RelationshipType.ANTONYM)) | {word.id}
    candidates = [w for w in pool.words if w.id not in excluded]
    wrong = pick_values(candidates, 'word', antonym.word, rng)
    options, idx = shuffle_options(antonym.word, wrong, rng)
    return _question(word, QuestionType.ANTONYM,
                     f'Which word means the OPPOSITE of "{word.word}"?', options, idx)


def build_spelling(word, pool, rng) -> BuildResult:
    if len(word.word) < MIN_SPELLING_LENGTH:
        return _no_candidate('word too short')
    wrong = misspell(word.word, DISTRACTOR_COUNT, rng)
    if len(wrong) < DISTRACTOR_COUNT:
        return _no_candidate('misspellings exhausted')
    options, idx = shuffle_options(word.word, wrong, rng)
    return _question(
        word, QuestionType.SPELLING,
        f'Which is the correct spelling of the word that means "{word.definition}"?',
        options, idx,
    )


BUILDERS: Dict[QuestionType, Callable[[VocabularyEntry, VocabularyPool, random.Random], BuildResult]] = {
    QuestionType.DEFINITION: build_definition,
    QuestionType.FILL_BLANK: build_fill_blank,
    QuestionType.SYNONYM: build_synonym,
    QuestionType.REVERSE_DEFINITION: build_reverse_definition,
    QuestionType.TRUE_FALSE: build_true_false,
    QuestionType.EXAMPLE_SENTENCE: build_example_sentence,
    QuestionType.ANTONYM: build_antonym,
    QuestionType.SPELLING: build_spelling,
}


def build(
    qtype: QuestionType,
    word: VocabularyEntry,
    pool: VocabularyPool,
    rng: Optional[random.Random] = None,
) -> BuildResult:
    """Build a single question of the given type, or report why it can't be built."""
    return BUILDERS[QuestionType(qtype)](word, pool, rng or random)


def build_with_fallback(
    chosen: QuestionType,
    word: VocabularyEntry,
    pool: VocabularyPool,
    last_type: Optional[QuestionType] = None,
    rng: Optional[random.Random] = None,
    stats: Optional[BuildStats] = None,
) -> Question:
    """
    Build a question for word, starting from the chosen type.

    Order: chosen, then FALLBACK_ORDER. Types equal to last_type are skipped
    (the chosen type is only tried if it differs from last_type). If nothing
    succeeds, DEFINITION is built unconditionally, even if it repeats
    last_type.
    """
    rng = rng or random
    chosen = QuestionType(chosen)
    last = QuestionType(last_type) if last_type is not None else None

    tried = set()
    for step, qtype in enumerate((chosen,) + FALLBACK_ORDER):
        if qtype in tried or qtype == last:
            continue
        tried.add(qtype)
        result = build(qtype, word, pool, rng)
        if stats is not None:
            stats.record(qtype, result)
        if result.ok:
            if step > 0 and stats is not None:
                stats.fallbacks_used += 1
            return result.question
        logger.debug("No %s question for word %s: %s", qtype.value, word.id, result.reason)

    if stats is not None:
        stats.terminal_definition += 1
    logger.warning("All fallbacks exhausted for word %s; repeating definition", word.id)
    return build_definition(word, pool, rng).question

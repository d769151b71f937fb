"""Answer validation against per-type canonical answers."""

import logging
from dataclasses import dataclass
from typing import Optional

from quiz.models import Question, VocabularyEntry
from quiz.question_types import QuestionType, RelationshipType
from quiz.vocabulary import VocabularyPool

logger = logging.getLogger("wordquest.quiz")

# Types judged without regard to letter case
CASE_INSENSITIVE = {
    QuestionType.FILL_BLANK,
    QuestionType.SYNONYM,
    QuestionType.REVERSE_DEFINITION,
    QuestionType.ANTONYM,
}


@dataclass(frozen=True)
class ValidationResult:
    is_correct: bool
    correct_answer: str

    @property
    def validated(self) -> bool:
        """False when no canonical answer could be derived."""
        return bool(self.correct_answer)


def canonical_answer(
    question_type: QuestionType,
    word: VocabularyEntry,
    pool: Optional[VocabularyPool],
    stored_question: Optional[Question] = None,
) -> str:
    """
    Derive the authoritative answer for a question type.

    Returns '' when it cannot be derived: a missing relationship edge for
    synonym/antonym, or no stored question for true_false.
    """
    qtype = QuestionType(question_type)

    if qtype == QuestionType.DEFINITION:
        return word.definition
    if qtype in (QuestionType.FILL_BLANK, QuestionType.REVERSE_DEFINITION, QuestionType.SPELLING):
        return word.word
    if qtype == QuestionType.EXAMPLE_SENTENCE:
        return word.example_sentence

    if qtype in (QuestionType.SYNONYM, QuestionType.ANTONYM):
        rel_type = RelationshipType(qtype.value)
        related = pool.first_related(word, rel_type) if pool is not None else None
        if related is None:
            logger.warning("Validation anomaly: no %s edge for word %s", rel_type.value, word.id)
            return ''
        return related.word

    # TRUE_FALSE: the pairing was randomized at generation time
    if stored_question is None:
        logger.warning("Validation anomaly: no stored true_false question for word %s", word.id)
        return ''
    if not 0 <= stored_question.correct_index < len(stored_question.options):
        logger.warning("Validation anomaly: stored question for word %s has a bad index", word.id)
        return ''
    return stored_question.correct_answer


def validate_answer(
    question_type: QuestionType,
    word: VocabularyEntry,
    pool: Optional[VocabularyPool],
    stored_question: Optional[Question],
    submitted: str,
) -> ValidationResult:
    """
    Judge a submitted answer.

    Spelling, definition, example sentence and true/false compare exactly;
    fill-blank, reverse definition, synonym and antonym ignore case. An
    underivable canonical answer is always judged incorrect.
    """
    qtype = QuestionType(question_type)
    correct = canonical_answer(qtype, word, pool, stored_question)
    if not correct:
        return ValidationResult(is_correct=False, correct_answer='')

    submitted = submitted if submitted is not None else ''
    if qtype in CASE_INSENSITIVE:
        is_correct = submitted.lower() == correct.lower()
    else:
        is_correct = submitted == correct
    return ValidationResult(is_correct=is_correct, correct_answer=correct)

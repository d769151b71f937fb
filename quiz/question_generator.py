"""Question sequence generation for a level."""

import logging
import random
from typing import List, Optional

from quiz.distractors import shuffled
from quiz.errors import EmptyVocabularyPoolError
from quiz.models import Question, VocabularyEntry
from quiz.question_builder import BuildStats, build_with_fallback
from quiz.question_types import QuestionType
from quiz.type_selector import clamp_tier, pick_type
from quiz.vocabulary import VocabularyPool

logger = logging.getLogger("wordquest.quiz")


def select_target_words(
    words: List[VocabularyEntry],
    difficulty_tier: int,
    target_count: int,
    rng: Optional[random.Random] = None,
) -> List[VocabularyEntry]:
    """
    Words from tiers [max(1, tier - 1), tier], shuffled, truncated to target_count.

    Returns fewer than target_count words if the filtered pool is smaller.
    """
    min_tier = max(1, difficulty_tier - 1)
    eligible = [w for w in words if min_tier <= w.difficulty_tier <= difficulty_tier]
    return shuffled(eligible, rng)[:max(0, target_count)]


def generate_questions(
    pool: VocabularyPool,
    difficulty_tier: int,
    target_count: int = 8,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """
    Generate an ordered question sequence for one level.

    Consecutive questions differ in type whenever more than one type can be
    built. Distractors are drawn from the whole pool, not only the selected
    words.

    Raises:
        EmptyVocabularyPoolError if the pool has no words at all.
    """
    if not pool:
        raise EmptyVocabularyPoolError("No vocabulary found for this level")

    rng = rng or random
    tier = clamp_tier(difficulty_tier)
    targets = select_target_words(pool.words, tier, target_count, rng)

    stats = BuildStats()
    questions: List[Question] = []
    last_type: Optional[QuestionType] = None
    for word in targets:
        chosen = pick_type(last_type, tier, rng)
        question = build_with_fallback(chosen, word, pool, last_type, rng, stats)
        if question is None:
            continue
        questions.append(question)
        last_type = QuestionType(question.question_type)

    logger.debug("Generated %d/%d questions (tier %d): %s",
                 len(questions), target_count, tier, stats.to_log_dict())
    return questions[:target_count]

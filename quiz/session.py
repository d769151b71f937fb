"""Level session orchestration and an interactive runner with injectable IO."""

import logging
import random
import time
import uuid
from pathlib import Path
from typing import Callable, List, Optional

from quiz.errors import EmptyVocabularyPoolError
from quiz.models import (
    AnswerOutcome,
    AnswerSubmission,
    LevelContext,
    Question,
    ScoringContext,
    SessionSummary,
)
from quiz.question_generator import generate_questions
from quiz.question_store import InMemoryQuestionStore, QuestionStore
from quiz.question_types import QuestionType
from quiz.scoring import current_streak, points_for, summarize
from quiz.session_log import log_session
from quiz.validator import validate_answer
from quiz.vocabulary import VocabularyPool

logger = logging.getLogger("wordquest.quiz")

UNVALIDATED_MESSAGE = (
    "This answer could not be checked for this session, so it counts as incorrect."
)


def explain(correct: bool, correct_answer: str) -> str:
    if not correct_answer:
        return UNVALIDATED_MESSAGE
    if correct:
        return 'Correct!'
    return f'The correct answer is: {correct_answer}'


class SessionCoordinator:
    """
    Ties question generation, the question store and scoring together.

    One start() per session, read-only lookups while answering, and a
    finish() or abandon() that clears the session's questions.
    """

    def __init__(self, store: QuestionStore, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng or random

    def start(self, session_id: str, context: LevelContext) -> List[Question]:
        """
        Generate and store the questions for a new session.

        Raises:
            EmptyVocabularyPoolError if no question could be produced.
        """
        questions = generate_questions(
            context.pool, context.difficulty_tier, context.target_count, self.rng,
        )
        if not questions:
            raise EmptyVocabularyPoolError(
                f"No words at tier {context.difficulty_tier} or below for this level"
            )
        self.store.put_many(session_id, questions)
        return questions

    def answer(
        self,
        submission: AnswerSubmission,
        pool: VocabularyPool,
        context: ScoringContext,
    ) -> AnswerOutcome:
        """
        Judge and score one submission.

        A word with no stored question for this session (never asked, or
        lost from a volatile store) is judged incorrect with
        UNVALIDATED_MESSAGE and scores nothing.

        Raises:
            KeyError if the word is not in the pool.
            ValueError if the question type is unknown or differs from the
            type of the stored question.
        """
        qtype = QuestionType(submission.question_type)
        word = pool.get(submission.word_id)
        if word is None:
            raise KeyError(f"Word not found: {submission.word_id}")

        stored = self.store.get(submission.session_id, submission.word_id)
        if stored is None:
            logger.warning("Stale lookup: no stored question for session %s word %s",
                           submission.session_id, submission.word_id)
            return AnswerOutcome(
                correct=False,
                correct_answer='',
                points_earned=0,
                streak=0,
                explanation=UNVALIDATED_MESSAGE,
                word_id=word.id,
                question_type=qtype.value,
            )
        if QuestionType(stored.question_type) != qtype:
            raise ValueError(
                f"Word {word.id} was asked as {stored.question_type}, not {qtype.value}"
            )

        result = validate_answer(qtype, word, pool, stored, submission.answer)
        streak = current_streak(context.prior_results, result.is_correct)
        points = points_for(
            result.is_correct, context.response_time_ms, context.difficulty_tier, streak,
        )
        return AnswerOutcome(
            correct=result.is_correct,
            correct_answer=result.correct_answer,
            points_earned=points,
            streak=streak,
            explanation=explain(result.is_correct, result.correct_answer),
            word_id=word.id,
            question_type=qtype.value,
        )

    def finish(
        self,
        session_id: str,
        outcomes: List[AnswerOutcome],
        base_coins: int,
        prior_total_stars: int = 0,
        prior_title: Optional[str] = None,
    ) -> SessionSummary:
        summary = summarize(outcomes, base_coins, prior_total_stars, prior_title)
        removed = self.store.delete_session(session_id)
        logger.debug("Session %s finished; cleared %d stored question(s)", session_id, removed)
        return summary

    def abandon(self, session_id: str) -> int:
        return self.store.delete_session(session_id)


def _resolve_answer(raw: str, options: List[str]) -> str:
    """Accept an option number (1-based) or the option text itself."""
    text = raw.strip()
    if text.isdigit() and 1 <= int(text) <= len(options):
        return options[int(text) - 1]
    return text


def run_level_session(
    context: LevelContext,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
    clock: Callable[[], float] = time.monotonic,
    rng: Optional[random.Random] = None,
    store: Optional[QuestionStore] = None,
    log_path: Optional[Path] = None,
    prior_total_stars: int = 0,
    prior_title: Optional[str] = None,
) -> SessionSummary:
    """
    Play one level in the terminal.

    IO and the clock are injectable for testability. Response time for the
    speed bonus is measured from the start of the session.

    Flow per question:
        1. Show prompt and numbered options
        2. Collect answer (number or text; 'q' quits early)
        3. Judge, score and show feedback

    Returns:
        SessionSummary over the answered questions.
    """
    coordinator = SessionCoordinator(store or InMemoryQuestionStore(), rng)
    session_id = str(uuid.uuid4())
    questions = coordinator.start(session_id, context)
    started = clock()
    outcomes: List[AnswerOutcome] = []

    output_fn(f"\n{'='*60}")
    output_fn(f"LEVEL START -- {len(questions)} question(s), tier {context.difficulty_tier}")
    output_fn(f"{'='*60}")
    output_fn("Answer with the option number. Type 'q' to quit early.\n")

    for i, question in enumerate(questions, 1):
        output_fn(f"\n--- Question {i}/{len(questions)} [{question.question_type}] ---")
        output_fn(f"  {question.prompt}")
        for n, option in enumerate(question.options, 1):
            output_fn(f"    {n}. {option}")

        try:
            raw = input_fn("\nYour answer: ")
        except (EOFError, KeyboardInterrupt):
            output_fn("\nSession ended.")
            break
        if raw.strip().lower() == 'q':
            output_fn("Ending level early.")
            break

        elapsed_ms = int((clock() - started) * 1000)
        outcome = coordinator.answer(
            AnswerSubmission(
                session_id=session_id,
                word_id=question.word_id,
                question_type=question.question_type,
                answer=_resolve_answer(raw, question.options),
            ),
            context.pool,
            ScoringContext(
                prior_results=[o.correct for o in outcomes],
                response_time_ms=elapsed_ms,
                difficulty_tier=context.difficulty_tier,
            ),
        )
        outcomes.append(outcome)
        output_fn(f"  {outcome.explanation}  (+{outcome.points_earned} pts, "
                  f"streak {outcome.streak})")

    summary = coordinator.finish(
        session_id, outcomes, context.base_coins, prior_total_stars, prior_title,
    )

    output_fn(f"\n{'='*60}")
    output_fn("LEVEL COMPLETE")
    output_fn(f"  Score: {summary.score}  Accuracy: {round(summary.accuracy * 100)}%  "
              f"Stars: {summary.stars_earned}  Coins: {summary.coins_earned}")
    if summary.title_changed:
        output_fn(f"  New title: {summary.title}")
    output_fn(f"{'='*60}")

    if log_path and outcomes:
        log_session(log_path, summary, outcomes, level_id=context.level_id or '')

    return summary

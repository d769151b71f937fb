"""Game session service wrappers -- all return JSON-serializable dicts."""

import logging
import random
import time
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession

from quiz.mastery import WordMastery, apply_outcomes, count_mastered
from quiz.models import AnswerOutcome, AnswerSubmission, LevelContext, ScoringContext
from quiz.question_store import QuestionStore
from quiz.scoring import DEFAULT_TITLE
from quiz.session import SessionCoordinator
from quiz.session_log import log_session
from server.db.models import (
    GameSession,
    Level,
    LevelCompletion,
    PlayerProgress,
    SessionAnswer,
    WordMasteryRow,
)
from server.stores import SqlVocabularyStore

logger = logging.getLogger("wordquest.game")

ACTIVE = "active"
COMPLETED = "completed"
ABANDONED = "abandoned"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _get_session(db: DBSession, session_id: str) -> GameSession:
    session = db.get(GameSession, session_id)
    if session is None:
        raise KeyError(f"Session not found: {session_id}")
    return session


def _require_active(session: GameSession) -> None:
    if session.status != ACTIVE:
        raise ValueError(f"Session is not active (status: {session.status})")


def _answer_to_outcome(row: SessionAnswer) -> AnswerOutcome:
    return AnswerOutcome(
        correct=bool(row.is_correct),
        correct_answer=row.correct_answer,
        points_earned=row.points_earned,
        streak=row.streak,
        word_id=row.word_id,
        question_type=row.question_type,
    )


def _session_answers(db: DBSession, session_id: str) -> List[SessionAnswer]:
    return list(db.scalars(
        select(SessionAnswer)
        .where(SessionAnswer.session_id == session_id)
        .order_by(SessionAnswer.id)
    ).all())


def start_game(
    db: DBSession,
    store: QuestionStore,
    player_id: str,
    level_id: str,
    target_count: Optional[int] = None,
    default_target_count: int = 8,
    rng: Optional[random.Random] = None,
    now_ms: Optional[int] = None,
) -> Dict:
    """
    Create a game session and generate its questions.

    The question count is target_count, else the level's target word count,
    else default_target_count.

    Raises:
        KeyError if the level does not exist.
        EmptyVocabularyPoolError if no questions can be generated.
    """
    level = db.get(Level, level_id)
    if level is None:
        raise KeyError(f"Level not found: {level_id}")

    pool = SqlVocabularyStore(db).pool_for_world(level.world_id)
    session = GameSession(
        id=str(uuid.uuid4()),
        player_id=player_id,
        level_id=level.id,
        started_at_ms=now_ms if now_ms is not None else _now_ms(),
        status=ACTIVE,
    )
    db.add(session)
    db.flush()

    context = LevelContext(
        pool=pool,
        difficulty_tier=level.difficulty_tier,
        target_count=target_count or level.target_word_count or default_target_count,
        base_coins=level.base_coins,
        level_id=level.id,
    )
    questions = SessionCoordinator(store, rng).start(session.id, context)
    logger.info("Session %s started: level=%s questions=%d", session.id, level.id, len(questions))

    return {
        'session_id': session.id,
        'level_id': level.id,
        'level_name': level.name,
        'difficulty_tier': level.difficulty_tier,
        'time_limit': level.time_limit_seconds,
        'total_questions': len(questions),
        'questions': [q.public_dict() for q in questions],
    }


def submit_answer(
    db: DBSession,
    store: QuestionStore,
    session_id: str,
    word_id: str,
    question_type: str,
    answer: str,
    now_ms: Optional[int] = None,
) -> Dict:
    """
    Judge, score and record one answer.

    Raises:
        KeyError if the session or word does not exist.
        ValueError if the session is not active, the word was already
        answered in this session, or the question type does not match the
        question that was asked.
    """
    session = _get_session(db, session_id)
    _require_active(session)
    level = db.get(Level, session.level_id)
    pool = SqlVocabularyStore(db).pool_for_world(level.world_id)

    answers = _session_answers(db, session_id)
    if any(row.word_id == word_id for row in answers):
        raise ValueError(f"Word {word_id} was already answered in this session")
    prior = [row.is_correct for row in answers]
    now = now_ms if now_ms is not None else _now_ms()
    response_time_ms = max(0, now - session.started_at_ms)

    outcome = SessionCoordinator(store).answer(
        AnswerSubmission(
            session_id=session_id,
            word_id=word_id,
            question_type=question_type,
            answer=answer,
        ),
        pool,
        ScoringContext(
            prior_results=prior,
            response_time_ms=response_time_ms,
            difficulty_tier=level.difficulty_tier,
        ),
    )

    db.add(SessionAnswer(
        session_id=session_id,
        word_id=word_id,
        question_type=outcome.question_type,
        correct_answer=outcome.correct_answer,
        user_answer=answer,
        is_correct=outcome.correct,
        response_time_ms=response_time_ms,
        points_earned=outcome.points_earned,
        streak=outcome.streak,
    ))
    db.flush()

    return {
        'correct': outcome.correct,
        'correct_answer': outcome.correct_answer,
        'points_earned': outcome.points_earned,
        'streak_count': outcome.streak,
        'explanation': outcome.explanation,
    }


def _update_level_completion(db: DBSession, session: GameSession, stars: int, score: int) -> None:
    completion = db.scalars(
        select(LevelCompletion).where(
            LevelCompletion.player_id == session.player_id,
            LevelCompletion.level_id == session.level_id,
        )
    ).first()
    if completion is None:
        db.add(LevelCompletion(
            player_id=session.player_id,
            level_id=session.level_id,
            best_stars=stars,
            best_score=score,
            times_played=1,
        ))
        return
    completion.best_stars = max(completion.best_stars, stars)
    completion.best_score = max(completion.best_score, score)
    completion.times_played += 1


def _update_word_mastery(db: DBSession, player_id: str, outcomes: List[AnswerOutcome]) -> int:
    """Fold outcomes into word_mastery rows. Returns the player's mastered word count."""
    rows = {
        r.word_id: r
        for r in db.scalars(
            select(WordMasteryRow).where(WordMasteryRow.player_id == player_id)
        ).all()
    }

    records = {
        wid: WordMastery(
            word_id=wid,
            times_correct=r.times_correct,
            times_attempted=r.times_attempted,
            mastery_level=r.mastery_level,
        )
        for wid, r in rows.items()
    }
    apply_outcomes(records, outcomes)

    for wid, record in records.items():
        row = rows.get(wid)
        if row is None:
            row = WordMasteryRow(player_id=player_id, word_id=wid)
            db.add(row)
        row.times_correct = record.times_correct
        row.times_attempted = record.times_attempted
        row.mastery_level = record.mastery_level
    db.flush()

    return count_mastered(records.values())


def complete_game(
    db: DBSession,
    store: QuestionStore,
    session_id: str,
    session_log_path: Optional[Path] = None,
    default_base_coins: int = 100,
    now_ms: Optional[int] = None,
) -> Dict:
    """
    Finish a session: aggregate score, award coins/stars, update progress.

    Raises:
        KeyError if the session does not exist.
        ValueError if the session is not active.
    """
    session = _get_session(db, session_id)
    _require_active(session)
    level = db.get(Level, session.level_id)
    outcomes = [_answer_to_outcome(r) for r in _session_answers(db, session_id)]

    progress = db.get(PlayerProgress, session.player_id)
    if progress is None:
        progress = PlayerProgress(
            player_id=session.player_id,
            total_coins=0,
            total_stars=0,
            current_title=DEFAULT_TITLE,
            words_mastered=0,
        )
        db.add(progress)

    summary = SessionCoordinator(store).finish(
        session_id,
        outcomes,
        base_coins=level.base_coins or default_base_coins,
        prior_total_stars=progress.total_stars,
        prior_title=progress.current_title,
    )

    session.ended_at_ms = now_ms if now_ms is not None else _now_ms()
    session.status = COMPLETED
    session.score = summary.score
    session.coins_earned = summary.coins_earned
    session.accuracy = summary.accuracy
    session.stars_earned = summary.stars_earned

    _update_level_completion(db, session, summary.stars_earned, summary.score)

    progress.total_coins += summary.coins_earned
    progress.total_stars = summary.total_stars
    progress.current_title = summary.title
    progress.words_mastered = _update_word_mastery(db, session.player_id, outcomes)

    if session_log_path and outcomes:
        log_session(session_log_path, summary, outcomes, level_id=session.level_id)

    logger.info("Session %s completed: score=%d stars=%d coins=%d",
                session_id, summary.score, summary.stars_earned, summary.coins_earned)

    return {
        'session_id': session_id,
        'level_id': session.level_id,
        'score': summary.score,
        'accuracy': summary.accuracy,
        'accuracy_percent': round(summary.accuracy * 100),
        'stars_earned': summary.stars_earned,
        'coins_earned': summary.coins_earned,
        'total_coins': progress.total_coins,
        'total_stars': progress.total_stars,
        'words_learned': summary.total_count,
        'questions_correct': summary.correct_count,
        'total_questions': summary.total_count,
        'new_title': summary.title,
        'title_changed': summary.title_changed,
    }


def abandon_game(
    db: DBSession,
    store: QuestionStore,
    session_id: str,
    now_ms: Optional[int] = None,
) -> Dict:
    """Mark an active session abandoned and drop its stored questions."""
    session = _get_session(db, session_id)
    _require_active(session)
    session.status = ABANDONED
    session.ended_at_ms = now_ms if now_ms is not None else _now_ms()
    removed = SessionCoordinator(store).abandon(session_id)
    logger.info("Session %s abandoned; cleared %d stored question(s)", session_id, removed)
    return {'session_id': session_id, 'status': ABANDONED}


def get_session_status(db: DBSession, session_id: str) -> Dict:
    session = _get_session(db, session_id)
    level = db.get(Level, session.level_id)
    return {
        'id': session.id,
        'level_id': session.level_id,
        'level_name': level.name if level else None,
        'started_at_ms': session.started_at_ms,
        'ended_at_ms': session.ended_at_ms,
        'status': session.status,
        'score': session.score,
        'coins_earned': session.coins_earned,
        'accuracy': session.accuracy,
        'stars_earned': session.stars_earned,
        'answers_count': len(_session_answers(db, session_id)),
    }

"""Player statistics: progress overview, per-category mastery, level progress."""

from typing import Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session as DBSession

from quiz.mastery import LEARNING, MASTERED, NEW, PROFICIENT, WordMastery, count_mastered, level_counts
from quiz.scoring import DEFAULT_TITLE
from server.db.models import Level, LevelCompletion, PlayerProgress, VocabularyWord, WordMasteryRow


def _to_record(row: WordMasteryRow) -> WordMastery:
    return WordMastery(
        word_id=row.word_id,
        times_correct=row.times_correct,
        times_attempted=row.times_attempted,
        mastery_level=row.mastery_level,
    )


def level_completions(db: DBSession, player_id: str) -> Dict[str, LevelCompletion]:
    """level_id -> the player's completion row."""
    rows = db.scalars(
        select(LevelCompletion).where(LevelCompletion.player_id == player_id)
    ).all()
    return {r.level_id: r for r in rows}


def total_stars(db: DBSession, player_id: str) -> int:
    progress = db.get(PlayerProgress, player_id)
    return progress.total_stars if progress else 0


def overview(db: DBSession, player_id: str) -> Dict:
    """
    Totals for one player. A player who has never completed a level gets
    zeros and the default title.
    """
    progress = db.get(PlayerProgress, player_id)
    records = [
        _to_record(r)
        for r in db.scalars(
            select(WordMasteryRow).where(WordMasteryRow.player_id == player_id)
        ).all()
    ]
    counts = level_counts(records)
    total_levels = db.scalar(select(func.count()).select_from(Level)) or 0

    return {
        'player_id': player_id,
        'total_coins': progress.total_coins if progress else 0,
        'total_stars': progress.total_stars if progress else 0,
        'current_title': progress.current_title if progress else DEFAULT_TITLE,
        'words_mastered': count_mastered(records),
        'words_learning': counts[LEARNING] + counts[PROFICIENT],
        'levels_completed': len(level_completions(db, player_id)),
        'total_levels': total_levels,
    }


def mastery_breakdown(db: DBSession, player_id: str) -> Dict:
    """Per-category mastery counts with per-word accuracy, categories sorted by name."""
    rows = db.execute(
        select(WordMasteryRow, VocabularyWord)
        .join(VocabularyWord, WordMasteryRow.word_id == VocabularyWord.id)
        .where(WordMasteryRow.player_id == player_id)
        .order_by(VocabularyWord.category, VocabularyWord.word)
    ).all()

    by_category: Dict[str, List] = {}
    for mastery_row, word in rows:
        by_category.setdefault(word.category or '', []).append((_to_record(mastery_row), word))

    categories = []
    for category, items in by_category.items():
        counts = level_counts(record for record, _ in items)
        categories.append({
            'category': category,
            'total': len(items),
            'mastered': counts[MASTERED],
            'proficient': counts[PROFICIENT],
            'learning': counts[LEARNING],
            'new': counts[NEW],
            'words': [
                {
                    'word_id': word.id,
                    'word': word.word,
                    'definition': word.definition,
                    'times_correct': record.times_correct,
                    'times_attempted': record.times_attempted,
                    'mastery_level': record.mastery_level,
                    'accuracy_percent': round(record.accuracy * 100),
                }
                for record, word in items
            ],
        })

    return {'player_id': player_id, 'categories': categories}

"""Session logging -- writes a JSONL line after each completed level."""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from quiz.models import AnswerOutcome, SessionSummary


def log_session(
    log_path: Path,
    summary: SessionSummary,
    outcomes: List[AnswerOutcome],
    level_id: str = '',
) -> Dict:
    """
    Append a level record to the JSONL log file.

    Args:
        log_path: Path to the session log file
        summary:  SessionSummary from the scoring engine
        outcomes: Per-answer outcomes, in answer order
        level_id: Optional level identifier

    Returns:
        The record dict that was written.
    """
    by_type: Dict[str, Dict[str, int]] = {}
    for o in outcomes:
        bucket = by_type.setdefault(o.question_type or 'unknown', {'correct': 0, 'total': 0})
        bucket['total'] += 1
        if o.correct:
            bucket['correct'] += 1

    best_streak = max((o.streak for o in outcomes), default=0)

    record = {
        'timestamp': datetime.now().isoformat(),
        'level_id': level_id,
        **summary.to_dict(),
        'accuracy': round(summary.accuracy, 4),
        'best_streak': best_streak,
        'by_question_type': by_type,
        'answers': [
            {
                'word_id': o.word_id,
                'question_type': o.question_type,
                'correct': o.correct,
                'points_earned': o.points_earned,
                'streak': o.streak,
            }
            for o in outcomes
        ],
    }

    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, 'a', encoding='utf-8') as f:
        f.write(json.dumps(record, ensure_ascii=False) + '\n')

    return record


def read_session_log(log_path: Path) -> List[Dict]:
    """Read all level records from the log file."""
    records = []
    log_path = Path(log_path)
    if not log_path.exists():
        return records
    with open(log_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                records.append(json.loads(line))
    return records

"""Per-word mastery tracking across completed levels."""

from dataclasses import dataclass, asdict
from typing import Dict, Iterable

from quiz.models import AnswerOutcome

NEW = 'new'
LEARNING = 'learning'
PROFICIENT = 'proficient'
MASTERED = 'mastered'


@dataclass
class WordMastery:
    word_id: str
    times_correct: int = 0
    times_attempted: int = 0
    mastery_level: str = NEW

    @property
    def accuracy(self) -> float:
        if self.times_attempted <= 0:
            return 0.0
        return self.times_correct / self.times_attempted

    def to_dict(self) -> Dict:
        return asdict(self)


def mastery_level(times_correct: int, times_attempted: int) -> str:
    """
    Classify a word by its running accuracy.

        mastered:   correct >= 80% of attempts
        proficient: correct >= 50% of attempts
        learning:   at least one correct answer
        new:        otherwise
    """
    if times_attempted <= 0:
        return NEW
    if times_correct >= times_attempted * 0.8:
        return MASTERED
    if times_correct >= times_attempted * 0.5:
        return PROFICIENT
    if times_correct > 0:
        return LEARNING
    return NEW


def apply_outcomes(
    records: Dict[str, WordMastery],
    outcomes: Iterable[AnswerOutcome],
) -> Dict[str, WordMastery]:
    """
    Fold a session's answers into per-word mastery records.

    Mutates and returns records. A word seen for the first time starts at
    'learning' if answered correctly, 'new' otherwise; one lucky answer is
    not mastery.
    """
    for outcome in outcomes:
        record = records.get(outcome.word_id)
        if record is None:
            records[outcome.word_id] = WordMastery(
                word_id=outcome.word_id,
                times_correct=1 if outcome.correct else 0,
                times_attempted=1,
                mastery_level=LEARNING if outcome.correct else NEW,
            )
            continue
        record.times_attempted += 1
        if outcome.correct:
            record.times_correct += 1
        record.mastery_level = mastery_level(record.times_correct, record.times_attempted)
    return records


def count_mastered(records: Iterable[WordMastery]) -> int:
    return sum(1 for r in records if r.mastery_level == MASTERED)


def level_counts(records: Iterable[WordMastery]) -> Dict[str, int]:
    """Number of words at each mastery level, every level present."""
    counts = {MASTERED: 0, PROFICIENT: 0, LEARNING: 0, NEW: 0}
    for r in records:
        counts[r.mastery_level] = counts.get(r.mastery_level, 0) + 1
    return counts

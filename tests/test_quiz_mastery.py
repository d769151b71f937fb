"""Tests for quiz/mastery.py -- per-word mastery levels."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from quiz.mastery import (
    LEARNING,
    MASTERED,
    NEW,
    PROFICIENT,
    WordMastery,
    apply_outcomes,
    count_mastered,
    level_counts,
    mastery_level,
)
from quiz.models import AnswerOutcome


def _outcome(word_id, correct):
    return AnswerOutcome(correct=correct, correct_answer='x', word_id=word_id)


def test_mastery_level_thresholds():
    assert mastery_level(0, 0) == NEW
    assert mastery_level(0, 3) == NEW
    assert mastery_level(1, 3) == LEARNING
    assert mastery_level(2, 4) == PROFICIENT
    assert mastery_level(4, 5) == MASTERED
    assert mastery_level(3, 4) == PROFICIENT


def test_first_correct_answer_is_learning():
    records = apply_outcomes({}, [_outcome('w1', True)])
    assert records['w1'].mastery_level == LEARNING
    assert records['w1'].times_attempted == 1


def test_first_wrong_answer_is_new():
    records = apply_outcomes({}, [_outcome('w1', False)])
    assert records['w1'].mastery_level == NEW
    assert records['w1'].times_correct == 0


def test_repeated_correct_answers_reach_mastered():
    records = {}
    apply_outcomes(records, [_outcome('w1', True)])
    apply_outcomes(records, [_outcome('w1', True)])
    assert records['w1'].mastery_level == MASTERED
    assert count_mastered(records.values()) == 1


def test_existing_record_is_updated():
    records = {'w1': WordMastery('w1', times_correct=4, times_attempted=5, mastery_level=MASTERED)}
    apply_outcomes(records, [_outcome('w1', False)])
    assert records['w1'].times_attempted == 6
    assert records['w1'].mastery_level == PROFICIENT
    assert count_mastered(records.values()) == 0


def test_accuracy():
    assert WordMastery('w01').accuracy == 0.0
    assert WordMastery('w01', times_correct=3, times_attempted=4).accuracy == 0.75


def test_level_counts_includes_every_level():
    records = [
        WordMastery('w01', 1, 1, LEARNING),
        WordMastery('w02', 0, 2, NEW),
        WordMastery('w03', 5, 5, MASTERED),
        WordMastery('w04', 1, 2, LEARNING),
    ]
    assert level_counts(records) == {MASTERED: 1, PROFICIENT: 0, LEARNING: 2, NEW: 1}
    assert level_counts([]) == {MASTERED: 0, PROFICIENT: 0, LEARNING: 0, NEW: 0}


def test_count_mastered_spans_all_records():
    records = {'w01': WordMastery('w01', 5, 5, MASTERED)}
    apply_outcomes(records, [_outcome('w02', True)])
    assert count_mastered(records.values()) == 1

"""Tests for quiz/question_store.py -- in-memory question storage."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from quiz.models import Question
from quiz.question_store import InMemoryQuestionStore


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def _question(word_id='w01'):
    return Question(word_id=word_id, word='vivid', question_type='true_false',
                    prompt='p', options=['True', 'False'], correct_index=1)


def test_put_and_get():
    store = InMemoryQuestionStore()
    store.put('s1', _question())
    got = store.get('s1', 'w01')
    assert got is not None
    assert got.correct_answer == 'False'


def test_get_missing_returns_none():
    store = InMemoryQuestionStore()
    assert store.get('s1', 'w01') is None
    store.put('s1', _question())
    assert store.get('s2', 'w01') is None


def test_put_many_and_delete_session():
    store = InMemoryQuestionStore()
    store.put_many('s1', [_question('w01'), _question('w02')])
    store.put('s2', _question('w01'))
    assert store.delete_session('s1') == 2
    assert store.get('s1', 'w01') is None
    assert store.get('s2', 'w01') is not None
    assert store.delete_session('s1') == 0


def test_expired_sessions_are_evicted():
    clock = FakeClock()
    store = InMemoryQuestionStore(ttl_seconds=60, clock=clock)
    store.put('old', _question())
    clock.now = 30
    store.put('new', _question())
    clock.now = 61
    assert store.evict_expired() == 1
    assert store.get('old', 'w01') is None
    assert store.get('new', 'w01') is not None


def test_access_refreshes_ttl():
    clock = FakeClock()
    store = InMemoryQuestionStore(ttl_seconds=60, clock=clock)
    store.put('s1', _question())
    clock.now = 50
    assert store.get('s1', 'w01') is not None
    clock.now = 100
    assert store.get('s1', 'w01') is not None
    clock.now = 200
    assert store.get('s1', 'w01') is None
    assert store.session_count() == 0

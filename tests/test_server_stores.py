"""Tests for server/stores.py, server/runtime.py and server/config.py."""

import sys
import tempfile
import time
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from quiz.models import Question
from quiz.question_store import InMemoryQuestionStore
from quiz.question_types import RelationshipType
from server.config import Settings
from server.db import GameSession, Level, World, get_db, init_db
from server.db.session import reset_engine
from server.runtime import Runtime, runtime_from_settings
from server.services import content_service
from server.stores import SqlQuestionStore, SqlVocabularyStore
from sample_vocab import vocabulary_payload


def _settings(tmp: Path) -> Settings:
    return Settings(database_url=f"sqlite:///{tmp / 'test.db'}", data_root=tmp,
                    question_store='sql')


def _question(word_id='w01', correct_index=0):
    return Question(word_id=word_id, word='vivid', question_type='true_false',
                    prompt='p', options=['True', 'False'], correct_index=correct_index)


def test_sql_question_store_round_trip():
    with tempfile.TemporaryDirectory() as tmp:
        settings = _settings(Path(tmp))
        reset_engine()
        init_db(settings)
        try:
            with get_db(settings) as db:
                db.add(World(id='meadow', name='Meadow'))
                db.add(Level(id='meadow-1', world_id='meadow', name='One'))
                db.add(GameSession(id='s1', player_id='p1', level_id='meadow-1',
                                   started_at_ms=int(time.time() * 1000)))
                db.flush()
                store = SqlQuestionStore(db)
                store.put('s1', _question('w01', 0))
                store.put('s1', _question('w01', 1))
                store.put('s1', _question('w02', 0))

            with get_db(settings) as db:
                store = SqlQuestionStore(db)
                assert store.get('s1', 'w01').correct_answer == 'False'
                assert store.get('s1', 'w09') is None
                assert store.delete_session('s1') == 2

            with get_db(settings) as db:
                assert SqlQuestionStore(db).get('s1', 'w02') is None
        finally:
            reset_engine()


def test_sql_vocabulary_store_builds_pool():
    with tempfile.TemporaryDirectory() as tmp:
        settings = _settings(Path(tmp))
        reset_engine()
        init_db(settings)
        try:
            with get_db(settings) as db:
                content_service.import_content(db, {
                    'worlds': [{'id': 'meadow', 'name': 'Meadow'}],
                    'vocabulary': vocabulary_payload(),
                })
            with get_db(settings) as db:
                pool = SqlVocabularyStore(db).pool_for_world('meadow')
                assert len(pool) == 20
                gentle = pool.get('w02')
                assert pool.first_related(gentle, RelationshipType.ANTONYM).word == 'harsh'
                assert not SqlVocabularyStore(db).pool_for_world('desert')
        finally:
            reset_engine()


def test_sql_vocabulary_store_pulls_in_other_world_edge_targets():
    with tempfile.TemporaryDirectory() as tmp:
        settings = _settings(Path(tmp))
        reset_engine()
        init_db(settings)
        try:
            with get_db(settings) as db:
                content_service.import_content(db, {
                    'worlds': [{'id': 'meadow', 'name': 'Meadow'},
                               {'id': 'desert', 'name': 'Desert'}],
                    'vocabulary': vocabulary_payload() + [{
                        'id': 'd01', 'word': 'arid', 'definition': 'having little rain',
                        'part_of_speech': 'adjective', 'world_id': 'desert',
                    }],
                    'relationships': [{'word_id': 'w10', 'related_word_id': 'd01',
                                       'relationship_type': 'antonym'}],
                })
            with get_db(settings) as db:
                pool = SqlVocabularyStore(db).pool_for_world('meadow')
                assert len(pool) == 20
                assert pool.get('d01') is None
                brook = pool.get('w10')
                assert pool.first_related(brook, RelationshipType.ANTONYM).word == 'arid'
        finally:
            reset_engine()


def test_runtime_memory_store_is_shared():
    runtime = Runtime(question_store='memory', question_ttl_seconds=60)
    store = runtime.question_store_for(None)
    assert isinstance(store, InMemoryQuestionStore)
    assert runtime.question_store_for(None) is store
    assert store.ttl_seconds == 60
    runtime.reset()
    assert runtime.question_store_for(None) is not store


def test_runtime_sql_store_per_session():
    runtime = Runtime(question_store='sql')
    sentinel = object()
    store = runtime.question_store_for(sentinel)
    assert isinstance(store, SqlQuestionStore)
    assert store.db is sentinel


def test_runtime_from_settings():
    with tempfile.TemporaryDirectory() as tmp:
        settings = Settings(data_root=Path(tmp), question_store='memory', question_ttl_minutes=5)
        runtime = runtime_from_settings(settings)
        assert runtime.question_store_kind == 'memory'
        assert runtime.question_ttl_seconds == 300


def test_settings_env_overrides(monkeypatch):
    monkeypatch.setenv('QUESTION_STORE', 'MEMORY')
    monkeypatch.setenv('DEFAULT_BASE_COINS', '150')
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///env.db')
    settings = Settings()
    assert settings.question_store == 'memory'
    assert settings.default_base_coins == 150
    assert settings.log_level == 'DEBUG'
    assert settings.database_url == 'sqlite:///env.db'


def test_settings_explicit_value_beats_env(monkeypatch):
    monkeypatch.setenv('QUESTION_STORE', 'memory')
    assert Settings(question_store='sql').question_store == 'sql'


def test_settings_rejects_unknown_store():
    with pytest.raises(ValueError):
        Settings(question_store='redis')


def test_settings_session_log_defaults_under_data_root():
    with tempfile.TemporaryDirectory() as tmp:
        settings = Settings(data_root=Path(tmp))
        assert settings.session_log_path == Path(tmp) / 'session_log.jsonl'

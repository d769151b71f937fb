"""Tests for quiz/question_builder.py -- per-type builders and fallback."""

import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from quiz.question_builder import (
    BUILDERS,
    BuildStats,
    build,
    build_with_fallback,
)
from quiz.question_types import QuestionType
from quiz.validator import canonical_answer
from quiz.vocabulary import VocabularyPool
from sample_vocab import TIER_ONE, FixedRandom, make_entry, make_pool

Q = QuestionType


def _pool():
    return make_pool()


def _word(pool, word_id):
    return pool.get(word_id)


def _assert_well_formed(question):
    assert 0 <= question.correct_index < len(question.options)
    assert len(set(question.options)) == len(question.options)


# ============================================================================
# Tests: individual builders
# ============================================================================

def test_every_type_has_a_builder():
    assert set(BUILDERS) == set(QuestionType)


def test_definition_question():
    pool = _pool()
    word = _word(pool, 'w01')
    result = build(Q.DEFINITION, word, pool, random.Random(1))
    assert result.ok
    q = result.question
    _assert_well_formed(q)
    assert q.correct_answer == word.definition
    assert len(q.options) == 4
    assert q.prompt == 'What does "vivid" mean?'


def test_definition_single_word_pool_has_one_option():
    pool = make_pool([TIER_ONE[0]], [])
    result = build(Q.DEFINITION, pool.get('w01'), pool, random.Random(1))
    assert result.ok
    assert result.question.options == ['bright and strong in color']
    assert result.question.correct_index == 0


def test_fill_blank_question():
    pool = _pool()
    word = _word(pool, 'w01')
    for seed in range(10):
        q = build(Q.FILL_BLANK, word, pool, random.Random(seed)).question
        _assert_well_formed(q)
        assert q.correct_answer == 'vivid'
        assert '___' in q.prompt
        assert 'vivid' not in q.prompt.lower()
        assert q.prompt.startswith('Fill in the blank: "')
        wrong = [o for o in q.options if o != 'vivid']
        adjectives = {w.word for w in pool.words if w.part_of_speech == 'adjective'}
        assert set(wrong) <= adjectives


def test_fill_blank_requires_example_sentence():
    row = ('w01', 'vivid', 'bright and strong in color', 'adjective', 1, '', 'description')
    pool = make_pool([row] + TIER_ONE[1:], [])
    result = build(Q.FILL_BLANK, pool.get('w01'), pool, random.Random(1))
    assert not result.ok
    assert result.reason


def test_fill_blank_requires_same_part_of_speech():
    rows = [TIER_ONE[0], TIER_ONE[4], TIER_ONE[8]]  # one adjective, a verb, a noun
    pool = make_pool(rows, [])
    result = build(Q.FILL_BLANK, pool.get('w01'), pool, random.Random(1))
    assert not result.ok


def test_synonym_question():
    pool = _pool()
    word = _word(pool, 'w01')
    for seed in range(10):
        q = build(Q.SYNONYM, word, pool, random.Random(seed)).question
        _assert_well_formed(q)
        assert q.correct_answer == 'bright'
        assert 'vivid' not in q.options
        assert len(q.options) == 4


def test_synonym_without_edge_is_no_candidate():
    pool = _pool()
    result = build(Q.SYNONYM, _word(pool, 'w09'), pool, random.Random(1))
    assert not result.ok


def test_synonym_edge_to_missing_word_is_no_candidate():
    pool = make_pool(TIER_ONE, [('w01', 'w99', 'synonym')])
    result = build(Q.SYNONYM, pool.get('w01'), pool, random.Random(1))
    assert not result.ok


def test_antonym_question_excludes_all_antonyms():
    pool = make_pool(TIER_ONE, [('w13', 'w14', 'antonym'), ('w13', 'w15', 'antonym')])
    word = pool.get('w13')
    for seed in range(20):
        q = build(Q.ANTONYM, word, pool, random.Random(seed)).question
        _assert_well_formed(q)
        assert q.correct_answer == 'slowly'
        assert 'quietly' not in q.options
        assert 'quickly' not in q.options
        assert 'OPPOSITE' in q.prompt


def test_reverse_definition_question():
    pool = _pool()
    word = _word(pool, 'w09')
    q = build(Q.REVERSE_DEFINITION, word, pool, random.Random(2)).question
    _assert_well_formed(q)
    assert q.correct_answer == 'meadow'
    assert word.definition in q.prompt


def test_reverse_definition_uses_near_tier_distractors():
    pool = _pool()
    word = _word(pool, 'w20')  # tier 5
    for seed in range(10):
        q = build(Q.REVERSE_DEFINITION, word, pool, random.Random(seed)).question
        tiers = {w.difficulty_tier for w in pool.words if w.word in q.options and w.id != 'w20'}
        assert tiers <= {4, 5}


def test_true_false_true_case():
    pool = _pool()
    word = _word(pool, 'w01')
    q = build(Q.TRUE_FALSE, word, pool, FixedRandom(0.1)).question
    assert q.options == ['True', 'False']
    assert q.correct_answer == 'True'
    assert q.prompt == '"vivid" means "bright and strong in color". True or False?'


def test_true_false_false_case():
    pool = _pool()
    word = _word(pool, 'w01')
    q = build(Q.TRUE_FALSE, word, pool, FixedRandom(0.9)).question
    assert q.options == ['True', 'False']
    assert q.correct_answer == 'False'
    assert word.definition not in q.prompt


def test_true_false_false_case_needs_another_definition():
    pool = make_pool([TIER_ONE[0]], [])
    assert not build(Q.TRUE_FALSE, pool.get('w01'), pool, FixedRandom(0.9)).ok
    assert build(Q.TRUE_FALSE, pool.get('w01'), pool, FixedRandom(0.1)).ok


def test_example_sentence_question():
    pool = _pool()
    word = _word(pool, 'w05')
    for seed in range(10):
        q = build(Q.EXAMPLE_SENTENCE, word, pool, random.Random(seed)).question
        _assert_well_formed(q)
        assert q.correct_answer == word.example_sentence
        assert len(q.options) == 4
        for option in q.options:
            assert 'wander' in option


def test_example_sentence_needs_three_other_sentences():
    pool = make_pool(TIER_ONE[:3], [])
    assert not build(Q.EXAMPLE_SENTENCE, pool.get('w01'), pool, random.Random(1)).ok


def test_spelling_question():
    pool = _pool()
    word = _word(pool, 'w01')
    for seed in range(10):
        q = build(Q.SPELLING, word, pool, random.Random(seed)).question
        _assert_well_formed(q)
        assert q.correct_answer == 'vivid'
        assert len(q.options) == 4
        assert word.definition in q.prompt


def test_spelling_rejects_short_words():
    row = ('w99', 'ox', 'a large farm animal', 'noun', 1, 'The ox pulled the cart.', 'thing')
    pool = make_pool([row] + TIER_ONE, [])
    assert not build(Q.SPELLING, pool.get('w99'), pool, random.Random(1)).ok


def test_options_agree_with_canonical_answers():
    """For every buildable type, the marked option is what validation expects."""
    pool = _pool()
    for seed in range(5):
        rng = random.Random(seed)
        for word in pool.words:
            for qtype in QuestionType:
                result = build(qtype, word, pool, rng)
                if not result.ok:
                    continue
                q = result.question
                _assert_well_formed(q)
                expected = canonical_answer(qtype, word, pool, q)
                assert q.correct_answer == expected, (word.id, qtype)


# ============================================================================
# Tests: fallback chain
# ============================================================================

def test_fallback_reaches_definition():
    pool = make_pool([TIER_ONE[8]], [])
    q = build_with_fallback(Q.SYNONYM, pool.get('w09'), pool, rng=random.Random(1))
    assert q.question_type == 'definition'


def test_fallback_skips_last_type():
    pool = make_pool([TIER_ONE[8]], [])
    q = build_with_fallback(Q.SYNONYM, pool.get('w09'), pool,
                            last_type=Q.DEFINITION, rng=random.Random(1))
    assert q.question_type == 'reverse_definition'


def test_chosen_type_equal_to_last_is_not_used():
    pool = _pool()
    q = build_with_fallback(Q.SYNONYM, pool.get('w01'), pool,
                            last_type=Q.SYNONYM, rng=random.Random(1))
    assert q.question_type != 'synonym'


def test_chosen_type_used_when_buildable():
    pool = _pool()
    q = build_with_fallback(Q.ANTONYM, pool.get('w02'), pool, rng=random.Random(1))
    assert q.question_type == 'antonym'
    assert q.correct_answer == 'harsh'


def test_fallback_always_returns_a_question():
    lonely = make_entry(('x1', 'zz', 'nothing much', 'noun', 1, '', ''))
    pool = VocabularyPool([lonely])
    for qtype in QuestionType:
        q = build_with_fallback(qtype, lonely, pool, rng=random.Random(0))
        assert q is not None
        _assert_well_formed(q)


def test_stats_count_builds_and_fallbacks():
    pool = make_pool([TIER_ONE[8]], [])
    stats = BuildStats()
    build_with_fallback(Q.SYNONYM, pool.get('w09'), pool, rng=random.Random(1), stats=stats)
    assert stats.no_candidate == {'synonym': 1}
    assert stats.built == {'definition': 1}
    assert stats.fallbacks_used == 1
    log = stats.to_log_dict()
    assert log['built_definition'] == 1
    assert log['none_synonym'] == 1
    assert log['terminal_definition'] == 0

"""
Quiz engine CLI.

Usage:
    python -m quiz.cli --vocab vocabulary.jsonl worlds
    python -m quiz.cli --vocab vocabulary.jsonl generate --world forest --tier 2 [--count 8] [--seed 7]
    python -m quiz.cli --vocab vocabulary.jsonl play --world forest --tier 1 [--base-coins 100]
"""

import argparse
import json
import random
import sys
from pathlib import Path

from quiz.errors import EmptyVocabularyPoolError
from quiz.models import LevelContext
from quiz.question_generator import generate_questions
from quiz.session import run_level_session
from quiz.vocabulary import JsonlVocabularyStore


def _load_store(args) -> JsonlVocabularyStore:
    path = Path(args.vocab)
    if not path.exists():
        print(f"Vocabulary file not found: {path}")
        sys.exit(1)
    return JsonlVocabularyStore(path)


def _rng(args):
    return random.Random(args.seed) if args.seed is not None else None


def cmd_worlds(args):
    """List worlds and their word counts."""
    store = _load_store(args)
    worlds = store.world_ids()
    if not worlds:
        print("No vocabulary loaded.")
        return
    for world_id in worlds:
        print(f"  {world_id}: {len(store.words_for_world(world_id))} word(s)")


def cmd_generate(args):
    """Print a generated question sequence as JSON."""
    store = _load_store(args)
    pool = store.pool_for_world(args.world)
    try:
        questions = generate_questions(pool, args.tier, args.count, _rng(args))
    except EmptyVocabularyPoolError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(json.dumps([q.to_dict() for q in questions], indent=2, ensure_ascii=False))


def cmd_play(args):
    """Play a level interactively."""
    store = _load_store(args)
    context = LevelContext(
        pool=store.pool_for_world(args.world),
        difficulty_tier=args.tier,
        target_count=args.count,
        base_coins=args.base_coins,
        level_id=f"{args.world}:{args.tier}",
    )
    log_path = Path(args.log) if args.log else Path(args.vocab).parent / 'session_log.jsonl'
    try:
        run_level_session(context, rng=_rng(args), log_path=log_path)
    except EmptyVocabularyPoolError as e:
        print(f"Error: {e}")
        sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Vocabulary quiz engine: generate and play levels",
    )
    parser.add_argument(
        '--vocab', default='vocabulary.jsonl',
        help="Path to vocabulary JSONL file (default: vocabulary.jsonl)",
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('worlds', help='List worlds in the vocabulary file')

    for name, help_text in (('generate', 'Print generated questions as JSON'),
                            ('play', 'Play a level interactively')):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('--world', required=True, help='World identifier')
        sub.add_argument('--tier', type=int, default=1, help='Difficulty tier 1-5 (default: 1)')
        sub.add_argument('--count', type=int, default=8, help='Number of questions (default: 8)')
        sub.add_argument('--seed', type=int, default=None, help='Random seed')
        if name == 'play':
            sub.add_argument('--base-coins', type=int, default=100,
                             help='Level base coins (default: 100)')
            sub.add_argument('--log', default=None,
                             help='Session log path (default: <vocab_dir>/session_log.jsonl)')

    args = parser.parse_args(argv)

    if args.command == 'worlds':
        cmd_worlds(args)
    elif args.command == 'generate':
        cmd_generate(args)
    elif args.command == 'play':
        cmd_play(args)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()

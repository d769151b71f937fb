"""Content import and lookup: worlds, levels, vocabulary, relationships."""

from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession

from quiz.models import VocabularyEntry, WordRelationship
from server.db.models import Level, VocabularyWord, WordRelationshipRow, World
from server.services import stats_service


def _existing_edges(db: DBSession, word_ids: Set[str]) -> Set[Tuple[str, str, str]]:
    if not word_ids:
        return set()
    rows = db.scalars(
        select(WordRelationshipRow).where(WordRelationshipRow.word_id.in_(word_ids))
    ).all()
    return {(r.word_id, r.related_word_id, r.relationship_type) for r in rows}


def import_content(db: DBSession, payload: Dict) -> Dict[str, int]:
    """
    Upsert worlds, levels and vocabulary; add relationship edges not yet stored.

    Vocabulary entries may carry a nested 'relationships' list like the JSONL
    vocabulary format. Relationships may also be listed at the top level.
    Returned counts are rows written; an edge already present is skipped
    and not counted.

    Raises:
        ValueError on a malformed entry (unknown part of speech, bad tier,
        unknown relationship type, missing field).
    """
    counts = {'worlds': 0, 'levels': 0, 'vocabulary': 0, 'relationships': 0}

    for w in payload.get('worlds', []):
        try:
            db.merge(World(
                id=w['id'],
                name=w['name'],
                description=w.get('description', ''),
                display_order=int(w.get('display_order', 0)),
                unlock_stars_required=int(w.get('unlock_stars_required', 0)),
            ))
        except KeyError as e:
            raise ValueError(f"World is missing field {e}") from e
        counts['worlds'] += 1
    db.flush()

    for lv in payload.get('levels', []):
        try:
            tier = int(lv.get('difficulty_tier', 1))
            if not 1 <= tier <= 5:
                raise ValueError(f"Level {lv.get('id')}: difficulty_tier must be 1-5, got {tier}")
            db.merge(Level(
                id=lv['id'],
                world_id=lv['world_id'],
                level_number=int(lv.get('level_number', 1)),
                name=lv['name'],
                difficulty_tier=tier,
                target_word_count=int(lv.get('target_word_count', 8)),
                time_limit_seconds=int(lv.get('time_limit_seconds', 120)),
                base_coins=int(lv.get('base_coins', 100)),
            ))
        except KeyError as e:
            raise ValueError(f"Level is missing field {e}") from e
        counts['levels'] += 1
    db.flush()

    edges: List[WordRelationship] = []
    for data in payload.get('vocabulary', []):
        try:
            entry = VocabularyEntry.from_dict(data)
            for rel in data.get('relationships') or []:
                edges.append(WordRelationship.from_dict({
                    'word_id': entry.id,
                    'related_word_id': rel['related_word_id'],
                    'relationship_type': rel['relationship_type'],
                }))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid vocabulary entry: {e}") from e
        db.merge(VocabularyWord(**entry.to_dict()))
        counts['vocabulary'] += 1
    db.flush()

    try:
        edges.extend(WordRelationship.from_dict(r) for r in payload.get('relationships', []))
    except (KeyError, TypeError) as e:
        raise ValueError(f"Invalid relationship: {e}") from e
    seen = _existing_edges(db, {e.word_id for e in edges})
    for edge in edges:
        key = (edge.word_id, edge.related_word_id, edge.relationship_type)
        if key in seen:
            continue
        seen.add(key)
        db.add(WordRelationshipRow(**edge.to_dict()))
        counts['relationships'] += 1
    db.flush()

    return counts


def list_worlds(db: DBSession, player_id: Optional[str] = None) -> Dict:
    """
    All worlds in display order. With a player_id, each world also carries
    the player's stars and completed levels there; a world is unlocked once
    the player's total stars reach its requirement.
    """
    worlds = db.scalars(select(World).order_by(World.display_order, World.id)).all()
    completions = stats_service.level_completions(db, player_id) if player_id else {}
    stars_total = stats_service.total_stars(db, player_id) if player_id else 0

    out = []
    for w in worlds:
        word_count = len(db.scalars(
            select(VocabularyWord.id).where(VocabularyWord.world_id == w.id)
        ).all())
        level_ids = db.scalars(select(Level.id).where(Level.world_id == w.id)).all()
        done = [completions[lid] for lid in level_ids if lid in completions]
        out.append({
            'id': w.id,
            'name': w.name,
            'description': w.description,
            'display_order': w.display_order,
            'unlock_stars_required': w.unlock_stars_required,
            'word_count': word_count,
            'total_levels': len(level_ids),
            'levels_completed': len(done),
            'stars_earned': sum(c.best_stars for c in done),
            'unlocked': stars_total >= w.unlock_stars_required,
        })
    return {'worlds': out}


def list_levels(db: DBSession, world_id: str, player_id: Optional[str] = None) -> Dict:
    """
    Levels of a world in order, with the player's best result per level
    when a player_id is given.

    Raises KeyError if the world does not exist.
    """
    if db.get(World, world_id) is None:
        raise KeyError(f"World not found: {world_id}")
    levels = db.scalars(
        select(Level).where(Level.world_id == world_id).order_by(Level.level_number)
    ).all()
    completions = stats_service.level_completions(db, player_id) if player_id else {}

    out = []
    for lv in levels:
        completion = completions.get(lv.id)
        out.append({
            'id': lv.id,
            'level_number': lv.level_number,
            'name': lv.name,
            'difficulty_tier': lv.difficulty_tier,
            'target_word_count': lv.target_word_count,
            'time_limit_seconds': lv.time_limit_seconds,
            'base_coins': lv.base_coins,
            'completed': completion is not None,
            'best_stars': completion.best_stars if completion else 0,
            'best_score': completion.best_score if completion else 0,
            'times_played': completion.times_played if completion else 0,
        })
    return {'world_id': world_id, 'levels': out}

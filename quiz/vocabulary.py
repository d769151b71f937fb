"""Read-only vocabulary access: in-memory pools and the JSONL-backed store."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from quiz.models import VocabularyEntry, WordRelationship
from quiz.question_types import RelationshipType


class VocabularyPool:
    """
    A world's vocabulary plus the relationship edges leaving its words.

    Edges keep their discovery order, so first_related() is stable for a
    given load. Edge targets may live in another world: pass them as
    related_entries so they resolve without joining the question pool
    (words). Edges pointing at unknown ids are ignored.
    """

    def __init__(
        self,
        words: Iterable[VocabularyEntry],
        relationships: Iterable[WordRelationship] = (),
        related_entries: Iterable[VocabularyEntry] = (),
    ):
        self._words: List[VocabularyEntry] = list(words)
        self._related_by_id: Dict[str, VocabularyEntry] = {w.id: w for w in related_entries}
        self._by_id: Dict[str, VocabularyEntry] = {w.id: w for w in self._words}
        self._edges: Dict[tuple, List[str]] = {}
        for rel in relationships:
            key = (rel.word_id, rel.relationship_type)
            self._edges.setdefault(key, []).append(rel.related_word_id)

    @property
    def words(self) -> List[VocabularyEntry]:
        return list(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __bool__(self) -> bool:
        return bool(self._words)

    def get(self, word_id: str) -> Optional[VocabularyEntry]:
        return self._by_id.get(word_id)

    def related_ids(self, word: VocabularyEntry, rel_type: RelationshipType) -> List[str]:
        return list(self._edges.get((word.id, RelationshipType(rel_type).value), []))

    def related(self, word: VocabularyEntry, rel_type: RelationshipType) -> List[VocabularyEntry]:
        out = []
        for rid in self.related_ids(word, rel_type):
            entry = self._by_id.get(rid) or self._related_by_id.get(rid)
            if entry is not None:
                out.append(entry)
        return out

    def first_related(
        self, word: VocabularyEntry, rel_type: RelationshipType,
    ) -> Optional[VocabularyEntry]:
        related = self.related(word, rel_type)
        return related[0] if related else None


class VocabularyStore(ABC):
    """Read-only provider of vocabulary rows and relationship edges."""

    @abstractmethod
    def words_for_world(self, world_id: str) -> List[VocabularyEntry]:
        ...

    @abstractmethod
    def relationships_for(self, word_ids: Iterable[str]) -> List[WordRelationship]:
        ...

    @abstractmethod
    def words_by_ids(self, word_ids: Iterable[str]) -> List[VocabularyEntry]:
        """Entries for the given ids in any world; unknown ids are skipped."""

    def pool_for_world(self, world_id: str) -> VocabularyPool:
        """
        The world's words, their outgoing edges, and any edge targets that
        live in other worlds.
        """
        words = self.words_for_world(world_id)
        own = {w.id for w in words}
        edges = self.relationships_for(own)
        outside = sorted({e.related_word_id for e in edges} - own)
        related = self.words_by_ids(outside) if outside else []
        return VocabularyPool(words, edges, related)


class JsonlVocabularyStore(VocabularyStore):
    """
    JSONL-backed vocabulary.

    One entry per line. An entry may carry a nested 'relationships' list of
    {related_word_id, relationship_type} dicts. The whole file is loaded
    into memory on init.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._words: Dict[str, VocabularyEntry] = {}
        self._relationships: List[WordRelationship] = []
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        with open(self.path, 'r', encoding='utf-8') as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                data = json.loads(line)
                try:
                    entry = VocabularyEntry.from_dict(data)
                    for rel in data.get('relationships') or []:
                        self._relationships.append(WordRelationship.from_dict({
                            'word_id': entry.id,
                            'related_word_id': rel['related_word_id'],
                            'relationship_type': rel['relationship_type'],
                        }))
                except (KeyError, TypeError, ValueError) as e:
                    raise ValueError(f"{self.path}:{lineno}: invalid vocabulary entry: {e}") from e
                self._words[entry.id] = entry

    def words_for_world(self, world_id: str) -> List[VocabularyEntry]:
        words = [w for w in self._words.values() if w.world_id == world_id]
        words.sort(key=lambda w: w.difficulty_tier)
        return words

    def relationships_for(self, word_ids: Iterable[str]) -> List[WordRelationship]:
        wanted = set(word_ids)
        return [r for r in self._relationships if r.word_id in wanted]

    def words_by_ids(self, word_ids: Iterable[str]) -> List[VocabularyEntry]:
        return [self._words[wid] for wid in word_ids if wid in self._words]

    def world_ids(self) -> List[str]:
        return sorted({w.world_id for w in self._words.values()})

    def count(self) -> int:
        return len(self._words)

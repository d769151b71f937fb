"""Data models for the quiz engine: vocabulary, questions, answers and scoring."""

from dataclasses import dataclass, field, asdict
from typing import TYPE_CHECKING, Dict, List, Optional

from quiz.question_types import PartOfSpeech, RelationshipType

if TYPE_CHECKING:
    from quiz.vocabulary import VocabularyPool


def _known_fields(cls, data: Dict) -> Dict:
    return {k: v for k, v in data.items() if k in cls.__dataclass_fields__}


@dataclass(frozen=True)
class VocabularyEntry:
    """A read-only vocabulary record belonging to one world."""
    id: str
    word: str
    definition: str
    part_of_speech: str = PartOfSpeech.NOUN.value
    difficulty_tier: int = 1
    example_sentence: str = ''
    category: str = ''
    world_id: str = ''

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'VocabularyEntry':
        data = _known_fields(cls, data)
        # Validates the value; raises ValueError on an unknown part of speech
        data['part_of_speech'] = PartOfSpeech(data.get('part_of_speech', 'noun')).value
        tier = int(data.get('difficulty_tier', 1))
        if not 1 <= tier <= 5:
            raise ValueError(f"difficulty_tier must be 1-5, got {tier}")
        data['difficulty_tier'] = tier
        data['example_sentence'] = data.get('example_sentence') or ''
        data['category'] = data.get('category') or ''
        return cls(**data)


@dataclass(frozen=True)
class WordRelationship:
    """Directed edge from a word to a related word."""
    word_id: str
    related_word_id: str
    relationship_type: str

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'WordRelationship':
        data = _known_fields(cls, data)
        data['relationship_type'] = RelationshipType(data['relationship_type']).value
        return cls(**data)


@dataclass
class Question:
    """
    A generated quiz question.

    correct_index always points into options; options[correct_index] is the
    canonical answer for the question type at generation time.
    """
    word_id: str
    word: str
    question_type: str
    prompt: str
    options: List[str] = field(default_factory=list)
    correct_index: int = 0

    @property
    def correct_answer(self) -> str:
        return self.options[self.correct_index]

    def to_dict(self) -> Dict:
        return asdict(self)

    def public_dict(self) -> Dict:
        """Client-facing view: everything except the correct index."""
        d = self.to_dict()
        d.pop('correct_index')
        return d

    @classmethod
    def from_dict(cls, data: Dict) -> 'Question':
        data = _known_fields(cls, data)
        data['options'] = list(data.get('options', []))
        return cls(**data)


@dataclass
class AnswerSubmission:
    session_id: str
    word_id: str
    question_type: str
    answer: str


@dataclass
class AnswerOutcome:
    """Result of judging and scoring a single submission."""
    correct: bool
    correct_answer: str
    points_earned: int = 0
    streak: int = 0
    explanation: str = ''
    word_id: str = ''
    question_type: str = ''

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'AnswerOutcome':
        return cls(**_known_fields(cls, data))


@dataclass
class ScoringContext:
    """
    Per-session scoring state supplied by the session layer.

    prior_results holds the correctness of earlier answers, oldest first.
    """
    prior_results: List[bool] = field(default_factory=list)
    response_time_ms: int = 0
    difficulty_tier: int = 1


@dataclass
class LevelContext:
    """Everything needed to generate the questions for one level."""
    pool: 'VocabularyPool'
    difficulty_tier: int = 1
    target_count: int = 8
    base_coins: int = 100
    level_id: Optional[str] = None


@dataclass
class SessionSummary:
    score: int
    accuracy: float
    correct_count: int
    total_count: int
    stars_earned: int
    coins_earned: int
    total_stars: int
    title: str
    title_changed: bool

    def to_dict(self) -> Dict:
        return asdict(self)


"""Enumerations for question types, parts of speech and word relationships."""

from enum import Enum


class QuestionType(str, Enum):
    """Types of quiz questions the generator can build."""
    DEFINITION = "definition"
    FILL_BLANK = "fill_blank"
    SYNONYM = "synonym"
    REVERSE_DEFINITION = "reverse_definition"
    TRUE_FALSE = "true_false"
    EXAMPLE_SENTENCE = "example_sentence"
    ANTONYM = "antonym"
    SPELLING = "spelling"


class PartOfSpeech(str, Enum):
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"


class RelationshipType(str, Enum):
    SYNONYM = "synonym"
    ANTONYM = "antonym"

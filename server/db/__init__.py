"""Database layer: SQLAlchemy models and session."""

from server.db.models import (
    Base,
    GameSession,
    Level,
    LevelCompletion,
    PlayerProgress,
    SessionAnswer,
    SessionQuestion,
    VocabularyWord,
    WordMasteryRow,
    WordRelationshipRow,
    World,
)
from server.db.session import get_db, init_db

__all__ = [
    "Base",
    "GameSession",
    "Level",
    "LevelCompletion",
    "PlayerProgress",
    "SessionAnswer",
    "SessionQuestion",
    "VocabularyWord",
    "WordMasteryRow",
    "WordRelationshipRow",
    "World",
    "get_db",
    "init_db",
]

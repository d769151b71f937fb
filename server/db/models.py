"""SQLAlchemy models for game content, sessions and player progress."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---- Content (read-only to the quiz engine) ----

class World(Base):
    __tablename__ = "worlds"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    unlock_stars_required: Mapped[int] = mapped_column(Integer, default=0)


class Level(Base):
    __tablename__ = "levels"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    world_id: Mapped[str] = mapped_column(String(64), ForeignKey("worlds.id", ondelete="CASCADE"), index=True, nullable=False)
    level_number: Mapped[int] = mapped_column(Integer, default=1)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    difficulty_tier: Mapped[int] = mapped_column(Integer, default=1)
    target_word_count: Mapped[int] = mapped_column(Integer, default=8)
    time_limit_seconds: Mapped[int] = mapped_column(Integer, default=120)
    base_coins: Mapped[int] = mapped_column(Integer, default=100)


class VocabularyWord(Base):
    __tablename__ = "vocabulary"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    world_id: Mapped[str] = mapped_column(String(64), ForeignKey("worlds.id", ondelete="CASCADE"), index=True, nullable=False)
    word: Mapped[str] = mapped_column(String(128), nullable=False)
    definition: Mapped[str] = mapped_column(Text, nullable=False)
    part_of_speech: Mapped[str] = mapped_column(String(16), nullable=False)
    difficulty_tier: Mapped[int] = mapped_column(Integer, default=1)
    example_sentence: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(String(64), default="")


class WordRelationshipRow(Base):
    __tablename__ = "word_relationships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    word_id: Mapped[str] = mapped_column(String(64), ForeignKey("vocabulary.id", ondelete="CASCADE"), index=True, nullable=False)
    related_word_id: Mapped[str] = mapped_column(String(64), ForeignKey("vocabulary.id", ondelete="CASCADE"), nullable=False)
    relationship_type: Mapped[str] = mapped_column(String(16), nullable=False)  # "synonym" | "antonym"


# ---- Sessions ----

class GameSession(Base):
    __tablename__ = "game_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    player_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    level_id: Mapped[str] = mapped_column(String(64), ForeignKey("levels.id"), nullable=False)
    started_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)
    ended_at_ms: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="active")  # active | completed | abandoned
    score: Mapped[int] = mapped_column(Integer, default=0)
    coins_earned: Mapped[int] = mapped_column(Integer, default=0)
    accuracy: Mapped[float] = mapped_column(Float, default=0.0)
    stars_earned: Mapped[int] = mapped_column(Integer, default=0)


class SessionAnswer(Base):
    __tablename__ = "session_answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(36), ForeignKey("game_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    word_id: Mapped[str] = mapped_column(String(64), nullable=False)
    question_type: Mapped[str] = mapped_column(String(32), nullable=False)
    correct_answer: Mapped[str] = mapped_column(Text, default="")
    user_answer: Mapped[str] = mapped_column(Text, default="")
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False)
    response_time_ms: Mapped[int] = mapped_column(BigInteger, default=0)
    points_earned: Mapped[int] = mapped_column(Integer, default=0)
    streak: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)


class SessionQuestion(Base):
    """Generated question kept for answer validation until the session ends."""

    __tablename__ = "session_questions"
    __table_args__ = (UniqueConstraint("session_id", "word_id", name="uq_session_word"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(36), ForeignKey("game_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    word_id: Mapped[str] = mapped_column(String(64), nullable=False)
    question_json: Mapped[dict] = mapped_column(JSON, nullable=False)


# ---- Progress ----

class PlayerProgress(Base):
    __tablename__ = "player_progress"

    player_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    total_coins: Mapped[int] = mapped_column(Integer, default=0)
    total_stars: Mapped[int] = mapped_column(Integer, default=0)
    current_title: Mapped[str] = mapped_column(String(64), default="Word Apprentice")
    words_mastered: Mapped[int] = mapped_column(Integer, default=0)


class LevelCompletion(Base):
    __tablename__ = "level_completions"
    __table_args__ = (UniqueConstraint("player_id", "level_id", name="uq_player_level"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    player_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    level_id: Mapped[str] = mapped_column(String(64), ForeignKey("levels.id"), nullable=False)
    best_stars: Mapped[int] = mapped_column(Integer, default=0)
    best_score: Mapped[int] = mapped_column(Integer, default=0)
    times_played: Mapped[int] = mapped_column(Integer, default=0)


class WordMasteryRow(Base):
    __tablename__ = "word_mastery"
    __table_args__ = (UniqueConstraint("player_id", "word_id", name="uq_player_word"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    player_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    word_id: Mapped[str] = mapped_column(String(64), nullable=False)
    times_correct: Mapped[int] = mapped_column(Integer, default=0)
    times_attempted: Mapped[int] = mapped_column(Integer, default=0)
    mastery_level: Mapped[str] = mapped_column(String(16), default="new")

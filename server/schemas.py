"""Pydantic request/response schemas for the wordquest API."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from quiz.question_types import QuestionType


# ---- Content ----

class ContentImportRequest(BaseModel):
    worlds: List[Dict[str, Any]] = Field(default_factory=list)
    levels: List[Dict[str, Any]] = Field(default_factory=list)
    vocabulary: List[Dict[str, Any]] = Field(default_factory=list)
    relationships: List[Dict[str, Any]] = Field(default_factory=list)


class ContentImportResponse(BaseModel):
    worlds: int
    levels: int
    vocabulary: int
    relationships: int


class WorldInfo(BaseModel):
    id: str
    name: str
    description: str = ''
    display_order: int = 0
    unlock_stars_required: int = 0
    word_count: int = 0
    total_levels: int = 0
    levels_completed: int = 0
    stars_earned: int = 0
    unlocked: bool = True


class WorldsResponse(BaseModel):
    worlds: List[WorldInfo]


class LevelInfo(BaseModel):
    id: str
    level_number: int
    name: str
    difficulty_tier: int
    target_word_count: int
    time_limit_seconds: int
    base_coins: int
    completed: bool = False
    best_stars: int = 0
    best_score: int = 0
    times_played: int = 0


class LevelsResponse(BaseModel):
    world_id: str
    levels: List[LevelInfo]


# ---- Game ----

class GameStartRequest(BaseModel):
    player_id: str = Field(..., min_length=1, max_length=64)
    level_id: str = Field(..., min_length=1, max_length=64)
    target_count: Optional[int] = Field(default=None, ge=1, le=50)


class QuestionSchema(BaseModel):
    word_id: str
    word: str
    question_type: QuestionType
    prompt: str
    options: List[str]


class GameStartResponse(BaseModel):
    session_id: str
    level_id: str
    level_name: str
    difficulty_tier: int
    time_limit: int
    total_questions: int
    questions: List[QuestionSchema]


class AnswerRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    word_id: str = Field(..., min_length=1)
    question_type: QuestionType
    answer: str


class AnswerResponse(BaseModel):
    correct: bool
    correct_answer: str
    points_earned: int
    streak_count: int
    explanation: str


class SessionRequest(BaseModel):
    session_id: str = Field(..., min_length=1)


class CompleteResponse(BaseModel):
    session_id: str
    level_id: str
    score: int
    accuracy: float
    accuracy_percent: int
    stars_earned: int
    coins_earned: int
    total_coins: int
    total_stars: int
    words_learned: int
    questions_correct: int
    total_questions: int
    new_title: str
    title_changed: bool


class AbandonResponse(BaseModel):
    session_id: str
    status: str


class SessionStatusResponse(BaseModel):
    id: str
    level_id: str
    level_name: Optional[str] = None
    started_at_ms: int
    ended_at_ms: Optional[int] = None
    status: str
    score: int
    coins_earned: int
    accuracy: float
    stars_earned: int
    answers_count: int


# ---- Stats ----

class StatsOverviewResponse(BaseModel):
    player_id: str
    total_coins: int
    total_stars: int
    current_title: str
    words_mastered: int
    words_learning: int
    levels_completed: int
    total_levels: int


class WordMasteryInfo(BaseModel):
    word_id: str
    word: str
    definition: str
    times_correct: int
    times_attempted: int
    mastery_level: str
    accuracy_percent: int


class CategoryMastery(BaseModel):
    category: str
    total: int
    mastered: int
    proficient: int
    learning: int
    new: int
    words: List[WordMasteryInfo]


class MasteryResponse(BaseModel):
    player_id: str
    categories: List[CategoryMastery]

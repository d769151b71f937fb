"""FastAPI application -- routes for the wordquest vocabulary game."""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session as DBSession

from quiz.errors import EmptyVocabularyPoolError
from quiz.question_store import QuestionStore
from server.__version__ import __version__
from server.config import Settings
from server.dependencies import get_db_session, get_question_store, get_settings
from server.schemas import (
    AbandonResponse,
    AnswerRequest,
    AnswerResponse,
    CompleteResponse,
    ContentImportRequest,
    ContentImportResponse,
    GameStartRequest,
    GameStartResponse,
    LevelsResponse,
    MasteryResponse,
    SessionRequest,
    SessionStatusResponse,
    StatsOverviewResponse,
    WorldsResponse,
)
from server.services import content_service, game_service, stats_service

logger = logging.getLogger("wordquest")


def setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan: configure logging and create tables."""
    from server.db.session import init_db
    settings = Settings()
    setup_logging(settings)
    init_db(settings)
    ts = datetime.utcnow().isoformat() + "Z"
    logger.info("[%s] Startup: database ready (question store: %s)", ts, settings.question_store)
    yield
    ts_end = datetime.utcnow().isoformat() + "Z"
    logger.info("[%s] Shutdown: complete", ts_end)


app = FastAPI(title="wordquest", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(Settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Health ----

@app.get("/health")
def health():
    return {"ok": True}


# ---- Content ----

@app.post("/content/import", response_model=ContentImportResponse)
def content_import(body: ContentImportRequest, db: DBSession = Depends(get_db_session)):
    try:
        return content_service.import_content(db, body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/worlds", response_model=WorldsResponse)
def worlds(player_id: Optional[str] = None, db: DBSession = Depends(get_db_session)):
    return content_service.list_worlds(db, player_id)


@app.get("/worlds/{world_id}/levels", response_model=LevelsResponse)
def world_levels(
    world_id: str,
    player_id: Optional[str] = None,
    db: DBSession = Depends(get_db_session),
):
    try:
        return content_service.list_levels(db, world_id, player_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"World not found: {world_id}")


# ---- Stats ----

@app.get("/stats/overview", response_model=StatsOverviewResponse)
def stats_overview(player_id: str, db: DBSession = Depends(get_db_session)):
    return stats_service.overview(db, player_id)


@app.get("/stats/mastery", response_model=MasteryResponse)
def stats_mastery(player_id: str, db: DBSession = Depends(get_db_session)):
    return stats_service.mastery_breakdown(db, player_id)


# ---- Game ----

@app.post("/game/start", response_model=GameStartResponse, status_code=201)
def game_start(
    body: GameStartRequest,
    db: DBSession = Depends(get_db_session),
    store: QuestionStore = Depends(get_question_store),
    settings: Settings = Depends(get_settings),
):
    try:
        return game_service.start_game(
            db, store, body.player_id, body.level_id,
            target_count=body.target_count,
            default_target_count=settings.default_target_count,
        )
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Level not found: {body.level_id}")
    except EmptyVocabularyPoolError as e:
        logger.warning("Level %s cannot start: %s", body.level_id, e)
        raise HTTPException(status_code=409, detail=f"Could not generate questions: {e}")


@app.post("/game/answer", response_model=AnswerResponse)
def game_answer(
    body: AnswerRequest,
    db: DBSession = Depends(get_db_session),
    store: QuestionStore = Depends(get_question_store),
):
    try:
        return game_service.submit_answer(
            db, store, body.session_id, body.word_id, body.question_type.value, body.answer,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e).strip("'\""))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/game/complete", response_model=CompleteResponse)
def game_complete(
    body: SessionRequest,
    db: DBSession = Depends(get_db_session),
    store: QuestionStore = Depends(get_question_store),
    settings: Settings = Depends(get_settings),
):
    try:
        return game_service.complete_game(
            db, store, body.session_id,
            session_log_path=settings.session_log_path,
            default_base_coins=settings.default_base_coins,
        )
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {body.session_id}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/game/abandon", response_model=AbandonResponse)
def game_abandon(
    body: SessionRequest,
    db: DBSession = Depends(get_db_session),
    store: QuestionStore = Depends(get_question_store),
):
    try:
        return game_service.abandon_game(db, store, body.session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {body.session_id}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/game/session/{session_id}", response_model=SessionStatusResponse)
def game_session(session_id: str, db: DBSession = Depends(get_db_session)):
    try:
        return game_service.get_session_status(db, session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")

"""FastAPI dependency factories."""

import sys
from collections.abc import Generator
from functools import lru_cache
from pathlib import Path

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends
from sqlalchemy.orm import Session as DBSession

from quiz.question_store import QuestionStore
from server.config import Settings
from server.db.session import get_db
from server.runtime import Runtime, runtime_from_settings

# Process-wide Runtime cache (keyed by settings identity for override support)
_runtime: Runtime | None = None
_runtime_settings_id: object | None = None


@lru_cache()
def get_settings() -> Settings:
    """Singleton Settings -- override via app.dependency_overrides in tests."""
    return Settings()


def get_runtime(settings: Settings = Depends(get_settings)) -> Runtime:
    """Process-wide Runtime cache for the in-memory question store."""
    global _runtime, _runtime_settings_id
    # Recreate if settings were overridden (e.g. in tests)
    if _runtime is None or _runtime_settings_id is not settings:
        _runtime = runtime_from_settings(settings)
        _runtime_settings_id = settings
    return _runtime


def get_db_session(settings: Settings = Depends(get_settings)) -> Generator[DBSession, None, None]:
    """One DB session per request, committed when the handler returns."""
    with get_db(settings) as db:
        yield db


def get_question_store(
    runtime: Runtime = Depends(get_runtime),
    db: DBSession = Depends(get_db_session),
) -> QuestionStore:
    return runtime.question_store_for(db)

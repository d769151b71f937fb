"""Configuration for the wordquest API server."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class Settings:
    """
    Server settings.

    Defaults resolve relative to the project root.
    Every field is overridable at construction for testing.
    """
    database_url: Optional[str] = None
    data_root: Optional[Path] = None
    session_log_path: Optional[Path] = None

    # "sql" keeps generated questions next to the game session;
    # "memory" keeps them in a process-local map with TTL eviction.
    question_store: Optional[str] = None
    question_ttl_minutes: int = 120

    default_target_count: int = 8
    default_base_coins: int = 100
    log_level: str = "INFO"
    cors_origins: tuple = ("http://localhost:3000",)

    def __post_init__(self):
        project_root = Path(__file__).resolve().parent.parent

        if self.database_url is None:
            self.database_url = os.environ.get("DATABASE_URL", "sqlite:///./wordquest.db")

        if self.data_root is None:
            env_root = os.environ.get("DATA_ROOT")
            self.data_root = Path(env_root) if env_root else project_root / "data"
        self.data_root = Path(self.data_root)

        if self.session_log_path is None:
            env_log = os.environ.get("SESSION_LOG_PATH")
            self.session_log_path = Path(env_log) if env_log else self.data_root / "session_log.jsonl"
        self.session_log_path = Path(self.session_log_path)

        if self.question_store is None:
            self.question_store = os.environ.get("QUESTION_STORE", "sql").lower()
        if self.question_store not in ("sql", "memory"):
            raise ValueError(f"QUESTION_STORE must be 'sql' or 'memory', got {self.question_store!r}")

        for attr, env in (
            ("question_ttl_minutes", "QUESTION_TTL_MINUTES"),
            ("default_target_count", "DEFAULT_TARGET_COUNT"),
            ("default_base_coins", "DEFAULT_BASE_COINS"),
        ):
            value = os.environ.get(env)
            if value is not None:
                try:
                    setattr(self, attr, int(value))
                except ValueError:
                    pass

        if os.environ.get("LOG_LEVEL"):
            self.log_level = os.environ["LOG_LEVEL"].upper()

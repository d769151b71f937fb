"""Session-scoped storage of generated questions, keyed by (session_id, word_id)."""

import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple

from quiz.models import Question


class QuestionStore(ABC):
    """Where generated questions live between generation and validation."""

    @abstractmethod
    def put(self, session_id: str, question: Question) -> None:
        ...

    @abstractmethod
    def get(self, session_id: str, word_id: str) -> Optional[Question]:
        ...

    @abstractmethod
    def delete_session(self, session_id: str) -> int:
        """Remove every question of a session. Returns the number removed."""

    def put_many(self, session_id: str, questions) -> None:
        for q in questions:
            self.put(session_id, q)


class InMemoryQuestionStore(QuestionStore):
    """
    Process-local question map guarded by a lock.

    Sessions untouched for ttl_seconds are evicted on the next access, so
    abandoned sessions don't accumulate. Contents are lost on restart.
    """

    def __init__(self, ttl_seconds: float = 2 * 60 * 60,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._questions: Dict[Tuple[str, str], Question] = {}
        self._touched: Dict[str, float] = {}

    def _evict_locked(self) -> int:
        cutoff = self._clock() - self.ttl_seconds
        expired = [sid for sid, ts in self._touched.items() if ts < cutoff]
        for sid in expired:
            self._delete_locked(sid)
        return len(expired)

    def _delete_locked(self, session_id: str) -> int:
        keys = [k for k in self._questions if k[0] == session_id]
        for k in keys:
            del self._questions[k]
        self._touched.pop(session_id, None)
        return len(keys)

    def put(self, session_id: str, question: Question) -> None:
        with self._lock:
            self._evict_locked()
            self._questions[(session_id, question.word_id)] = question
            self._touched[session_id] = self._clock()

    def get(self, session_id: str, word_id: str) -> Optional[Question]:
        with self._lock:
            self._evict_locked()
            question = self._questions.get((session_id, word_id))
            if question is not None:
                self._touched[session_id] = self._clock()
            return question

    def delete_session(self, session_id: str) -> int:
        with self._lock:
            return self._delete_locked(session_id)

    def evict_expired(self) -> int:
        """Drop sessions past their TTL. Returns the number of sessions evicted."""
        with self._lock:
            return self._evict_locked()

    def session_count(self) -> int:
        with self._lock:
            return len(self._touched)

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Optional

from sqlalchemy.orm import Session as DBSession

from quiz.question_store import InMemoryQuestionStore, QuestionStore
from server.stores import SqlQuestionStore


class Runtime:
   """
   Process-wide runtime cache.

   - In-memory question store (when configured): must outlive requests => cached
   - SQL question store: bound to the request's DB session, built per call
   """

   def __init__(self, question_store: str = "sql", question_ttl_seconds: float = 7200):
      self.question_store_kind = question_store
      self.question_ttl_seconds = question_ttl_seconds

      self._memory_lock = threading.Lock()
      self._memory_store: Optional[InMemoryQuestionStore] = None

   # ----------------------------
   # Question store
   # ----------------------------
   def get_memory_store(self) -> InMemoryQuestionStore:
      if self._memory_store is not None:
         return self._memory_store
      with self._memory_lock:
         if self._memory_store is None:
               self._memory_store = InMemoryQuestionStore(ttl_seconds=self.question_ttl_seconds)
      return self._memory_store

   def question_store_for(self, db: DBSession) -> QuestionStore:
      """
      Returns the store generated questions are kept in for this request.
      """
      if self.question_store_kind == "memory":
         return self.get_memory_store()
      return SqlQuestionStore(db)

   def reset(self) -> None:
      """
      Useful for tests: drops every in-memory question.
      """
      with self._memory_lock:
         self._memory_store = None


# -------------------------------------------------------------------
# Runtime factory (for FastAPI dependency injection)
# -------------------------------------------------------------------
if TYPE_CHECKING:
    from server.config import Settings


def runtime_from_settings(settings: "Settings") -> Runtime:
    """Build Runtime from Settings. Used by get_runtime dependency."""
    return Runtime(
        question_store=settings.question_store,
        question_ttl_seconds=settings.question_ttl_minutes * 60,
    )

"""SQLAlchemy-backed implementations of the quiz engine's storage interfaces."""

from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session as DBSession

from quiz.models import Question, VocabularyEntry, WordRelationship
from quiz.question_store import QuestionStore
from quiz.vocabulary import VocabularyStore
from server.db.models import SessionQuestion, VocabularyWord, WordRelationshipRow


def word_to_entry(row: VocabularyWord) -> VocabularyEntry:
    return VocabularyEntry(
        id=row.id,
        word=row.word,
        definition=row.definition,
        part_of_speech=row.part_of_speech,
        difficulty_tier=row.difficulty_tier,
        example_sentence=row.example_sentence or '',
        category=row.category or '',
        world_id=row.world_id,
    )


class SqlVocabularyStore(VocabularyStore):
    """Vocabulary rows and relationship edges read through a DB session."""

    def __init__(self, db: DBSession):
        self.db = db

    def words_for_world(self, world_id: str) -> List[VocabularyEntry]:
        rows = self.db.scalars(
            select(VocabularyWord)
            .where(VocabularyWord.world_id == world_id)
            .order_by(VocabularyWord.difficulty_tier, VocabularyWord.id)
        ).all()
        return [word_to_entry(r) for r in rows]

    def words_by_ids(self, word_ids: Iterable[str]) -> List[VocabularyEntry]:
        ids = list(word_ids)
        if not ids:
            return []
        rows = self.db.scalars(
            select(VocabularyWord).where(VocabularyWord.id.in_(ids)).order_by(VocabularyWord.id)
        ).all()
        return [word_to_entry(r) for r in rows]

    def relationships_for(self, word_ids: Iterable[str]) -> List[WordRelationship]:
        ids = list(word_ids)
        if not ids:
            return []
        rows = self.db.scalars(
            select(WordRelationshipRow)
            .where(WordRelationshipRow.word_id.in_(ids))
            .order_by(WordRelationshipRow.id)
        ).all()
        return [
            WordRelationship(
                word_id=r.word_id,
                related_word_id=r.related_word_id,
                relationship_type=r.relationship_type,
            )
            for r in rows
        ]


class SqlQuestionStore(QuestionStore):
    """
    Generated questions persisted next to the game session.

    Survives restarts and works across processes; the caller's DB session
    owns the transaction.
    """

    def __init__(self, db: DBSession):
        self.db = db

    def _row(self, session_id: str, word_id: str) -> Optional[SessionQuestion]:
        return self.db.scalars(
            select(SessionQuestion).where(
                SessionQuestion.session_id == session_id,
                SessionQuestion.word_id == word_id,
            )
        ).first()

    def put(self, session_id: str, question: Question) -> None:
        row = self._row(session_id, question.word_id)
        if row is None:
            self.db.add(SessionQuestion(
                session_id=session_id,
                word_id=question.word_id,
                question_json=question.to_dict(),
            ))
        else:
            row.question_json = question.to_dict()
        self.db.flush()

    def get(self, session_id: str, word_id: str) -> Optional[Question]:
        row = self._row(session_id, word_id)
        return Question.from_dict(row.question_json) if row is not None else None

    def delete_session(self, session_id: str) -> int:
        result = self.db.execute(
            delete(SessionQuestion).where(SessionQuestion.session_id == session_id)
        )
        return result.rowcount or 0

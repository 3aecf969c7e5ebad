from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from classify.crud.base import CRUDBase
from classify.core.constants import DifficultyEnum
from classify.models.answer import Answer
from classify.models.exam import ExamQuestion
from classify.models.question import Question
from classify.schemas.question import QuestionCreate, QuestionUpdate

class CRUDQuestion(CRUDBase[Question, QuestionCreate, QuestionUpdate]):

    def _active_query(
        self,
        db: Session,
        course_id: Optional[int] = None,
        difficulty: Optional[DifficultyEnum] = None,
        topic_ids: Optional[List[int]] = None,
    ):
        query = db.query(Question).filter(Question.is_active.is_(True))
        if course_id:
            query = query.filter(Question.course_id == course_id)
        if difficulty:
            query = query.filter(Question.difficulty == difficulty)
        if topic_ids:
            query = query.filter(Question.topic_id.in_(topic_ids))
        return query

    def get_multi_filtered(
        self,
        db: Session,
        *,
        course_id: Optional[int] = None,
        difficulty: Optional[DifficultyEnum] = None,
        topic_ids: Optional[List[int]] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> List[Question]:
        return (
            self._active_query(db, course_id, difficulty, topic_ids)
            .order_by(Question.created_at.desc(), Question.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_filtered(
        self,
        db: Session,
        *,
        course_id: Optional[int] = None,
        difficulty: Optional[DifficultyEnum] = None,
        topic_ids: Optional[List[int]] = None,
    ) -> int:
        return self._active_query(db, course_id, difficulty, topic_ids).count()

    def get_pool_ids(self, db: Session, *, course_id: int, topic_ids: List[int]) -> List[int]:
        if not topic_ids:
            return []
        rows = (
            self._active_query(db, course_id=course_id, topic_ids=topic_ids)
            .with_entities(Question.id)
            .order_by(Question.id)
            .all()
        )
        return [row[0] for row in rows]

    def delete_by_topic(self, db: Session, *, topic_id: int) -> Tuple[int, int]:
        """Hard-delete a topic's questions.

        Questions still referenced by an exam or a recorded answer are
        deactivated instead so existing attempts keep their answer key.
        Returns ``(deleted, deactivated)``.
        """
        ids = [row[0] for row in db.query(Question.id).filter(Question.topic_id == topic_id).all()]
        if not ids:
            return 0, 0
        in_use = {row[0] for row in db.query(ExamQuestion.question_id).filter(ExamQuestion.question_id.in_(ids)).all()}
        in_use.update(row[0] for row in db.query(Answer.question_id).filter(Answer.question_id.in_(ids)).all())
        free = [qid for qid in ids if qid not in in_use]

        deactivated = 0
        if in_use:
            deactivated = (
                db.query(Question)
                .filter(Question.id.in_(sorted(in_use)), Question.is_active.is_(True))
                .update({"is_active": False}, synchronize_session=False)
            )
        deleted = 0
        if free:
            deleted = db.query(Question).filter(Question.id.in_(free)).delete(synchronize_session=False)
        return deleted, deactivated

question = CRUDQuestion(Question)

from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from classify.crud.base import CRUDBase
from classify.models.answer import Answer
from pydantic import BaseModel


class AnswerCreate(BaseModel):
    attempt_id: int
    question_id: int
    selected: Optional[str] = None
    is_correct: Optional[bool] = None


class AnswerUpdate(BaseModel):
    selected: Optional[str] = None
    is_correct: Optional[bool] = None


class CRUDAnswer(CRUDBase[Answer, AnswerCreate, AnswerUpdate]):

    def get_by_attempt_and_question(self, db: Session, *, attempt_id: int, question_id: int) -> Optional[Answer]:
        return (
            db.query(Answer)
            .filter(Answer.attempt_id == attempt_id, Answer.question_id == question_id)
            .first()
        )

    def get_all_by_attempt(self, db: Session, *, attempt_id: int) -> List[Answer]:
        return (
            db.query(Answer)
            .options(selectinload(Answer.question))
            .filter(Answer.attempt_id == attempt_id)
            .order_by(Answer.id)
            .all()
        )

answer = CRUDAnswer(Answer)

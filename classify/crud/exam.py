from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from classify.crud.base import CRUDBase
from classify.models.exam import Exam, ExamQuestion
from classify.schemas.exam import ExamCreate, ExamUpdate


class CRUDExam(CRUDBase[Exam, ExamCreate, ExamUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Exam).options(
            selectinload(Exam.exam_questions).selectinload(ExamQuestion.question),
            selectinload(Exam.course),
        )

    def get(self, db: Session, id: int) -> Optional[Exam]:
        return self._query_with_relationships(db).filter(Exam.id == id).first()

    def get_multi_filtered(
        self,
        db: Session,
        *,
        course_id: Optional[int] = None,
        semester_id: Optional[int] = None,
        published_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Exam]:
        query = self._query_with_relationships(db).filter(
            Exam.is_archived.is_(False),
            Exam.deletion_scheduled_at.is_(None),
        )
        if course_id:
            query = query.filter(Exam.course_id == course_id)
        if semester_id:
            query = query.filter(Exam.semester_id == semester_id)
        if published_only:
            query = query.filter(Exam.is_published.is_(True))
        return query.order_by(Exam.created_at.desc(), Exam.id.desc()).offset(skip).limit(limit).all()

    def get_for_course_semester(self, db: Session, *, course_id: int, semester_id: int) -> List[Exam]:
        return (
            db.query(Exam)
            .filter(
                Exam.course_id == course_id,
                Exam.semester_id == semester_id,
                Exam.is_published.is_(True),
                Exam.is_archived.is_(False),
            )
            .all()
        )

    def get_due_for_deletion(self, db: Session) -> List[Exam]:
        return (
            db.query(Exam)
            .filter(Exam.is_archived.is_(True), Exam.deletion_scheduled_at.isnot(None))
            .all()
        )

    def create_with_questions(self, db: Session, *, obj_in: dict, question_ids: List[int]) -> Exam:
        db_obj = Exam(**obj_in)
        db_obj.exam_questions = [
            ExamQuestion(question_id=question_id, position=idx + 1)
            for idx, question_id in enumerate(question_ids)
        ]
        db.add(db_obj)
        db.commit()
        return self.get(db, id=db_obj.id)

    def replace_questions(self, db: Session, *, exam: Exam, question_ids: List[int], commit: bool = True) -> Exam:
        exam.exam_questions.clear()
        db.flush()
        for idx, question_id in enumerate(question_ids):
            exam.exam_questions.append(ExamQuestion(question_id=question_id, position=idx + 1))
        db.add(exam)
        if commit:
            db.commit()
            db.expire(exam)
        else:
            db.flush()
        return exam

exam = CRUDExam(Exam)

from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from classify.crud.base import CRUDBase
from classify.models.written_exam import WrittenExam, Score
from classify.schemas.written_exam import (
    WrittenExamCreate, WrittenExamUpdate, ScoreCreate, ScoreUpdate
)

class CRUDWrittenExam(CRUDBase[WrittenExam, WrittenExamCreate, WrittenExamUpdate]):

    def get_multi_filtered(
        self,
        db: Session,
        *,
        course_id: Optional[int] = None,
        semester_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[WrittenExam]:
        query = db.query(WrittenExam)
        if course_id:
            query = query.filter(WrittenExam.course_id == course_id)
        if semester_id:
            query = query.filter(WrittenExam.semester_id == semester_id)
        return query.order_by(WrittenExam.id.desc()).offset(skip).limit(limit).all()

    def get_for_course_semester(self, db: Session, *, course_id: int, semester_id: int) -> List[WrittenExam]:
        return (
            db.query(WrittenExam)
            .filter(WrittenExam.course_id == course_id, WrittenExam.semester_id == semester_id)
            .all()
        )


class CRUDScore(CRUDBase[Score, ScoreCreate, ScoreUpdate]):

    def get_by_exam_and_student(self, db: Session, *, exam_id: int, student_id: int) -> Optional[Score]:
        return db.query(Score).filter(Score.exam_id == exam_id, Score.student_id == student_id).first()

    def get_by_exam(self, db: Session, *, exam_id: int) -> List[Score]:
        return (
            db.query(Score)
            .options(selectinload(Score.student))
            .filter(Score.exam_id == exam_id)
            .order_by(Score.score.desc())
            .all()
        )

    def get_by_student_for_exams(self, db: Session, *, student_id: int, exam_ids: List[int]) -> List[Score]:
        if not exam_ids:
            return []
        return db.query(Score).filter(Score.student_id == student_id, Score.exam_id.in_(exam_ids)).all()

    def upsert(self, db: Session, *, obj_in: ScoreCreate) -> Score:
        existing = self.get_by_exam_and_student(db, exam_id=obj_in.exam_id, student_id=obj_in.student_id)
        if existing:
            return self.update(
                db,
                db_obj=existing,
                obj_in={"score": obj_in.score, "grade": obj_in.grade, "remark": obj_in.remark},
                commit=False,
            )
        return self.create(db, obj_in=obj_in, commit=False)

written_exam = CRUDWrittenExam(WrittenExam)
score = CRUDScore(Score)

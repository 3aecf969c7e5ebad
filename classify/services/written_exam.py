import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from classify.crud.academic_session import semester as crud_semester
from classify.crud.course import course as crud_course
from classify.crud.student import student as crud_student
from classify.crud.written_exam import written_exam as crud_written_exam, score as crud_score
from classify.schemas.written_exam import ScoreBulkUpsert, ScoreCreate, WrittenExamCreate

logger = logging.getLogger(__name__)

GRADE_BOUNDARIES = ((70.0, "A"), (60.0, "B"), (50.0, "C"), (45.0, "D"))


def letter_grade(score: float, total_marks: float) -> str:
    """Letter grade for ``score`` out of ``total_marks``, banded on the percentage."""
    percentage = 100.0 * score / total_marks if total_marks else 0.0
    for lower_bound, grade in GRADE_BOUNDARIES:
        if percentage >= lower_bound:
            return grade
    return "F"


class WrittenExamService:

    def _get_exam(self, db: Session, exam_id: int):
        db_exam = crud_written_exam.get(db, id=exam_id)
        if not db_exam:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Written exam not found.")
        return db_exam

    def create_exam(self, db: Session, exam_in: WrittenExamCreate):
        if not crud_course.get(db, id=exam_in.course_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        if not crud_semester.get(db, id=exam_in.semester_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Semester not found.")
        return crud_written_exam.create(db, obj_in=exam_in)

    def list_exams(self, db: Session, course_id: Optional[int] = None, semester_id: Optional[int] = None):
        return crud_written_exam.get_multi_filtered(db, course_id=course_id, semester_id=semester_id)

    def save_scores(self, db: Session, exam_id: int, scores_in: ScoreBulkUpsert) -> int:
        db_exam = self._get_exam(db, exam_id)
        for entry in scores_in.scores:
            if entry.score > db_exam.total_marks:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Score for student {entry.student_id} exceeds the exam total of {db_exam.total_marks}."
                )
            if not crud_student.get(db, id=entry.student_id):
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Student {entry.student_id} not found.")
            crud_score.upsert(db, obj_in=ScoreCreate(
                exam_id=exam_id,
                student_id=entry.student_id,
                score=entry.score,
                grade=letter_grade(entry.score, db_exam.total_marks),
                remark=entry.remark,
            ))
        db.commit()
        logger.info(f"Saved {len(scores_in.scores)} scores for written exam {exam_id}")
        return len(scores_in.scores)

    def get_results(self, db: Session, exam_id: int) -> List:
        self._get_exam(db, exam_id)
        return crud_score.get_by_exam(db, exam_id=exam_id)


written_exam_service = WrittenExamService()

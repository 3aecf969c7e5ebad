from datetime import datetime, timedelta
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from classify.crud.base import CRUDBase
from classify.models.exam import Exam
from classify.models.exam_attempt import ExamAttempt
from classify.schemas.exam_attempt import ExamAttemptCreate, ExamAttemptUpdate
from classify.utils.timeutils import ensure_aware

class CRUDExamAttempt(CRUDBase[ExamAttempt, ExamAttemptCreate, ExamAttemptUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(ExamAttempt).options(
            selectinload(ExamAttempt.exam),
            selectinload(ExamAttempt.student),
            selectinload(ExamAttempt.answers),
        )

    def get(self, db: Session, id: int) -> Optional[ExamAttempt]:
        return self._query_with_relationships(db).filter(ExamAttempt.id == id).first()

    def get_by_exam_and_student(self, db: Session, *, exam_id: int, student_id: int) -> Optional[ExamAttempt]:
        return (
            self._query_with_relationships(db)
            .filter(ExamAttempt.exam_id == exam_id, ExamAttempt.student_id == student_id)
            .first()
        )

    def get_by_student_for_exams(self, db: Session, *, student_id: int, exam_ids: List[int]) -> List[ExamAttempt]:
        if not exam_ids:
            return []
        return (
            db.query(ExamAttempt)
            .filter(ExamAttempt.student_id == student_id, ExamAttempt.exam_id.in_(exam_ids))
            .all()
        )

    def get_completed_by_exam(self, db: Session, *, exam_id: int) -> List[ExamAttempt]:
        return (
            db.query(ExamAttempt)
            .options(selectinload(ExamAttempt.student))
            .filter(ExamAttempt.exam_id == exam_id, ExamAttempt.is_completed.is_(True))
            .order_by(ExamAttempt.percentage.desc(), ExamAttempt.submitted_at)
            .all()
        )

    def count_by_exams(self, db: Session, *, exam_ids: List[int]) -> Dict[int, int]:
        if not exam_ids:
            return {}
        rows = (
            db.query(ExamAttempt.exam_id, func.count(ExamAttempt.id))
            .filter(ExamAttempt.exam_id.in_(exam_ids))
            .group_by(ExamAttempt.exam_id)
            .all()
        )
        return {exam_id: count for exam_id, count in rows}

    def has_in_progress(self, db: Session, *, exam_id: int) -> bool:
        return (
            db.query(ExamAttempt.id)
            .filter(ExamAttempt.exam_id == exam_id, ExamAttempt.is_completed.is_(False))
            .first()
        ) is not None

    def get_expired_in_progress(self, db: Session, *, now: datetime, grace_seconds: int = 0) -> List[ExamAttempt]:
        """Incomplete attempts whose exam duration (plus grace) has elapsed."""
        candidates = (
            self._query_with_relationships(db)
            .join(Exam, ExamAttempt.exam_id == Exam.id)
            .filter(ExamAttempt.is_completed.is_(False))
            .all()
        )
        expired = []
        for attempt in candidates:
            deadline = ensure_aware(attempt.started_at) + timedelta(
                minutes=attempt.exam.duration_minutes, seconds=grace_seconds
            )
            if deadline <= now:
                expired.append(attempt)
        return expired

exam_attempt = CRUDExamAttempt(ExamAttempt)

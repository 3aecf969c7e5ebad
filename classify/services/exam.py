import logging
import random
from datetime import timedelta
from typing import List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from classify.core.constants import ExamDeletionModeEnum
from classify.crud.academic_session import semester as crud_semester
from classify.crud.attendance import attendance_session as crud_attendance_session
from classify.crud.course import course as crud_course
from classify.crud.exam import exam as crud_exam
from classify.crud.exam_attempt import exam_attempt as crud_exam_attempt
from classify.crud.institution_setting import institution_setting as crud_setting
from classify.crud.question import question as crud_question
from classify.schemas.exam import (
    ExamCreate, ExamDetail, ExamListing, ExamQuestionsAssign, ExamUpdate, MyAttemptSummary
)
from classify.schemas.user import UserContext
from classify.services.question_pool import select_question_ids
from classify.utils.permission import PermissionHelper as permission_helper
from classify.utils.timeutils import ensure_aware, utcnow

logger = logging.getLogger(__name__)


class ExamService:

    def _get_exam(self, db: Session, exam_id: int):
        exam = crud_exam.get(db, id=exam_id)
        if not exam:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found.")
        return exam

    def _validate_question_ids(self, db: Session, course_id: int, question_ids: List[int]):
        found = {q.id: q for q in crud_question.get_by_ids(db, ids=question_ids)}
        invalid = [
            qid for qid in question_ids
            if qid not in found or not found[qid].is_active or found[qid].course_id != course_id
        ]
        if invalid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid question_id(s): {invalid}. Questions must be active and belong to the exam's course."
            )

    def _ensure_no_live_attempts(self, db: Session, exam_id: int):
        if crud_exam_attempt.has_in_progress(db, exam_id=exam_id):
            logger.warning(f"Refused to change questions of exam {exam_id} with attempts in progress")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Exam has attempts in progress; its questions cannot be changed."
            )

    def _pool(self, db: Session, course_id: int, topic_ids: List[int], num_questions: Optional[int],
              rng: Optional[random.Random] = None) -> List[int]:
        eligible = crud_question.get_pool_ids(db, course_id=course_id, topic_ids=topic_ids)
        selected = select_question_ids(eligible, num_questions, rng=rng)
        logger.info(
            f"Pooled {len(selected)} of {len(eligible)} eligible questions for course {course_id} "
            f"(topics={topic_ids}, requested={num_questions})"
        )
        return selected

    def create_exam(self, db: Session, exam_in: ExamCreate, rng: Optional[random.Random] = None):
        if not crud_course.get(db, id=exam_in.course_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        if not crud_semester.get(db, id=exam_in.semester_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Semester not found.")

        if exam_in.question_ids:
            self._validate_question_ids(db, exam_in.course_id, exam_in.question_ids)
            question_ids = list(exam_in.question_ids)
        elif exam_in.topic_ids and exam_in.num_questions:
            question_ids = self._pool(db, exam_in.course_id, exam_in.topic_ids, exam_in.num_questions, rng)
        else:
            question_ids = []

        exam_data = exam_in.model_dump(exclude={"question_ids"})
        if exam_data.get("total_marks") is None:
            exam_data["total_marks"] = float(len(question_ids) or 1)

        db_exam = crud_exam.create_with_questions(db, obj_in=exam_data, question_ids=question_ids)
        logger.info(f"Exam {db_exam.id} created with {len(question_ids)} questions")
        return db_exam

    def list_exams(
        self,
        db: Session,
        current_user_context: UserContext,
        course_id: Optional[int] = None,
        semester_id: Optional[int] = None,
        published: Optional[bool] = None,
    ) -> List[ExamListing]:
        is_student = permission_helper.is_student(current_user_context)
        exams = crud_exam.get_multi_filtered(
            db,
            course_id=course_id,
            semester_id=semester_id,
            published_only=is_student or bool(published),
        )

        exam_ids = [e.id for e in exams]
        attempt_counts = crud_exam_attempt.count_by_exams(db, exam_ids=exam_ids)

        my_attempts = {}
        open_sessions = None
        if is_student:
            student = current_user_context.student
            my_attempts = {
                a.exam_id: a
                for a in crud_exam_attempt.get_by_student_for_exams(db, student_id=student.id, exam_ids=exam_ids)
            }
            open_sessions = crud_attendance_session.get_active_course_semesters(
                db,
                course_ids=list({e.course_id for e in exams}),
                department_id=student.department_id,
                level=student.level,
            )

        listings = []
        for db_exam in exams:
            listing = ExamListing.model_validate(db_exam)
            listing.attempt_count = attempt_counts.get(db_exam.id, 0)
            attempt = my_attempts.get(db_exam.id)
            if attempt:
                listing.my_attempt = MyAttemptSummary.model_validate(attempt)
            if open_sessions is not None:
                listing.is_session_active = (db_exam.course_id, db_exam.semester_id) in open_sessions
            listings.append(listing)
        return listings

    def get_exam_detail(self, db: Session, exam_id: int) -> ExamDetail:
        return ExamDetail.model_validate(self._get_exam(db, exam_id))

    def update_exam(self, db: Session, exam_id: int, exam_in: ExamUpdate, rng: Optional[random.Random] = None):
        db_exam = self._get_exam(db, exam_id)
        update_data = exam_in.model_dump(exclude_unset=True)

        start_window = update_data.get("start_window", db_exam.start_window)
        end_window = update_data.get("end_window", db_exam.end_window)
        if start_window and end_window and ensure_aware(end_window) <= ensure_aware(start_window):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="end_window must be after start_window"
            )

        topic_ids = update_data.get("topic_ids", db_exam.topic_ids) or []
        num_questions = update_data.get("num_questions", db_exam.num_questions)
        # Exams without a topic pool keep their fixed question set.
        repool = ("topic_ids" in update_data or "num_questions" in update_data) and bool(topic_ids and num_questions)
        if repool:
            self._ensure_no_live_attempts(db, exam_id)

        crud_exam.update(db, db_obj=db_exam, obj_in=update_data, commit=False)
        if repool:
            question_ids = self._pool(db, db_exam.course_id, topic_ids, num_questions, rng)
            crud_exam.replace_questions(db, exam=db_exam, question_ids=question_ids, commit=False)
        db.commit()
        return crud_exam.get(db, id=exam_id)

    def assign_questions(self, db: Session, exam_id: int, assign_in: ExamQuestionsAssign):
        db_exam = self._get_exam(db, exam_id)
        self._validate_question_ids(db, db_exam.course_id, assign_in.question_ids)
        self._ensure_no_live_attempts(db, exam_id)
        crud_exam.replace_questions(db, exam=db_exam, question_ids=assign_in.question_ids)
        return crud_exam.get(db, id=exam_id)

    def delete_exam(self, db: Session, exam_id: int, mode: ExamDeletionModeEnum):
        db_exam = self._get_exam(db, exam_id)
        update_data = {"is_archived": True, "is_published": False}
        if mode == ExamDeletionModeEnum.FULL:
            grace_days = crud_setting.get_or_create(db).exam_deletion_grace_days
            update_data["deletion_scheduled_at"] = utcnow() + timedelta(days=grace_days)
        crud_exam.update(db, db_obj=db_exam, obj_in=update_data)
        logger.info(f"Exam {exam_id} removed with mode={mode.value}")
        return crud_exam.get(db, id=exam_id)

    def purge_scheduled_deletions(self, db: Session) -> int:
        """Hard-delete archived exams whose scheduled deletion time has passed."""
        now = utcnow()
        purged = 0
        for db_exam in crud_exam.get_due_for_deletion(db):
            if ensure_aware(db_exam.deletion_scheduled_at) <= now:
                db.delete(db_exam)
                purged += 1
        if purged:
            db.commit()
            logger.info(f"Purged {purged} exams scheduled for deletion")
        return purged


exam_service = ExamService()

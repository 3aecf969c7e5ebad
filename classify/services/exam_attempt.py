import logging
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from classify.core.config import settings
from classify.crud.attendance import attendance_session as crud_attendance_session
from classify.crud.answer import answer as crud_answer, AnswerCreate, AnswerUpdate
from classify.crud.exam import exam as crud_exam
from classify.crud.exam_attempt import exam_attempt as crud_exam_attempt
from classify.crud.institution_setting import institution_setting as crud_setting
from classify.models.answer import Answer
from classify.models.exam_attempt import ExamAttempt
from classify.schemas.exam_attempt import (
    AnswerSubmission, AttemptResult, AttemptStart, ExamAttempt as ExamAttemptSchema,
    ExamMeta, ExamResultRow, ReviewedAnswer, SavedAnswer, SubmitAttemptRequest, SubmitResult
)
from classify.schemas.question import QuestionPublic
from classify.schemas.user import UserContext
from classify.services.grading import build_answer_key, grade_answers, split_submission
from classify.utils.permission import PermissionHelper as permission_helper
from classify.utils.timeutils import ensure_aware, utcnow

logger = logging.getLogger(__name__)


class ExamAttemptService:

    def _get_exam(self, db: Session, exam_id: int):
        exam = crud_exam.get(db, id=exam_id)
        if not exam or exam.is_archived:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found.")
        return exam

    def _get_attempt(self, db: Session, attempt_id: int) -> ExamAttempt:
        attempt = crud_exam_attempt.get(db, id=attempt_id)
        if not attempt:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam attempt not found.")
        return attempt

    def _require_exam_open(self, exam, now: datetime):
        if not exam.is_published:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Exam is not yet available")
        if exam.start_window and now < ensure_aware(exam.start_window):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Exam has not started yet")
        if exam.end_window and now > ensure_aware(exam.end_window):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Exam window has closed")

    def _require_attendance_session(self, db: Session, exam, student):
        if not crud_setting.get_or_create(db).require_attendance_session_for_cbt:
            return
        active_session = crud_attendance_session.get_active_matching(
            db,
            course_id=exam.course_id,
            semester_id=exam.semester_id,
            department_id=student.department_id,
            level=student.level,
        )
        if not active_session:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No active attendance session for this course"
            )

    def _require_owned_in_progress(self, current_user_context: UserContext, attempt: ExamAttempt):
        if not permission_helper.owns_attempt(current_user_context, attempt):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only submit answers for your own attempts."
            )
        if attempt.is_completed:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already submitted")

    def _remaining_seconds(self, attempt: ExamAttempt, exam, now: datetime) -> int:
        elapsed = (now - ensure_aware(attempt.started_at)).total_seconds()
        return max(0, int(exam.duration_minutes * 60 - elapsed))

    def _build_start_response(self, db: Session, attempt: ExamAttempt, exam, now: datetime, resumed: bool) -> AttemptStart:
        saved = crud_answer.get_all_by_attempt(db, attempt_id=attempt.id)
        return AttemptStart(
            attempt=ExamAttemptSchema.model_validate(attempt),
            exam=ExamMeta.model_validate(exam),
            questions=[QuestionPublic.model_validate(q) for q in exam.questions],
            saved_answers=[SavedAnswer.model_validate(a) for a in saved],
            remaining_seconds=self._remaining_seconds(attempt, exam, now),
            resumed=resumed,
        )

    def start_attempt(self, db: Session, exam_id: int, current_user_context: UserContext,
                      ip_address: Optional[str] = None) -> AttemptStart:
        exam = self._get_exam(db, exam_id)
        student = permission_helper.require_student(current_user_context)
        now = utcnow()

        self._require_exam_open(exam, now)
        self._require_attendance_session(db, exam, student)

        attempt = crud_exam_attempt.get_by_exam_and_student(db, exam_id=exam.id, student_id=student.id)
        if attempt is None:
            try:
                attempt = ExamAttempt(exam_id=exam.id, student_id=student.id, started_at=now, ip_address=ip_address)
                db.add(attempt)
                db.commit()
                attempt = crud_exam_attempt.get(db, id=attempt.id)
                logger.info(f"Attempt {attempt.id} started: exam={exam.id} student={student.id}")
                return self._build_start_response(db, attempt, exam, now, resumed=False)
            except IntegrityError:
                db.rollback()
                logger.info(f"Concurrent start for exam={exam.id} student={student.id}; resuming existing attempt")
                attempt = crud_exam_attempt.get_by_exam_and_student(db, exam_id=exam.id, student_id=student.id)
                if attempt is None:
                    raise

        if attempt.is_completed:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You have already completed this exam")

        logger.info(f"Attempt {attempt.id} resumed: exam={exam.id} student={student.id}")
        return self._build_start_response(db, attempt, exam, now, resumed=True)

    def save_answer(self, db: Session, attempt_id: int, answer_in: AnswerSubmission,
                    current_user_context: UserContext) -> SavedAnswer:
        attempt = self._get_attempt(db, attempt_id)
        self._require_owned_in_progress(current_user_context, attempt)

        if answer_in.question_id not in attempt.exam.question_ids:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Question does not belong to this exam attempt."
            )

        selected = answer_in.selected.value if answer_in.selected else None
        existing = crud_answer.get_by_attempt_and_question(db, attempt_id=attempt.id, question_id=answer_in.question_id)
        if existing:
            saved = crud_answer.update(db, db_obj=existing, obj_in=AnswerUpdate(selected=selected))
        else:
            saved = crud_answer.create(
                db, obj_in=AnswerCreate(attempt_id=attempt.id, question_id=answer_in.question_id, selected=selected)
            )
        return SavedAnswer.model_validate(saved)

    def _finalize(self, db: Session, attempt: ExamAttempt, answers: Dict[int, Optional[str]],
                  auto_submitted: bool = False) -> SubmitResult:
        exam = attempt.exam
        answer_key = build_answer_key(exam.questions)
        result = grade_answers(answers, answer_key, exam.total_marks, exam.pass_mark)

        # Only the request that flips is_completed may write the grade.
        updated = (
            db.query(ExamAttempt)
            .filter(ExamAttempt.id == attempt.id, ExamAttempt.is_completed.is_(False))
            .update(
                {
                    "is_completed": True,
                    "submitted_at": utcnow(),
                    "score": result.score,
                    "percentage": result.percentage,
                    "is_passed": result.is_passed,
                    "auto_submitted": auto_submitted,
                },
                synchronize_session=False,
            )
        )
        if not updated:
            db.rollback()
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Already submitted")

        db.query(Answer).filter(Answer.attempt_id == attempt.id).delete(synchronize_session=False)
        db.add_all([
            Answer(
                attempt_id=attempt.id,
                question_id=question_id,
                selected=selected,
                is_correct=result.correctness[question_id],
            )
            for question_id, selected in answers.items()
        ])
        db.commit()
        db.expire(attempt)

        logger.info(
            f"Attempt {attempt.id} {'auto-submitted' if auto_submitted else 'submitted'}: "
            f"score={result.score}/{exam.total_marks} percentage={result.percentage} passed={result.is_passed}"
        )
        return SubmitResult(
            attempt_id=attempt.id,
            score=result.score,
            total_marks=exam.total_marks,
            percentage=result.percentage,
            is_passed=result.is_passed,
        )

    def submit_attempt(self, db: Session, attempt_id: int, submission: SubmitAttemptRequest,
                       current_user_context: UserContext) -> SubmitResult:
        attempt = self._get_attempt(db, attempt_id)
        self._require_owned_in_progress(current_user_context, attempt)

        answers, duplicates = split_submission(submission.answers)
        if duplicates:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Duplicate question_ids found in submission: {sorted(set(duplicates))}"
            )

        exam_question_ids = set(attempt.exam.question_ids)
        invalid = [qid for qid in answers if qid not in exam_question_ids]
        if invalid:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid question_id(s): {invalid}. All questions must belong to the exam."
            )

        return self._finalize(db, attempt, answers)

    def get_attempt_result(self, db: Session, attempt_id: int, current_user_context: UserContext) -> AttemptResult:
        attempt = self._get_attempt(db, attempt_id)
        if not permission_helper.can_view_attempt(current_user_context, attempt):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only view your own exam attempts."
            )

        exam = attempt.exam
        show_answers = permission_helper.is_staff(current_user_context) or (
            attempt.is_completed and exam.allow_review
        )
        answers: List[ReviewedAnswer] = []
        if show_answers:
            positions = {qid: idx for idx, qid in enumerate(exam.question_ids)}
            rows = sorted(
                crud_answer.get_all_by_attempt(db, attempt_id=attempt.id),
                key=lambda a: positions.get(a.question_id, len(positions)),
            )
            answers = [ReviewedAnswer.model_validate(a) for a in rows]

        return AttemptResult(
            attempt=ExamAttemptSchema.model_validate(attempt),
            exam=ExamMeta.model_validate(exam),
            answers=answers,
        )

    def get_exam_results(self, db: Session, exam_id: int) -> List[ExamResultRow]:
        exam = crud_exam.get(db, id=exam_id)
        if not exam:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found.")
        return [
            ExamResultRow(
                attempt_id=a.id,
                student_id=a.student_id,
                matric_number=a.student.matric_number,
                student_name=a.student.full_name,
                score=a.score,
                percentage=a.percentage,
                is_passed=a.is_passed,
                submitted_at=a.submitted_at,
                auto_submitted=a.auto_submitted,
            )
            for a in crud_exam_attempt.get_completed_by_exam(db, exam_id=exam_id)
        ]

    def expire_stale_attempts(self, db: Session, now: Optional[datetime] = None,
                              grace_seconds: Optional[int] = None) -> int:
        """Grade every overdue in-progress attempt from its saved answers."""
        now = now or utcnow()
        if grace_seconds is None:
            grace_seconds = settings.ATTEMPT_EXPIRY_GRACE_SECONDS

        expired = crud_exam_attempt.get_expired_in_progress(db, now=now, grace_seconds=grace_seconds)
        finalized = 0
        for attempt in expired:
            exam_question_ids = set(attempt.exam.question_ids)
            answers = {
                a.question_id: a.selected
                for a in crud_answer.get_all_by_attempt(db, attempt_id=attempt.id)
                if a.question_id in exam_question_ids
            }
            try:
                self._finalize(db, attempt, answers, auto_submitted=True)
                finalized += 1
            except HTTPException as exc:
                if exc.status_code != status.HTTP_409_CONFLICT:
                    raise
                logger.info(f"Attempt {attempt.id} was submitted before the sweep reached it")
        return finalized


exam_attempt_service = ExamAttemptService()

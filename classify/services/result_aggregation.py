import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from classify.core.constants import ExamCategoryEnum
from classify.crud.academic_session import semester as crud_semester
from classify.crud.attendance import attendance as crud_attendance, attendance_session as crud_attendance_session
from classify.crud.course import course as crud_course
from classify.crud.course_enrollment import course_enrollment as crud_enrollment
from classify.crud.exam import exam as crud_exam
from classify.crud.exam_attempt import exam_attempt as crud_exam_attempt
from classify.crud.institution_setting import institution_setting as crud_setting
from classify.crud.student import student as crud_student
from classify.crud.written_exam import written_exam as crud_written_exam, score as crud_score
from classify.schemas.result import (
    AttendanceComponent, CourseResult, ScoreComponent, StudentResult, StudentSummary
)
from classify.schemas.user import UserContext
from classify.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregationConfig:
    attendance_weight: float = 10.0


@dataclass
class CourseInputs:
    """Everything needed to compute one student's result for one course."""
    course_id: int
    course_code: str
    course_title: str
    attendance_present: int = 0
    attendance_total: int = 0
    test_scores: List[float] = field(default_factory=list)
    test_max: float = 0.0
    exam_scores: List[float] = field(default_factory=list)
    exam_max: float = 0.0


def aggregate_course(inputs: CourseInputs, config: AggregationConfig) -> CourseResult:
    total_sessions = max(inputs.attendance_total, 0)
    present = min(max(inputs.attendance_present, 0), total_sessions)
    if total_sessions > 0:
        attendance_score = present / total_sessions * config.attendance_weight
    else:
        attendance_score = 0.0

    test_score = float(sum(inputs.test_scores))
    exam_score = float(sum(inputs.exam_scores))

    return CourseResult(
        course_id=inputs.course_id,
        course_code=inputs.course_code,
        course_title=inputs.course_title,
        attendance=AttendanceComponent(
            present=present,
            total=total_sessions,
            weight=config.attendance_weight,
            score=round(attendance_score, 2),
        ),
        test=ScoreComponent(score=round(test_score, 2), max=round(inputs.test_max, 2)),
        exam=ScoreComponent(score=round(exam_score, 2), max=round(inputs.exam_max, 2)),
        total=round(attendance_score + test_score + exam_score, 2),
    )


def aggregate_courses(courses: Iterable[CourseInputs], config: AggregationConfig) -> List[CourseResult]:
    return [aggregate_course(c, config) for c in courses]


class ResultAggregationService:

    def _collect_inputs(self, db: Session, student, course, semester_id: int) -> CourseInputs:
        inputs = CourseInputs(course_id=course.id, course_code=course.code, course_title=course.title)

        inputs.attendance_total = crud_attendance_session.count_for_course_semester(
            db,
            course_id=course.id,
            semester_id=semester_id,
            department_id=student.department_id,
            level=student.level,
        )
        inputs.attendance_present = crud_attendance.count_attended(
            db, student_id=student.id, course_id=course.id, semester_id=semester_id
        )

        exams = crud_exam.get_for_course_semester(db, course_id=course.id, semester_id=semester_id)
        attempts = {
            a.exam_id: a
            for a in crud_exam_attempt.get_by_student_for_exams(
                db, student_id=student.id, exam_ids=[e.id for e in exams]
            )
        }
        for cbt_exam in exams:
            attempt = attempts.get(cbt_exam.id)
            earned = attempt.score if attempt and attempt.is_completed and attempt.score is not None else None
            if cbt_exam.category == ExamCategoryEnum.TEST:
                inputs.test_max += cbt_exam.total_marks
                if earned is not None:
                    inputs.test_scores.append(earned)
            else:
                inputs.exam_max += cbt_exam.total_marks
                if earned is not None:
                    inputs.exam_scores.append(earned)

        written = crud_written_exam.get_for_course_semester(db, course_id=course.id, semester_id=semester_id)
        inputs.exam_max += sum(w.total_marks for w in written)
        for written_score in crud_score.get_by_student_for_exams(
            db, student_id=student.id, exam_ids=[w.id for w in written]
        ):
            inputs.exam_scores.append(written_score.score)

        return inputs

    def aggregate_for_student(self, db: Session, student, semester_id: int,
                              config: AggregationConfig, course_id: Optional[int] = None) -> StudentResult:
        course_ids = crud_enrollment.get_course_ids_for_student(db, student_id=student.id, semester_id=semester_id)
        if course_id:
            course_ids = [cid for cid in course_ids if cid == course_id]
        courses = sorted(crud_course.get_by_ids(db, ids=course_ids), key=lambda c: c.code)

        results = aggregate_courses(
            (self._collect_inputs(db, student, course, semester_id) for course in courses), config
        )
        return StudentResult(
            student=StudentSummary(
                id=student.id,
                matric_number=student.matric_number,
                full_name=student.full_name,
                department_id=student.department_id,
                level=student.level,
            ),
            semester_id=semester_id,
            courses=results,
        )

    def get_aggregate_results(
        self,
        db: Session,
        current_user_context: UserContext,
        department_id: Optional[int] = None,
        course_id: Optional[int] = None,
        level: Optional[int] = None,
        student_id: Optional[int] = None,
    ) -> List[StudentResult]:
        current_semester = crud_semester.get_current(db)
        if not current_semester:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No active semester has been configured."
            )

        settings_row = crud_setting.get_or_create(db)
        config = AggregationConfig(attendance_weight=settings_row.attendance_weight)

        if permission_helper.is_student(current_user_context):
            student = crud_student.get(db, id=current_user_context.student.id)
            students = [student] if student else []
        else:
            students = crud_student.get_multi_filtered(
                db, department_id=department_id, level=level, student_id=student_id, limit=None
            )

        logger.info(
            f"Aggregating results for {len(students)} student(s) in semester {current_semester.id}"
        )
        return [
            self.aggregate_for_student(db, s, current_semester.id, config, course_id=course_id)
            for s in students
        ]


result_aggregation_service = ResultAggregationService()

import logging
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from classify.core.constants import AttendanceStatusEnum
from classify.crud.academic_session import semester as crud_semester
from classify.crud.attendance import attendance as crud_attendance, attendance_session as crud_attendance_session
from classify.crud.course import course as crud_course
from classify.crud.student import student as crud_student
from classify.schemas.attendance import (
    AttendanceCreate, AttendanceMarkRequest, AttendanceSessionCreate, SelfMarkRequest
)
from classify.schemas.user import UserContext
from classify.utils.permission import PermissionHelper as permission_helper
from classify.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class AttendanceService:

    def _require_course_and_semester(self, db: Session, course_id: int, semester_id: int):
        if not crud_course.get(db, id=course_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        if not crud_semester.get(db, id=semester_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Semester not found.")

    def start_session(self, db: Session, session_in: AttendanceSessionCreate):
        self._require_course_and_semester(db, session_in.course_id, session_in.semester_id)
        closed = crud_attendance_session.deactivate_for_course(db, course_id=session_in.course_id)
        db_session = crud_attendance_session.create(db, obj_in=session_in)
        logger.info(
            f"Attendance session {db_session.id} started for course {session_in.course_id}; closed {closed} earlier session(s)"
        )
        return db_session

    def end_session(self, db: Session, session_id: int):
        db_session = crud_attendance_session.get(db, id=session_id)
        if not db_session:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attendance session not found.")
        if not db_session.is_active:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Attendance session already ended.")
        return crud_attendance_session.update(db, db_obj=db_session, obj_in={"is_active": False, "ended_at": utcnow()})

    def mark(self, db: Session, mark_in: AttendanceMarkRequest, current_user_context: UserContext) -> int:
        self._require_course_and_semester(db, mark_in.course_id, mark_in.semester_id)
        for record in mark_in.records:
            if not crud_student.get(db, id=record.student_id):
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Student {record.student_id} not found.")
            crud_attendance.upsert(db, obj_in=AttendanceCreate(
                student_id=record.student_id,
                course_id=mark_in.course_id,
                semester_id=mark_in.semester_id,
                date=mark_in.date,
                status=record.status,
                note=record.note,
                marked_by_id=current_user_context.user.id,
            ))
        db.commit()
        return len(mark_in.records)

    def self_mark(self, db: Session, mark_in: SelfMarkRequest, current_user_context: UserContext):
        student = permission_helper.require_student(current_user_context)
        active_session = crud_attendance_session.get_active_matching(
            db,
            course_id=mark_in.course_id,
            semester_id=mark_in.semester_id,
            department_id=student.department_id,
            level=student.level,
        )
        if not active_session:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No active attendance session for this course"
            )
        record = crud_attendance.upsert(db, obj_in=AttendanceCreate(
            student_id=student.id,
            course_id=mark_in.course_id,
            semester_id=mark_in.semester_id,
            date=utcnow().date(),
            status=AttendanceStatusEnum.PRESENT,
            marked_by_id=current_user_context.user.id,
        ))
        db.commit()
        db.refresh(record)
        return record


attendance_service = AttendanceService()

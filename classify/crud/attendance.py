from datetime import date
from typing import List, Optional, Set, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session

from classify.crud.base import CRUDBase
from classify.core.constants import ATTENDED_STATUSES
from classify.models.attendance import Attendance, AttendanceSession
from classify.schemas.attendance import (
    AttendanceCreate, AttendanceUpdate, AttendanceSessionCreate, AttendanceSessionUpdate
)
from classify.utils.timeutils import utcnow

class CRUDAttendanceSession(CRUDBase[AttendanceSession, AttendanceSessionCreate, AttendanceSessionUpdate]):

    def deactivate_for_course(self, db: Session, *, course_id: int) -> int:
        return (
            db.query(AttendanceSession)
            .filter(AttendanceSession.course_id == course_id, AttendanceSession.is_active.is_(True))
            .update({"is_active": False, "ended_at": utcnow()}, synchronize_session=False)
        )

    def _matching(self, query, department_id: Optional[int], level: Optional[int]):
        return query.filter(
            or_(AttendanceSession.department_id.is_(None), AttendanceSession.department_id == department_id),
            or_(AttendanceSession.level.is_(None), AttendanceSession.level == level),
        )

    def get_active_matching(
        self,
        db: Session,
        *,
        course_id: int,
        semester_id: Optional[int] = None,
        department_id: Optional[int] = None,
        level: Optional[int] = None,
    ) -> Optional[AttendanceSession]:
        query = db.query(AttendanceSession).filter(
            AttendanceSession.course_id == course_id,
            AttendanceSession.is_active.is_(True),
        )
        if semester_id:
            query = query.filter(AttendanceSession.semester_id == semester_id)
        return self._matching(query, department_id, level).order_by(AttendanceSession.id.desc()).first()

    def get_active_course_semesters(
        self,
        db: Session,
        *,
        course_ids: List[int],
        department_id: Optional[int] = None,
        level: Optional[int] = None,
    ) -> Set[Tuple[int, int]]:
        if not course_ids:
            return set()
        query = db.query(AttendanceSession.course_id, AttendanceSession.semester_id).filter(
            AttendanceSession.course_id.in_(course_ids),
            AttendanceSession.is_active.is_(True),
        )
        rows = self._matching(query, department_id, level).all()
        return {(course_id, semester_id) for course_id, semester_id in rows}

    def count_for_course_semester(
        self,
        db: Session,
        *,
        course_id: int,
        semester_id: int,
        department_id: Optional[int] = None,
        level: Optional[int] = None,
    ) -> int:
        query = db.query(AttendanceSession).filter(
            AttendanceSession.course_id == course_id,
            AttendanceSession.semester_id == semester_id,
        )
        return self._matching(query, department_id, level).count()


class CRUDAttendance(CRUDBase[Attendance, AttendanceCreate, AttendanceUpdate]):

    def get_by_key(self, db: Session, *, student_id: int, course_id: int, on_date: date) -> Optional[Attendance]:
        return (
            db.query(Attendance)
            .filter(
                Attendance.student_id == student_id,
                Attendance.course_id == course_id,
                Attendance.date == on_date,
            )
            .first()
        )

    def upsert(self, db: Session, *, obj_in: AttendanceCreate) -> Attendance:
        existing = self.get_by_key(db, student_id=obj_in.student_id, course_id=obj_in.course_id, on_date=obj_in.date)
        if existing:
            return self.update(
                db,
                db_obj=existing,
                obj_in={"status": obj_in.status, "note": obj_in.note, "marked_by_id": obj_in.marked_by_id},
                commit=False,
            )
        return self.create(db, obj_in=obj_in, commit=False)

    def count_attended(self, db: Session, *, student_id: int, course_id: int, semester_id: int) -> int:
        return (
            db.query(Attendance)
            .filter(
                Attendance.student_id == student_id,
                Attendance.course_id == course_id,
                Attendance.semester_id == semester_id,
                Attendance.status.in_(ATTENDED_STATUSES),
            )
            .count()
        )

    def get_multi_filtered(
        self,
        db: Session,
        *,
        course_id: int,
        semester_id: Optional[int] = None,
        on_date: Optional[date] = None,
    ) -> List[Attendance]:
        query = db.query(Attendance).filter(Attendance.course_id == course_id)
        if semester_id:
            query = query.filter(Attendance.semester_id == semester_id)
        if on_date:
            query = query.filter(Attendance.date == on_date)
        return query.order_by(Attendance.date.desc(), Attendance.student_id).all()

attendance_session = CRUDAttendanceSession(AttendanceSession)
attendance = CRUDAttendance(Attendance)

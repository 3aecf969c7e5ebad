from typing import List, Optional
from sqlalchemy.orm import Session

from classify.crud.base import CRUDBase
from classify.models.course_enrollment import Enrollment
from classify.schemas.course import EnrollmentCreate, EnrollmentUpdate

class CRUDEnrollment(CRUDBase[Enrollment, EnrollmentCreate, EnrollmentUpdate]):
    def get_by_key(self, db: Session, *, student_id: int, course_id: int, semester_id: int) -> Optional[Enrollment]:
        return (
            db.query(Enrollment)
            .filter(
                Enrollment.student_id == student_id,
                Enrollment.course_id == course_id,
                Enrollment.semester_id == semester_id,
            )
            .first()
        )

    def get_course_ids_for_student(self, db: Session, *, student_id: int, semester_id: int) -> List[int]:
        rows = (
            db.query(Enrollment.course_id)
            .filter(Enrollment.student_id == student_id, Enrollment.semester_id == semester_id)
            .distinct()
            .all()
        )
        return [row[0] for row in rows]

course_enrollment = CRUDEnrollment(Enrollment)

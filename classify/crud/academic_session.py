from typing import Optional
from sqlalchemy.orm import Session, selectinload

from classify.crud.base import CRUDBase
from classify.models.academic_session import AcademicSession, Semester
from classify.schemas.academic_session import (
    AcademicSessionCreate, AcademicSessionUpdate, SemesterRecordCreate, SemesterUpdate
)

class CRUDAcademicSession(CRUDBase[AcademicSession, AcademicSessionCreate, AcademicSessionUpdate]):
    def get(self, db: Session, id: int) -> Optional[AcademicSession]:
        return (
            db.query(AcademicSession)
            .options(selectinload(AcademicSession.semesters))
            .filter(AcademicSession.id == id)
            .first()
        )

    def get_by_title(self, db: Session, *, title: str) -> Optional[AcademicSession]:
        return db.query(AcademicSession).filter(AcademicSession.title == title).first()


class CRUDSemester(CRUDBase[Semester, SemesterRecordCreate, SemesterUpdate]):
    def get_current(self, db: Session) -> Optional[Semester]:
        return db.query(Semester).filter(Semester.is_current.is_(True)).first()

    def set_current(self, db: Session, *, semester: Semester) -> Semester:
        db.query(Semester).filter(Semester.id != semester.id).update(
            {Semester.is_current: False}, synchronize_session=False
        )
        semester.is_current = True
        db.add(semester)
        db.commit()
        db.refresh(semester)
        return semester

academic_session = CRUDAcademicSession(AcademicSession)
semester = CRUDSemester(Semester)

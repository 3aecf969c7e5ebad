from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from classify.crud.base import CRUDBase
from classify.models.student import Student
from classify.schemas.student import StudentRecordCreate, StudentUpdate

class CRUDStudent(CRUDBase[Student, StudentRecordCreate, StudentUpdate]):

    def get_by_user_id(self, db: Session, *, user_id: int) -> Optional[Student]:
        return db.query(Student).filter(Student.user_id == user_id).first()

    def get_by_matric_number(self, db: Session, *, matric_number: str) -> Optional[Student]:
        return db.query(Student).filter(Student.matric_number == matric_number).first()

    def _filtered_query(
        self,
        db: Session,
        department_id: Optional[int] = None,
        level: Optional[int] = None,
        student_id: Optional[int] = None,
        search: Optional[str] = None,
    ):
        query = db.query(Student).options(selectinload(Student.user))
        if department_id:
            query = query.filter(Student.department_id == department_id)
        if level:
            query = query.filter(Student.level == level)
        if student_id:
            query = query.filter(Student.id == student_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Student.first_name.ilike(pattern),
                Student.last_name.ilike(pattern),
                Student.matric_number.ilike(pattern),
            ))
        return query

    def get_multi_filtered(
        self,
        db: Session,
        *,
        department_id: Optional[int] = None,
        level: Optional[int] = None,
        student_id: Optional[int] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = 100,
    ) -> List[Student]:
        query = self._filtered_query(db, department_id, level, student_id, search)
        query = query.order_by(Student.last_name, Student.first_name).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_filtered(
        self,
        db: Session,
        *,
        department_id: Optional[int] = None,
        level: Optional[int] = None,
        search: Optional[str] = None,
    ) -> int:
        return self._filtered_query(db, department_id, level, None, search).count()

student = CRUDStudent(Student)

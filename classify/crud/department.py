from typing import Optional
from sqlalchemy.orm import Session

from classify.crud.base import CRUDBase
from classify.models.department import Department
from classify.schemas.department import DepartmentCreate, DepartmentUpdate

class CRUDDepartment(CRUDBase[Department, DepartmentCreate, DepartmentUpdate]):
    def get_by_name(self, db: Session, *, name: str) -> Optional[Department]:
        return db.query(Department).filter(Department.name == name).first()

department = CRUDDepartment(Department)

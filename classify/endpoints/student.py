from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from classify.core.constants import RoleEnum
from classify.schemas.response import APIResponse
from classify.schemas.student import Student, StudentCreate
from classify.schemas.user import UserContext
from classify.services.academic import academic_service
from classify.utils import deps

router = APIRouter()

require_staff = deps.require_roles(RoleEnum.ADMIN, RoleEnum.INSTRUCTOR)


@router.post("", response_model=APIResponse[Student], status_code=status.HTTP_201_CREATED)
async def create_student(
    *,
    db: Session = Depends(deps.get_transactional_db),
    student_in: StudentCreate,
    context: UserContext = Depends(deps.require_roles(RoleEnum.ADMIN))
):
    new_student = academic_service.create_student(db, student_in=student_in)
    return APIResponse(message="Student created successfully", data=Student.model_validate(new_student))


@router.get("", response_model=APIResponse[List[Student]])
async def list_students(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(require_staff),
    department_id: Optional[int] = None,
    level: Optional[int] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = Query(100, ge=1, le=500),
):
    students = academic_service.list_students(
        db, department_id=department_id, level=level, search=search, skip=skip, limit=limit
    )
    return APIResponse(message="Students retrieved successfully", data=[Student.model_validate(s) for s in students])

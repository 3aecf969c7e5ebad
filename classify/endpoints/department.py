from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from classify.core.constants import RoleEnum
from classify.crud.department import department as crud_department
from classify.schemas.department import Department, DepartmentCreate
from classify.schemas.response import APIResponse
from classify.schemas.user import UserContext
from classify.services.academic import academic_service
from classify.utils import deps

router = APIRouter()


@router.post("", response_model=APIResponse[Department], status_code=status.HTTP_201_CREATED)
async def create_department(
    *,
    db: Session = Depends(deps.get_transactional_db),
    department_in: DepartmentCreate,
    context: UserContext = Depends(deps.require_roles(RoleEnum.ADMIN))
):
    department = academic_service.create_department(db, department_in=department_in)
    return APIResponse(message="Department created successfully", data=Department.model_validate(department))


@router.get("", response_model=APIResponse[List[Department]])
async def list_departments(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
):
    departments = crud_department.get_multi(db)
    return APIResponse(message="Departments retrieved successfully", data=[Department.model_validate(d) for d in departments])

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from classify.core.constants import RoleEnum
from classify.crud.academic_session import academic_session as crud_session
from classify.schemas.academic_session import AcademicSession, AcademicSessionCreate, Semester, SemesterCreate
from classify.schemas.response import APIResponse
from classify.schemas.user import UserContext
from classify.services.academic import academic_service
from classify.utils import deps

router = APIRouter()

require_admin = deps.require_roles(RoleEnum.ADMIN)


@router.post("", response_model=APIResponse[AcademicSession], status_code=status.HTTP_201_CREATED)
async def create_session(
    *,
    db: Session = Depends(deps.get_transactional_db),
    session_in: AcademicSessionCreate,
    context: UserContext = Depends(require_admin)
):
    new_session = academic_service.create_session(db, session_in=session_in)
    return APIResponse(message="Academic session created successfully", data=AcademicSession.model_validate(new_session))


@router.get("", response_model=APIResponse[List[AcademicSession]])
async def list_sessions(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
):
    sessions = crud_session.get_multi(db)
    return APIResponse(message="Academic sessions retrieved successfully", data=[AcademicSession.model_validate(s) for s in sessions])


@router.post("/{session_id}/semesters", response_model=APIResponse[Semester], status_code=status.HTTP_201_CREATED)
async def create_semester(
    *,
    db: Session = Depends(deps.get_transactional_db),
    session_id: int,
    semester_in: SemesterCreate,
    context: UserContext = Depends(require_admin)
):
    semester = academic_service.create_semester(db, session_id=session_id, semester_in=semester_in)
    return APIResponse(message="Semester created successfully", data=Semester.model_validate(semester))


@router.put("/semesters/{semester_id}/activate", response_model=APIResponse[Semester])
async def activate_semester(
    *,
    db: Session = Depends(deps.get_transactional_db),
    semester_id: int,
    context: UserContext = Depends(require_admin)
):
    semester = academic_service.activate_semester(db, semester_id=semester_id)
    return APIResponse(message="Semester activated successfully", data=Semester.model_validate(semester))

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from classify.core.constants import RoleEnum
from classify.schemas.attendance import (
    Attendance, AttendanceMarkRequest, AttendanceMarkResult, AttendanceSession, AttendanceSessionCreate, SelfMarkRequest
)
from classify.schemas.response import APIResponse
from classify.schemas.user import UserContext
from classify.services.attendance import attendance_service
from classify.utils import deps

router = APIRouter()

require_staff = deps.require_roles(RoleEnum.ADMIN, RoleEnum.INSTRUCTOR)


@router.post("/sessions", response_model=APIResponse[AttendanceSession], status_code=status.HTTP_201_CREATED)
async def start_attendance_session(
    *,
    db: Session = Depends(deps.get_transactional_db),
    session_in: AttendanceSessionCreate,
    context: UserContext = Depends(require_staff)
):
    session = attendance_service.start_session(db, session_in=session_in)
    return APIResponse(message="Attendance session started", data=AttendanceSession.model_validate(session))


@router.put("/sessions/{session_id}/end", response_model=APIResponse[AttendanceSession])
async def end_attendance_session(
    *,
    db: Session = Depends(deps.get_transactional_db),
    session_id: int,
    context: UserContext = Depends(require_staff)
):
    session = attendance_service.end_session(db, session_id=session_id)
    return APIResponse(message="Attendance session ended", data=AttendanceSession.model_validate(session))


@router.post("/mark", response_model=APIResponse[AttendanceMarkResult])
async def mark_attendance(
    *,
    db: Session = Depends(deps.get_transactional_db),
    mark_in: AttendanceMarkRequest,
    context: UserContext = Depends(require_staff)
):
    marked = attendance_service.mark(db, mark_in=mark_in, current_user_context=context)
    return APIResponse(message="Attendance recorded", data=AttendanceMarkResult(marked=marked))


@router.post("/self-mark", response_model=APIResponse[Attendance])
async def self_mark_attendance(
    *,
    db: Session = Depends(deps.get_transactional_db),
    mark_in: SelfMarkRequest,
    context: UserContext = Depends(deps.require_roles(RoleEnum.STUDENT))
):
    record = attendance_service.self_mark(db, mark_in=mark_in, current_user_context=context)
    return APIResponse(message="Attendance recorded", data=Attendance.model_validate(record))

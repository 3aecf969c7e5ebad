from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from classify.core.constants import RoleEnum
from classify.schemas.response import APIResponse
from classify.schemas.user import UserContext
from classify.schemas.written_exam import Score, ScoreBulkUpsert, ScoreSaveResult, WrittenExam, WrittenExamCreate
from classify.services.written_exam import written_exam_service
from classify.utils import deps

router = APIRouter()

require_staff = deps.require_roles(RoleEnum.ADMIN, RoleEnum.INSTRUCTOR)


@router.post("", response_model=APIResponse[WrittenExam], status_code=status.HTTP_201_CREATED)
async def create_written_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_in: WrittenExamCreate,
    context: UserContext = Depends(require_staff)
):
    exam = written_exam_service.create_exam(db, exam_in=exam_in)
    return APIResponse(message="Written exam created successfully", data=WrittenExam.model_validate(exam))


@router.get("", response_model=APIResponse[List[WrittenExam]])
async def list_written_exams(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(require_staff),
    course_id: Optional[int] = None,
    semester_id: Optional[int] = None,
):
    exams = written_exam_service.list_exams(db, course_id=course_id, semester_id=semester_id)
    return APIResponse(message="Written exams retrieved successfully", data=[WrittenExam.model_validate(e) for e in exams])


@router.post("/{exam_id}/scores", response_model=APIResponse[ScoreSaveResult])
async def save_scores(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    scores_in: ScoreBulkUpsert,
    context: UserContext = Depends(require_staff)
):
    saved = written_exam_service.save_scores(db, exam_id=exam_id, scores_in=scores_in)
    return APIResponse(message="Scores saved successfully", data=ScoreSaveResult(saved=saved))


@router.get("/{exam_id}/results", response_model=APIResponse[List[Score]])
async def get_written_exam_results(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: int,
    context: UserContext = Depends(require_staff)
):
    scores = written_exam_service.get_results(db, exam_id=exam_id)
    return APIResponse(message="Scores retrieved successfully", data=[Score.model_validate(s) for s in scores])

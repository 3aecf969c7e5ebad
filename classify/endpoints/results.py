from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from classify.schemas.response import APIResponse
from classify.schemas.result import StudentResult
from classify.schemas.user import UserContext
from classify.services.result_aggregation import result_aggregation_service
from classify.utils import deps

router = APIRouter()


@router.get("/results/aggregate", response_model=APIResponse[List[StudentResult]])
async def get_aggregate_results(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    department_id: Optional[int] = None,
    course_id: Optional[int] = None,
    level: Optional[int] = None,
    student_id: Optional[int] = None,
):
    results = result_aggregation_service.get_aggregate_results(
        db,
        current_user_context=context,
        department_id=department_id,
        course_id=course_id,
        level=level,
        student_id=student_id,
    )
    return APIResponse(message="Results retrieved successfully", data=results)

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from classify.core.constants import DifficultyEnum, ExamDeletionModeEnum, RoleEnum
from classify.middleware.logging import resolve_client_ip
from classify.schemas.response import APIResponse, PaginatedData
from classify.schemas.exam import Exam, ExamCreate, ExamDetail, ExamListing, ExamQuestionsAssign, ExamUpdate
from classify.schemas.exam_attempt import (
    AnswerSubmission, AttemptResult, AttemptStart, ExamResultRow, SavedAnswer, SubmitAttemptRequest, SubmitResult
)
from classify.schemas.question import (
    Question, QuestionBatchCreate, QuestionCreate, QuestionUpdate, TopicQuestionsDeleted
)
from classify.schemas.user import UserContext
from classify.services.exam import exam_service
from classify.services.exam_attempt import exam_attempt_service
from classify.services.question import question_service
from classify.utils import deps

router = APIRouter()

require_staff = deps.require_roles(RoleEnum.ADMIN, RoleEnum.INSTRUCTOR)
require_student = deps.require_roles(RoleEnum.STUDENT)
require_admin = deps.require_roles(RoleEnum.ADMIN)


# Question bank

@router.get("/questions", response_model=APIResponse[PaginatedData[Question]])
async def list_questions(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(require_staff),
    course_id: Optional[int] = None,
    difficulty: Optional[DifficultyEnum] = None,
    topic_ids: Optional[List[int]] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
):
    data = question_service.list_questions(
        db, course_id=course_id, difficulty=difficulty, topic_ids=topic_ids, page=page, limit=limit
    )
    return APIResponse(message="Questions retrieved successfully", data=data)


@router.post("/questions", response_model=APIResponse[Question], status_code=status.HTTP_201_CREATED)
async def create_question(
    *,
    db: Session = Depends(deps.get_transactional_db),
    question_in: QuestionCreate,
    context: UserContext = Depends(require_staff)
):
    new_question = question_service.create_question(db, question_in=question_in)
    return APIResponse(message="Question created successfully", data=Question.model_validate(new_question))


@router.post("/questions/batch", response_model=APIResponse[List[Question]], status_code=status.HTTP_201_CREATED)
async def create_questions_batch(
    *,
    db: Session = Depends(deps.get_transactional_db),
    batch_in: QuestionBatchCreate,
    context: UserContext = Depends(require_staff)
):
    created = question_service.create_questions_batch(db, batch_in=batch_in)
    return APIResponse(
        message=f"{len(created)} questions created successfully",
        data=[Question.model_validate(q) for q in created]
    )


@router.put("/questions/{question_id}", response_model=APIResponse[Question])
async def update_question(
    *,
    db: Session = Depends(deps.get_transactional_db),
    question_id: int,
    question_in: QuestionUpdate,
    context: UserContext = Depends(require_staff)
):
    updated = question_service.update_question(db, question_id=question_id, question_in=question_in)
    return APIResponse(message="Question updated successfully", data=Question.model_validate(updated))


@router.delete("/questions/{question_id}", response_model=APIResponse[Question])
async def delete_question(
    *,
    db: Session = Depends(deps.get_transactional_db),
    question_id: int,
    context: UserContext = Depends(require_staff)
):
    deleted = question_service.delete_question(db, question_id=question_id)
    return APIResponse(message="Question deleted successfully", data=Question.model_validate(deleted))


@router.delete("/questions/topic/{topic_id}", response_model=APIResponse[TopicQuestionsDeleted])
async def delete_topic_questions(
    *,
    db: Session = Depends(deps.get_transactional_db),
    topic_id: int,
    context: UserContext = Depends(require_staff)
):
    result = question_service.delete_topic_questions(db, topic_id=topic_id)
    return APIResponse(message="All questions in topic deleted", data=result)


# Exams

@router.post("/exams", response_model=APIResponse[Exam], status_code=status.HTTP_201_CREATED)
async def create_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_in: ExamCreate,
    context: UserContext = Depends(require_staff)
):
    new_exam = exam_service.create_exam(db, exam_in=exam_in)
    return APIResponse(message="Exam created successfully", data=Exam.model_validate(new_exam))


@router.get("/exams", response_model=APIResponse[List[ExamListing]])
async def list_exams(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    course_id: Optional[int] = None,
    semester_id: Optional[int] = None,
    published: Optional[bool] = None,
):
    exams = exam_service.list_exams(
        db, current_user_context=context, course_id=course_id, semester_id=semester_id, published=published
    )
    return APIResponse(message="Exams retrieved successfully", data=exams)


@router.get("/exams/{exam_id}", response_model=APIResponse[ExamDetail])
async def get_exam(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: int,
    context: UserContext = Depends(require_staff)
):
    exam = exam_service.get_exam_detail(db, exam_id=exam_id)
    return APIResponse(message="Exam retrieved successfully", data=exam)


@router.put("/exams/{exam_id}", response_model=APIResponse[Exam])
async def update_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    exam_in: ExamUpdate,
    context: UserContext = Depends(require_staff)
):
    updated_exam = exam_service.update_exam(db, exam_id=exam_id, exam_in=exam_in)
    return APIResponse(message="Exam updated successfully", data=Exam.model_validate(updated_exam))


@router.post("/exams/{exam_id}/questions", response_model=APIResponse[Exam])
async def assign_exam_questions(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    assign_in: ExamQuestionsAssign,
    context: UserContext = Depends(require_staff)
):
    updated_exam = exam_service.assign_questions(db, exam_id=exam_id, assign_in=assign_in)
    return APIResponse(message="Exam questions updated successfully", data=Exam.model_validate(updated_exam))


@router.delete("/exams/{exam_id}", response_model=APIResponse[Exam])
async def delete_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exam_id: int,
    mode: ExamDeletionModeEnum = ExamDeletionModeEnum.ARCHIVE,
    context: UserContext = Depends(require_admin)
):
    deleted_exam = exam_service.delete_exam(db, exam_id=exam_id, mode=mode)
    message = "Exam archived successfully" if mode == ExamDeletionModeEnum.ARCHIVE else "Exam scheduled for deletion"
    return APIResponse(message=message, data=Exam.model_validate(deleted_exam))


@router.get("/exams/{exam_id}/results", response_model=APIResponse[List[ExamResultRow]])
async def get_exam_results(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: int,
    context: UserContext = Depends(require_staff)
):
    results = exam_attempt_service.get_exam_results(db, exam_id=exam_id)
    return APIResponse(message="Exam results retrieved successfully", data=results)


# Attempts

@router.post("/exams/{exam_id}/start", response_model=APIResponse[AttemptStart])
async def start_exam_attempt(
    *,
    request: Request,
    db: Session = Depends(deps.get_db),
    exam_id: int,
    context: UserContext = Depends(require_student)
):
    started = exam_attempt_service.start_attempt(
        db, exam_id=exam_id, current_user_context=context, ip_address=resolve_client_ip(request)
    )
    message = "Exam attempt resumed" if started.resumed else "Exam attempt started"
    return APIResponse(message=message, data=started)


@router.post("/attempts/{attempt_id}/answers", response_model=APIResponse[SavedAnswer])
async def save_answer(
    *,
    db: Session = Depends(deps.get_transactional_db),
    attempt_id: int,
    answer_in: AnswerSubmission,
    context: UserContext = Depends(require_student)
):
    saved = exam_attempt_service.save_answer(
        db, attempt_id=attempt_id, answer_in=answer_in, current_user_context=context
    )
    return APIResponse(message="Answer saved", data=saved)


@router.post("/attempts/{attempt_id}/submit", response_model=APIResponse[SubmitResult])
async def submit_exam_attempt(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    submission: SubmitAttemptRequest,
    context: UserContext = Depends(require_student)
):
    result = exam_attempt_service.submit_attempt(
        db, attempt_id=attempt_id, submission=submission, current_user_context=context
    )
    return APIResponse(message="Exam submitted successfully", data=result)


@router.get("/attempts/{attempt_id}/result", response_model=APIResponse[AttemptResult])
async def get_attempt_result(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    result = exam_attempt_service.get_attempt_result(db, attempt_id=attempt_id, current_user_context=context)
    return APIResponse(message="Exam attempt retrieved successfully", data=result)

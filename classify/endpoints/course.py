from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from classify.core.constants import RoleEnum
from classify.crud.course import course as crud_course
from classify.schemas.course import Course, CourseCreate, Enrollment, EnrollmentRequest, Topic, TopicCreate
from classify.schemas.response import APIResponse
from classify.schemas.user import UserContext
from classify.services.academic import academic_service
from classify.utils import deps

router = APIRouter()

require_staff = deps.require_roles(RoleEnum.ADMIN, RoleEnum.INSTRUCTOR)


@router.post("", response_model=APIResponse[Course], status_code=status.HTTP_201_CREATED)
async def create_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_in: CourseCreate,
    context: UserContext = Depends(deps.require_roles(RoleEnum.ADMIN))
):
    new_course = academic_service.create_course(db, course_in=course_in)
    return APIResponse(message="Course created successfully", data=Course.model_validate(new_course))


@router.get("", response_model=APIResponse[List[Course]])
async def list_courses(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    department_id: Optional[int] = None,
    level: Optional[int] = None,
):
    courses = crud_course.get_multi_filtered(db, department_id=department_id, level=level)
    return APIResponse(message="Courses retrieved successfully", data=[Course.model_validate(c) for c in courses])


@router.post("/{course_id}/topics", response_model=APIResponse[Topic], status_code=status.HTTP_201_CREATED)
async def create_topic(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    topic_in: TopicCreate,
    context: UserContext = Depends(require_staff)
):
    topic = academic_service.create_topic(db, course_id=course_id, topic_in=topic_in)
    return APIResponse(message="Topic created successfully", data=Topic.model_validate(topic))


@router.get("/{course_id}/topics", response_model=APIResponse[List[Topic]])
async def list_topics(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    topics = academic_service.list_topics(db, course_id=course_id)
    return APIResponse(message="Topics retrieved successfully", data=[Topic.model_validate(t) for t in topics])


@router.post("/{course_id}/enrollments", response_model=APIResponse[List[Enrollment]])
async def enroll_students(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    enrollment_in: EnrollmentRequest,
    context: UserContext = Depends(require_staff)
):
    enrollments = academic_service.enroll_students(db, course_id=course_id, enrollment_in=enrollment_in)
    return APIResponse(message="Students enrolled successfully", data=[Enrollment.model_validate(e) for e in enrollments])

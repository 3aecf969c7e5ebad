from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from datetime import datetime

from classify.core.constants import ExamCategoryEnum, AttemptStatusEnum
from classify.schemas.question import Question
from classify.schemas.validators import reject_nulls
from classify.utils.timeutils import ensure_aware


def _check_window(start_window, end_window):
    if start_window and end_window and ensure_aware(end_window) <= ensure_aware(start_window):
        raise ValueError("end_window must be after start_window")


def _check_unique(ids):
    if ids and len(ids) != len(set(ids)):
        raise ValueError("question_ids must not contain duplicates")


class ExamBase(BaseModel):
    title: str
    category: ExamCategoryEnum = ExamCategoryEnum.TEST
    instructions: Optional[str] = None
    duration_minutes: int = Field(default=60, gt=0)
    total_marks: Optional[float] = Field(default=None, gt=0)
    pass_mark: float = Field(default=50.0, ge=0, le=100)
    start_window: Optional[datetime] = None
    end_window: Optional[datetime] = None
    allow_review: bool = True

class ExamCreate(ExamBase):
    course_id: int
    semester_id: int
    question_ids: Optional[List[int]] = None
    topic_ids: List[int] = []
    num_questions: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def validate_exam(self):
        _check_window(self.start_window, self.end_window)
        _check_unique(self.question_ids)
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "course_id": 1,
                "semester_id": 1,
                "title": "CSC 101 Mid-Semester Test",
                "category": "TEST",
                "duration_minutes": 30,
                "total_marks": 20,
                "pass_mark": 50,
                "topic_ids": [1, 2],
                "num_questions": 20
            }
        }

class ExamUpdate(BaseModel):
    title: Optional[str] = None
    category: Optional[ExamCategoryEnum] = None
    instructions: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    total_marks: Optional[float] = Field(default=None, gt=0)
    pass_mark: Optional[float] = Field(default=None, ge=0, le=100)
    start_window: Optional[datetime] = None
    end_window: Optional[datetime] = None
    allow_review: Optional[bool] = None
    is_published: Optional[bool] = None
    topic_ids: Optional[List[int]] = None
    num_questions: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def validate_update(self):
        reject_nulls(self, nullable=("instructions", "start_window", "end_window", "num_questions"))
        _check_window(self.start_window, self.end_window)
        return self

class ExamQuestionsAssign(BaseModel):
    question_ids: List[int]

    @model_validator(mode="after")
    def validate_ids(self):
        _check_unique(self.question_ids)
        return self

class Exam(ExamBase):
    id: int
    course_id: int
    semester_id: int
    total_marks: float
    is_published: bool
    is_archived: bool
    deletion_scheduled_at: Optional[datetime] = None
    topic_ids: List[int] = []
    num_questions: Optional[int] = None
    question_ids: List[int] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ExamDetail(Exam):
    questions: List[Question] = []

class MyAttemptSummary(BaseModel):
    id: int
    status: AttemptStatusEnum
    score: Optional[float] = None
    percentage: Optional[float] = None
    is_passed: Optional[bool] = None

    model_config = ConfigDict(from_attributes=True)

class ExamListing(Exam):
    attempt_count: int = 0
    my_attempt: Optional[MyAttemptSummary] = None
    is_session_active: Optional[bool] = None

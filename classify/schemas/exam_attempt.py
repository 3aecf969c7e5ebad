from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime

from classify.core.constants import AttemptStatusEnum, ExamCategoryEnum, OptionEnum
from classify.schemas.question import QuestionPublic, QuestionReview

class ExamAttemptCreate(BaseModel):
    exam_id: int
    student_id: int
    started_at: datetime
    ip_address: Optional[str] = None

class ExamAttemptUpdate(BaseModel):
    submitted_at: Optional[datetime] = None
    is_completed: Optional[bool] = None
    score: Optional[float] = None
    percentage: Optional[float] = None
    is_passed: Optional[bool] = None
    auto_submitted: Optional[bool] = None

class ExamAttempt(BaseModel):
    id: int
    exam_id: int
    student_id: int
    started_at: datetime
    submitted_at: Optional[datetime] = None
    is_completed: bool
    status: AttemptStatusEnum
    score: Optional[float] = None
    percentage: Optional[float] = None
    is_passed: Optional[bool] = None
    auto_submitted: bool = False

    model_config = ConfigDict(from_attributes=True)

class ExamMeta(BaseModel):
    id: int
    title: str
    category: ExamCategoryEnum
    instructions: Optional[str] = None
    duration_minutes: int
    total_marks: float
    pass_mark: float
    allow_review: bool
    end_window: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class AnswerSubmission(BaseModel):
    question_id: int
    selected: Optional[OptionEnum] = None

    @field_validator("selected", mode="before")
    @classmethod
    def normalise_option(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            return v or None
        return v

class SavedAnswer(BaseModel):
    question_id: int
    selected: Optional[OptionEnum] = None

    model_config = ConfigDict(from_attributes=True)

class AttemptStart(BaseModel):
    attempt: ExamAttempt
    exam: ExamMeta
    questions: List[QuestionPublic]
    saved_answers: List[SavedAnswer] = []
    remaining_seconds: int
    resumed: bool = False

class SubmitAttemptRequest(BaseModel):
    answers: List[AnswerSubmission] = []

class SubmitResult(BaseModel):
    attempt_id: int
    score: float
    total_marks: float
    percentage: float
    is_passed: bool

class ReviewedAnswer(BaseModel):
    question_id: int
    selected: Optional[OptionEnum] = None
    is_correct: Optional[bool] = None
    question: QuestionReview

    model_config = ConfigDict(from_attributes=True)

class AttemptResult(BaseModel):
    attempt: ExamAttempt
    exam: ExamMeta
    answers: List[ReviewedAnswer] = []

class ExamResultRow(BaseModel):
    attempt_id: int
    student_id: int
    matric_number: str
    student_name: str
    score: Optional[float] = None
    percentage: Optional[float] = None
    is_passed: Optional[bool] = None
    submitted_at: Optional[datetime] = None
    auto_submitted: bool = False

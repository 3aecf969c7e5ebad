from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from classify.core.constants import DifficultyEnum, OptionEnum
from classify.schemas.validators import reject_nulls


def _upper_option(v):
    if isinstance(v, str):
        return v.strip().upper()
    return v


class QuestionContent(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    question_text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_option: OptionEnum
    explanation: Optional[str] = None
    marks: float = Field(default=1.0, gt=0)
    difficulty: DifficultyEnum = DifficultyEnum.MEDIUM

    @field_validator("correct_option", mode="before")
    @classmethod
    def normalise_option(cls, v):
        return _upper_option(v)

    @field_validator("question_text", "option_a", "option_b", "option_c", "option_d")
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Question text and all four options are required")
        return v

class QuestionCreate(QuestionContent):
    course_id: int
    topic_id: Optional[int] = None

class QuestionBatchItem(QuestionContent):
    topic_id: Optional[int] = None

class QuestionBatchCreate(BaseModel):
    course_id: int
    topic_id: Optional[int] = None
    questions: List[QuestionBatchItem] = Field(..., min_length=1)

class QuestionUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    topic_id: Optional[int] = None
    question_text: Optional[str] = None
    option_a: Optional[str] = None
    option_b: Optional[str] = None
    option_c: Optional[str] = None
    option_d: Optional[str] = None
    correct_option: Optional[OptionEnum] = None
    explanation: Optional[str] = None
    marks: Optional[float] = Field(default=None, gt=0)
    difficulty: Optional[DifficultyEnum] = None
    is_active: Optional[bool] = None

    @field_validator("correct_option", mode="before")
    @classmethod
    def normalise_option(cls, v):
        return _upper_option(v)

    @field_validator("question_text", "option_a", "option_b", "option_c", "option_d")
    @classmethod
    def not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Question text and options cannot be blank")
        return v

    @model_validator(mode="after")
    def no_nulls(self):
        reject_nulls(self, nullable=("topic_id", "explanation"))
        return self

class Question(QuestionCreate):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class TopicQuestionsDeleted(BaseModel):
    topic_id: int
    deleted: int
    deactivated: int

class QuestionPublic(BaseModel):
    """Question as shown to a student sitting an exam: no answer key."""
    id: int
    question_text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    marks: float

    model_config = ConfigDict(from_attributes=True)

class QuestionReview(QuestionPublic):
    correct_option: OptionEnum
    explanation: Optional[str] = None

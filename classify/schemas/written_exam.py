from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from classify.core.constants import WrittenExamTypeEnum

class WrittenExamCreate(BaseModel):
    course_id: int
    semester_id: int
    title: str
    exam_type: WrittenExamTypeEnum = WrittenExamTypeEnum.WRITTEN
    exam_date: Optional[datetime] = None
    total_marks: float = Field(default=100.0, gt=0)

class WrittenExamUpdate(BaseModel):
    title: Optional[str] = None
    exam_type: Optional[WrittenExamTypeEnum] = None
    exam_date: Optional[datetime] = None
    total_marks: Optional[float] = Field(default=None, gt=0)

class WrittenExam(WrittenExamCreate):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ScoreEntry(BaseModel):
    student_id: int
    score: float = Field(..., ge=0)
    remark: Optional[str] = None

class ScoreBulkUpsert(BaseModel):
    scores: List[ScoreEntry] = Field(..., min_length=1)

class ScoreCreate(BaseModel):
    exam_id: int
    student_id: int
    score: float
    grade: str
    remark: Optional[str] = None

class ScoreUpdate(BaseModel):
    score: Optional[float] = None
    grade: Optional[str] = None
    remark: Optional[str] = None

class Score(BaseModel):
    id: int
    exam_id: int
    student_id: int
    score: float
    grade: str
    remark: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class ScoreSaveResult(BaseModel):
    saved: int

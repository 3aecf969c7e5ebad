from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

class CourseBase(BaseModel):
    code: str
    title: str
    department_id: Optional[int] = None
    level: Optional[int] = None
    credit_units: int = Field(default=3, ge=0)

class CourseCreate(CourseBase):
    pass

class CourseUpdate(BaseModel):
    title: Optional[str] = None
    department_id: Optional[int] = None
    level: Optional[int] = None
    credit_units: Optional[int] = Field(default=None, ge=0)

class Course(CourseBase):
    id: int

    model_config = ConfigDict(from_attributes=True)

class TopicCreate(BaseModel):
    title: str

class TopicRecordCreate(TopicCreate):
    course_id: int

class TopicUpdate(BaseModel):
    title: Optional[str] = None

class Topic(TopicCreate):
    id: int
    course_id: int

    model_config = ConfigDict(from_attributes=True)

class EnrollmentRequest(BaseModel):
    semester_id: int
    student_ids: List[int] = Field(..., min_length=1)

class EnrollmentCreate(BaseModel):
    student_id: int
    course_id: int
    semester_id: int

class EnrollmentUpdate(BaseModel):
    semester_id: Optional[int] = None

class Enrollment(EnrollmentCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)

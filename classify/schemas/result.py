from pydantic import BaseModel
from typing import List, Optional

class AttendanceComponent(BaseModel):
    present: int
    total: int
    weight: float
    score: float

class ScoreComponent(BaseModel):
    score: float
    max: float

class CourseResult(BaseModel):
    course_id: int
    course_code: str
    course_title: str
    attendance: AttendanceComponent
    test: ScoreComponent
    exam: ScoreComponent
    total: float

class StudentSummary(BaseModel):
    id: int
    matric_number: str
    full_name: str
    department_id: Optional[int] = None
    level: int

class StudentResult(BaseModel):
    student: StudentSummary
    semester_id: int
    courses: List[CourseResult]

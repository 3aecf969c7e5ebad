from pydantic import BaseModel, ConfigDict
from typing import List

class SemesterCreate(BaseModel):
    name: str
    is_current: bool = False

class SemesterRecordCreate(SemesterCreate):
    session_id: int

class SemesterUpdate(BaseModel):
    is_current: bool

class Semester(SemesterCreate):
    id: int
    session_id: int

    model_config = ConfigDict(from_attributes=True)

class AcademicSessionCreate(BaseModel):
    title: str

class AcademicSessionUpdate(BaseModel):
    title: str

class AcademicSession(AcademicSessionCreate):
    id: int
    semesters: List[Semester] = []

    model_config = ConfigDict(from_attributes=True)

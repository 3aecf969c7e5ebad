from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import date as DateType, datetime

from classify.core.constants import AttendanceStatusEnum

class AttendanceSessionCreate(BaseModel):
    course_id: int
    semester_id: int
    department_id: Optional[int] = None
    level: Optional[int] = None

class AttendanceSessionUpdate(BaseModel):
    is_active: Optional[bool] = None
    ended_at: Optional[datetime] = None

class AttendanceSession(AttendanceSessionCreate):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class AttendanceRecordIn(BaseModel):
    student_id: int
    status: AttendanceStatusEnum = AttendanceStatusEnum.PRESENT
    note: Optional[str] = None

class AttendanceMarkRequest(BaseModel):
    course_id: int
    semester_id: int
    date: DateType
    records: List[AttendanceRecordIn] = Field(..., min_length=1)

class SelfMarkRequest(BaseModel):
    course_id: int
    semester_id: int

class AttendanceCreate(BaseModel):
    student_id: int
    course_id: int
    semester_id: int
    date: DateType
    status: AttendanceStatusEnum
    note: Optional[str] = None
    marked_by_id: Optional[int] = None

class AttendanceUpdate(BaseModel):
    status: Optional[AttendanceStatusEnum] = None
    note: Optional[str] = None
    marked_by_id: Optional[int] = None

class Attendance(AttendanceCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)

class AttendanceMarkResult(BaseModel):
    marked: int

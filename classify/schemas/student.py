from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from typing import Optional
from datetime import datetime

class StudentBase(BaseModel):
    matric_number: str
    first_name: str
    last_name: str
    department_id: Optional[int] = None
    level: int = 100

    @field_validator("matric_number", "first_name", "last_name")
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

class StudentCreate(StudentBase):
    email: EmailStr

class StudentRecordCreate(StudentBase):
    user_id: int

class StudentUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    department_id: Optional[int] = None
    level: Optional[int] = None

class Student(StudentBase):
    id: int
    user_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime

from classify.core.constants import RoleEnum

class UserBase(BaseModel):
    full_name: str
    email: EmailStr

class UserCreate(UserBase):
    role: RoleEnum = RoleEnum.STUDENT
    is_active: bool = True

class User(UserBase):
    id: int
    role: RoleEnum
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class StudentIdentity(BaseModel):
    id: int
    matric_number: str
    first_name: str
    last_name: str
    department_id: Optional[int] = None
    level: int

    model_config = ConfigDict(from_attributes=True)

class UserContext(BaseModel):
    """The authenticated caller, with the student profile when the role is student."""
    user: User
    role: RoleEnum
    student: Optional[StudentIdentity] = None

    model_config = ConfigDict(from_attributes=True)

from pydantic import BaseModel, ConfigDict
from typing import Optional

class DepartmentCreate(BaseModel):
    name: str
    code: Optional[str] = None

class DepartmentUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None

class Department(DepartmentCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)

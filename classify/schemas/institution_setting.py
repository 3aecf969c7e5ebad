from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Optional
from datetime import datetime

from classify.schemas.validators import reject_nulls

class InstitutionSettingUpdate(BaseModel):
    institution_name: Optional[str] = None
    institution_acronym: Optional[str] = None
    attendance_weight: Optional[float] = Field(default=None, ge=0, le=100)
    exam_deletion_grace_days: Optional[int] = Field(default=None, ge=0)
    require_attendance_session_for_cbt: Optional[bool] = None

    @model_validator(mode='before')
    @classmethod
    def at_least_one_value(cls, data: Any):
        if isinstance(data, dict) and not data:
            raise ValueError("At least one field must be provided for update")
        return data

    @model_validator(mode='after')
    def no_nulls(self):
        reject_nulls(self)
        return self

class InstitutionSetting(BaseModel):
    institution_name: str
    institution_acronym: str
    attendance_weight: float
    exam_deletion_grace_days: int
    require_attendance_session_for_cbt: bool
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

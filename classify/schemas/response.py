import math
from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any, Dict, List

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Success envelope returned by every endpoint."""
    message: str = Field(..., description="Short summary of what happened.")
    data: Optional[DataType] = Field(None, description="Payload of the response.")

class PaginatedData(BaseModel, Generic[DataType]):
    items: List[DataType]
    total: int
    page: int
    size: int
    pages: int

    @classmethod
    def build(cls, items: List[DataType], total: int, page: int, size: int) -> "PaginatedData[DataType]":
        return cls(items=items, total=total, page=page, size=size, pages=math.ceil(total / size) if total else 0)

class ErrorDetail(BaseModel):
    code: str = Field(..., description="BAD_REQUEST, VALIDATION_ERROR, UNAUTHORIZED, FORBIDDEN, NOT_FOUND, CONFLICT or INTERNAL_SERVER_ERROR")
    message: str = Field(..., description="Reason shown to the caller, e.g. 'Exam window has closed'")
    details: Optional[Dict[str, Any]] = Field(None, description="Field-level validation errors, when any")

class ErrorResponse(BaseModel):
    """Error envelope rendered by the exception handlers."""
    error: ErrorDetail
    timestamp: str = Field(..., description="UTC time the error was produced, ISO 8601")
    path: str
    request_id: Optional[str] = Field(None, description="Matches the X-Request-ID response header")

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field


# ==================== Classroom Schemas ====================

class ClassroomCreate(BaseModel):
    """Schema for creating a new classroom."""
    name: str = Field(..., min_length=1, max_length=255)


class StudentAdd(BaseModel):
    """Schema for enrolling a student."""
    student_id: str


class ClassroomResponse(BaseModel):
    """Schema for classroom response."""
    id: str
    name: str
    teacher: str
    students: List[str] = []
    student_count: int = 0


# ==================== Notice Schemas ====================

class NoticeCreate(BaseModel):
    """Schema for posting a notice."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., max_length=5000)
    image: Optional[str] = None


class NoticeUpdate(BaseModel):
    """Schema for a partial notice update; omitted fields are left alone."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    image: Optional[str] = None


class NoticeResponse(BaseModel):
    id: str
    author: str
    title: str
    description: str
    image: Optional[str] = None


class NoticeListResponse(BaseModel):
    notices: List[NoticeResponse]
    total: int


# ==================== Assignment Schemas ====================

class AssignmentCreate(NoticeCreate):
    """Schema for posting an assignment."""
    due_date: datetime


class AssignmentUpdate(NoticeUpdate):
    due_date: Optional[datetime] = None


class AssignmentResponse(NoticeResponse):
    due_date: datetime


class AssignmentListResponse(BaseModel):
    assignments: List[AssignmentResponse]
    total: int

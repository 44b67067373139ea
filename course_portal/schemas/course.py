# course_portal/schemas/course.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from course_portal.models.course import Semester


class CourseCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    credits: int = Field(..., gt=0)
    semester: Semester
    year: int = Field(..., ge=2000, le=2100)
    max_enrollment: int = Field(..., gt=0)
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v):
        if not v.strip():
            raise ValueError("Course code cannot be blank")
        return v.strip().upper()


class CourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    description: Optional[str]
    credits: int
    semester: Semester
    year: int
    max_enrollment: int
    current_enrollment: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CourseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    credits: int
    semester: Semester
    year: int

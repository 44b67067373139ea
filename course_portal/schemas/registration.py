# course_portal/schemas/registration.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from course_portal.models.course import Semester
from course_portal.models.registration import RegistrationStatus
from course_portal.schemas.course import CourseSummary


class RegistrationCreate(BaseModel):
    course_id: int = Field(..., gt=0)
    semester: Semester
    year: int = Field(..., ge=2000, le=2100)


class RegistrationStatusUpdate(BaseModel):
    status: RegistrationStatus


class RegistrationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_profile_id: int
    course_id: int
    semester: Semester
    year: int
    status: RegistrationStatus
    registration_date: datetime
    created_at: datetime
    updated_at: datetime


class RegistrationWithCourse(RegistrationOut):
    course: CourseSummary

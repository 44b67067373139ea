# course_portal/schemas/dashboard.py
from pydantic import BaseModel
from typing import List

from course_portal.schemas.course import CourseOut
from course_portal.schemas.profile import StudentProfileOut
from course_portal.schemas.registration import RegistrationWithCourse


class DashboardOut(BaseModel):
    student_profile: StudentProfileOut
    current_registrations: List[RegistrationWithCourse]
    available_courses: List[CourseOut]

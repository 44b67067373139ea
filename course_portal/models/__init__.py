# course_portal/models/__init__.py - Import all models so SQLAlchemy can discover them

from course_portal.models.base import Base

from course_portal.models.user import User, UserRole
from course_portal.models.student_profile import StudentProfile
from course_portal.models.course import Course, Semester
from course_portal.models.registration import Registration, RegistrationStatus
from course_portal.models.student import Student

__all__ = [
    "Base",
    "User",
    "UserRole",
    "StudentProfile",
    "Course",
    "Semester",
    "Registration",
    "RegistrationStatus",
    "Student",
]

# course_portal/services/dashboard_service.py - Student dashboard aggregation
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import select
from typing import Dict, Any

from course_portal.core.errors import NotFoundError
from course_portal.models.course import Course
from course_portal.models.registration import Registration
from course_portal.services.profile_service import get_student_profile


def get_dashboard_data(db: Session, user_id: int) -> Dict[str, Any]:
    """
    Everything the student home page shows in one call.

    Returns:
        Dict with the profile, its registrations (each with its course,
        newest first) and all active courses

    Raises:
        NotFoundError: If the user has no student profile
    """
    profile = get_student_profile(db, user_id)
    if profile is None:
        raise NotFoundError("Student profile not found")

    registrations = db.execute(
        select(Registration)
        .options(joinedload(Registration.course))
        .where(Registration.student_profile_id == profile.id)
        .order_by(Registration.registration_date.desc(), Registration.id.desc())
    ).scalars().all()

    courses = db.execute(
        select(Course)
        .where(Course.is_active.is_(True))
        .order_by(Course.year.desc(), Course.semester, Course.code)
    ).scalars().all()

    return {
        "student_profile": profile,
        "current_registrations": list(registrations),
        "available_courses": list(courses),
    }

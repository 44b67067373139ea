# course_portal/services/profile_service.py
from sqlalchemy.orm import Session
from sqlalchemy import select
from typing import Optional
import logging

from course_portal.core.db import run_atomic
from course_portal.core.errors import NotFoundError
from course_portal.models.student_profile import StudentProfile, CONTACT_FIELDS
from course_portal.schemas.profile import StudentProfileUpdate

logger = logging.getLogger(__name__)


def get_student_profile(db: Session, user_id: int) -> Optional[StudentProfile]:
    return db.execute(
        select(StudentProfile).where(StudentProfile.user_id == user_id)
    ).scalar_one_or_none()


def update_student_profile(db: Session, profile_id: int, data: StudentProfileUpdate) -> StudentProfile:
    """Apply only the contact fields present in the request; explicit nulls clear them"""
    changes = {k: v for k, v in data.changes().items() if k in CONTACT_FIELDS}

    def _update(session: Session) -> StudentProfile:
        profile = session.get(StudentProfile, profile_id)
        if profile is None:
            raise NotFoundError(f"Student profile with id {profile_id} not found")
        for field, value in changes.items():
            setattr(profile, field, value)
        if changes:
            session.flush()
        return profile

    profile = run_atomic(db, _update, name="update profile")
    db.refresh(profile)

    if changes:
        logger.info(f"Profile {profile_id} updated: {', '.join(sorted(changes))}")
    return profile

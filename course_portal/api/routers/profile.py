# course_portal/api/routers/profile.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from course_portal.core.db import get_db
from course_portal.api.deps.auth import get_current_profile
from course_portal.models.student_profile import StudentProfile
from course_portal.schemas.profile import StudentProfileOut, StudentProfileUpdate
from course_portal.services.profile_service import update_student_profile

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=StudentProfileOut)
async def get_profile(profile: StudentProfile = Depends(get_current_profile)):
    return profile


@router.patch("", response_model=StudentProfileOut)
async def update_profile(
    update_data: StudentProfileUpdate,
    profile: StudentProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Update contact details; omitted fields are left as they are"""
    return update_student_profile(db, profile.id, update_data)

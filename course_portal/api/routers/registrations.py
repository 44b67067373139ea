# course_portal/api/routers/registrations.py - Course registrations
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Dict, Any, List
import logging

from course_portal.core.db import get_db
from course_portal.api.deps.auth import get_current_profile, require_admin
from course_portal.models.student_profile import StudentProfile
from course_portal.schemas.registration import (
    RegistrationCreate,
    RegistrationOut,
    RegistrationStatusUpdate,
)
from course_portal.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=RegistrationOut, status_code=status.HTTP_201_CREATED)
async def create_registration(
    registration_data: RegistrationCreate,
    profile: StudentProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Register the caller for a course; the registration starts pending"""
    return RegistrationService(db).create_registration(
        student_profile_id=profile.id,
        course_id=registration_data.course_id,
        semester=registration_data.semester,
        year=registration_data.year,
    )


@router.get("", response_model=List[RegistrationOut])
async def get_my_registrations(
    profile: StudentProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    return RegistrationService(db).get_student_registrations(profile.id)


@router.post("/{registration_id}/withdraw", response_model=RegistrationOut)
async def withdraw_registration(
    registration_id: int,
    profile: StudentProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    return RegistrationService(db).withdraw_registration(registration_id, profile.id)


@router.patch("/{registration_id}/status", response_model=RegistrationOut)
async def update_registration_status(
    registration_id: int,
    status_data: RegistrationStatusUpdate,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Approve, reject or withdraw a registration (admin)"""
    registration = RegistrationService(db).update_registration_status(registration_id, status_data.status)
    logger.info(f"Registration {registration_id} set to {registration.status} by admin {ctx['user'].email}")
    return registration

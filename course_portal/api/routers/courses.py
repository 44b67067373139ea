# course_portal/api/routers/courses.py - Course catalog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Dict, Any, List, Optional
import logging

from course_portal.core.db import get_db
from course_portal.api.deps.auth import require_admin
from course_portal.models.course import Semester
from course_portal.schemas.course import CourseCreate, CourseOut
from course_portal.services import course_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/available", response_model=List[CourseOut])
async def get_available_courses(
    semester: Semester = Query(...),
    year: int = Query(..., ge=2000, le=2100),
    db: Session = Depends(get_db)
):
    """Active courses of a term that still have seats"""
    return course_service.get_available_courses(db, semester, year)


@router.get("", response_model=List[CourseOut])
async def list_courses(
    semester: Optional[Semester] = Query(None),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    include_inactive: bool = Query(True),
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    return course_service.list_courses(db, semester, year, include_inactive)


@router.post("", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    ctx: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db)
):
    course = course_service.create_course(db, course_data)
    logger.info(f"Course {course.code} created by admin {ctx['user'].email}")
    return course

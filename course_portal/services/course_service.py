# course_portal/services/course_service.py - Course catalog queries and admin creation
from sqlalchemy.orm import Session
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Union
import logging

from course_portal.core.db import run_atomic
from course_portal.core.errors import ConflictError
from course_portal.models.course import Course, Semester
from course_portal.schemas.course import CourseCreate

logger = logging.getLogger(__name__)


def get_available_courses(db: Session, semester: Union[Semester, str], year: int) -> List[Course]:
    """Active courses of a term that still have a free seat, ordered by code"""
    semester = Semester(semester).value
    return list(
        db.execute(
            select(Course)
            .where(
                Course.semester == semester,
                Course.year == year,
                Course.is_active.is_(True),
                Course.current_enrollment < Course.max_enrollment,
            )
            .order_by(Course.code)
        ).scalars().all()
    )


def list_courses(
    db: Session,
    semester: Optional[Union[Semester, str]] = None,
    year: Optional[int] = None,
    include_inactive: bool = True,
) -> List[Course]:
    query = select(Course)
    if semester is not None:
        query = query.where(Course.semester == Semester(semester).value)
    if year is not None:
        query = query.where(Course.year == year)
    if not include_inactive:
        query = query.where(Course.is_active.is_(True))
    return list(db.execute(query.order_by(Course.year.desc(), Course.semester, Course.code)).scalars().all())


def create_course(db: Session, data: CourseCreate) -> Course:
    """Add a course to the catalog with an empty counter"""

    def _create(session: Session) -> Course:
        if session.execute(select(Course.id).where(Course.code == data.code)).first():
            raise ConflictError(f"Course code {data.code} already exists")

        course = Course(
            code=data.code,
            name=data.name,
            description=data.description,
            credits=data.credits,
            semester=data.semester.value,
            year=data.year,
            max_enrollment=data.max_enrollment,
            current_enrollment=0,
            is_active=data.is_active,
        )
        session.add(course)
        try:
            session.flush()
        except IntegrityError as e:
            raise ConflictError(f"Course code {data.code} already exists") from e
        return course

    course = run_atomic(db, _create, name="create course")
    db.refresh(course)
    logger.info(f"Course created: {course.code} ({course.semester} {course.year}, max {course.max_enrollment})")
    return course

# course_portal/services/registration_service.py - Registration lifecycle business logic
from sqlalchemy.orm import Session
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import List, Union
import logging

from course_portal.core.db import run_atomic
from course_portal.core.errors import (
    NotFoundError,
    InactiveCourseError,
    CapacityExceededError,
    DuplicateRegistrationError,
    ConflictError,
)
from course_portal.models.course import Semester
from course_portal.models.registration import Registration, RegistrationStatus
from course_portal.models.student_profile import StudentProfile
from course_portal.services import enrollment

logger = logging.getLogger(__name__)


class RegistrationService:
    """Service class for creating, withdrawing and reviewing registrations"""

    def __init__(self, db: Session):
        self.db = db

    def create_registration(
        self,
        student_profile_id: int,
        course_id: int,
        semester: Union[Semester, str],
        year: int,
    ) -> Registration:
        """
        Register a student for a course and take a seat for it.

        Args:
            student_profile_id: Profile registering
            course_id: Course to register for
            semester: Term semester stored on the registration
            year: Term year stored on the registration

        Returns:
            The new pending Registration

        Raises:
            NotFoundError: Unknown profile or course
            InactiveCourseError: Course is not accepting registrations
            CapacityExceededError: No seat left
            DuplicateRegistrationError: A registration for the same term already exists
        """
        semester = Semester(semester).value

        def _create(db: Session) -> Registration:
            profile = db.get(StudentProfile, student_profile_id)
            if profile is None:
                raise NotFoundError(f"Student profile with id {student_profile_id} not found")

            course = enrollment.lock_course(db, course_id)
            if course is None:
                raise NotFoundError(f"Course with id {course_id} not found")

            if not course.is_active:
                raise InactiveCourseError(f"Course {course.code} is not currently active")

            if course.is_full:
                raise CapacityExceededError(
                    f"Course {course.code} is full ({course.current_enrollment}/{course.max_enrollment})"
                )

            duplicate_message = (
                f"Student is already registered for course {course.code} in {semester} {year}"
            )
            existing = db.execute(
                select(Registration.id).where(
                    Registration.student_profile_id == student_profile_id,
                    Registration.course_id == course_id,
                    Registration.semester == semester,
                    Registration.year == year,
                )
            ).first()
            if existing:
                raise DuplicateRegistrationError(duplicate_message)

            registration = Registration(
                student_profile_id=student_profile_id,
                course_id=course_id,
                semester=semester,
                year=year,
                status=RegistrationStatus.PENDING.value,
            )
            db.add(registration)
            try:
                db.flush()
            except IntegrityError as e:
                # lost a race with an identical insert
                raise DuplicateRegistrationError(duplicate_message) from e

            enrollment.take_seat(db, course)
            return registration

        try:
            registration = run_atomic(self.db, _create, name="create registration")
        except (CapacityExceededError, InactiveCourseError, DuplicateRegistrationError) as e:
            logger.info(f"Registration rejected for profile {student_profile_id}, course {course_id}: {e}")
            raise

        self.db.refresh(registration)
        logger.info(
            f"Registration {registration.id} created: profile {student_profile_id}, "
            f"course {course_id}, {semester} {year}"
        )
        return registration

    def withdraw_registration(self, registration_id: int, student_profile_id: int) -> Registration:
        """
        Withdraw a student's own registration, releasing its seat if it held one.

        A registration owned by another profile is reported as not found.
        """

        def _withdraw(db: Session):
            row = enrollment.lock_registration(db, registration_id, student_profile_id)
            if row is None:
                raise NotFoundError("Registration not found or does not belong to this student")

            registration, course = row
            previous = RegistrationStatus(registration.status)
            delta = enrollment.withdrawal_delta(previous)
            if not enrollment.apply_transition(
                db, registration, course, previous, RegistrationStatus.WITHDRAWN, delta
            ):
                # lost to a concurrent change; report against the status that won
                enrollment.withdrawal_delta(RegistrationStatus(registration.status))
                raise ConflictError("Registration changed while it was being withdrawn, please retry")
            return registration, previous, course.current_enrollment

        registration, previous, seats_taken = run_atomic(self.db, _withdraw, name="withdraw registration")
        self.db.refresh(registration)

        logger.info(
            f"Registration {registration_id} withdrawn by profile {student_profile_id} "
            f"(was {previous.value}, course {registration.course_id} now at {seats_taken})"
        )
        return registration

    def update_registration_status(
        self,
        registration_id: int,
        status: Union[RegistrationStatus, str],
    ) -> Registration:
        """
        Change a registration's status on behalf of an administrator.

        Requesting the current status returns the registration unchanged.

        Raises:
            NotFoundError: Unknown registration
            InvalidTransitionError: Transition not allowed for administrators
            CapacityExceededError: Approval on a full course
            ConflictError: Another request moved the registration to a different status first
        """
        target = RegistrationStatus(status)

        def _update(db: Session):
            row = enrollment.lock_registration(db, registration_id)
            if row is None:
                raise NotFoundError(f"Registration with id {registration_id} not found")

            registration, course = row
            current = RegistrationStatus(registration.status)
            if current == target:
                return registration, current, None

            delta = enrollment.admin_transition_delta(current, target)
            capacity_message = f"Course {course.code} has reached maximum enrollment capacity"
            if delta > 0 and course.is_full:
                raise CapacityExceededError(capacity_message)

            if not enrollment.apply_transition(
                db, registration, course, current, target, delta, capacity_message
            ):
                if registration.status == target.value:
                    return registration, target, None
                raise ConflictError(
                    f"Registration {registration_id} changed while it was being updated, please retry"
                )
            return registration, current, course.current_enrollment

        registration, previous, seats_taken = run_atomic(
            self.db, _update, name="update registration status"
        )
        self.db.refresh(registration)

        if seats_taken is None:
            logger.debug(f"Registration {registration_id} already {target.value}, nothing to do")
        else:
            logger.info(
                f"Registration {registration_id} status {previous.value} -> {target.value} "
                f"(course {registration.course_id} now at {seats_taken})"
            )
        return registration

    def get_student_registrations(self, student_profile_id: int) -> List[Registration]:
        """All registrations of a profile, newest first"""
        return list(
            self.db.execute(
                select(Registration)
                .where(Registration.student_profile_id == student_profile_id)
                .order_by(Registration.registration_date.desc(), Registration.id.desc())
            ).scalars().all()
        )

# course_portal/services/enrollment.py - Registration status machine and seat accounting
"""
Enrollment accounting.

A registration's status and its course's ``current_enrollment`` always change
together, inside the caller's transaction. Rows are read with
``SELECT ... FOR UPDATE``, and both the status write and the seat change are
compare-and-set UPDATEs, so two writers racing for the last seat, or for the
same registration, cannot both commit.

Seat deltas per transition:

    pending  -> approved   +1  (needs a free seat)
    rejected -> approved   +1  (needs a free seat)
    approved -> rejected   -1
    approved -> withdrawn  -1
    pending  -> rejected    0
    rejected -> withdrawn   0  (administrator only)
    pending  -> withdrawn   0  (student withdrawal only)

Same-status requests are no-ops. ``withdrawn`` is terminal.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from course_portal.core.errors import (
    AlreadyWithdrawnError,
    CapacityExceededError,
    InvalidTransitionError,
)
from course_portal.models.course import Course
from course_portal.models.registration import Registration, RegistrationStatus

logger = logging.getLogger(__name__)

PENDING = RegistrationStatus.PENDING
APPROVED = RegistrationStatus.APPROVED
REJECTED = RegistrationStatus.REJECTED
WITHDRAWN = RegistrationStatus.WITHDRAWN

# Status changes an administrator may make, with their seat delta
ADMIN_TRANSITIONS: dict[Tuple[RegistrationStatus, RegistrationStatus], int] = {
    (PENDING, APPROVED): 1,
    (REJECTED, APPROVED): 1,
    (APPROVED, REJECTED): -1,
    (APPROVED, WITHDRAWN): -1,
    (PENDING, REJECTED): 0,
    (REJECTED, WITHDRAWN): 0,
}

# Statuses a student may withdraw from, with their seat delta
WITHDRAWAL_DELTAS: dict[RegistrationStatus, int] = {
    PENDING: 0,
    APPROVED: -1,
}


def lock_course(db: Session, course_id: int) -> Optional[Course]:
    return db.execute(
        select(Course)
        .where(Course.id == course_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def lock_registration(
    db: Session,
    registration_id: int,
    student_profile_id: Optional[int] = None,
) -> Optional[Tuple[Registration, Course]]:
    """Read a registration and its course in one locking query.

    When ``student_profile_id`` is given, a registration owned by another
    profile is treated exactly like a missing one.
    """
    query = (
        select(Registration, Course)
        .join(Course, Registration.course_id == Course.id)
        .where(Registration.id == registration_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    if student_profile_id is not None:
        query = query.where(Registration.student_profile_id == student_profile_id)

    row = db.execute(query).first()
    if row is None:
        return None
    return row[0], row[1]


def admin_transition_delta(current: RegistrationStatus, requested: RegistrationStatus) -> int:
    """Seat delta for an admin status change, or InvalidTransitionError"""
    if current == requested:
        return 0
    if current == WITHDRAWN:
        raise InvalidTransitionError("Registration is withdrawn and can no longer change status")
    try:
        return ADMIN_TRANSITIONS[(current, requested)]
    except KeyError:
        raise InvalidTransitionError(
            f"Cannot change registration status from {current.value} to {requested.value}"
        )


def withdrawal_delta(current: RegistrationStatus) -> int:
    """Seat delta for a student withdrawal from ``current``"""
    if current == WITHDRAWN:
        raise AlreadyWithdrawnError("Registration is already withdrawn")
    if current not in WITHDRAWAL_DELTAS:
        raise InvalidTransitionError(f"Cannot withdraw a {current.value} registration")
    return WITHDRAWAL_DELTAS[current]


def take_seat(db: Session, course: Course, message: Optional[str] = None) -> None:
    """Increment the course counter unless the course is full"""
    result = db.execute(
        update(Course)
        .where(Course.id == course.id, Course.current_enrollment < Course.max_enrollment)
        .values(current_enrollment=Course.current_enrollment + 1, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.refresh(course)
        raise CapacityExceededError(
            message or f"Course {course.code} is full ({course.current_enrollment}/{course.max_enrollment})"
        )
    db.refresh(course)


def release_seat(db: Session, course: Course) -> None:
    """Decrement the course counter, never below zero"""
    result = db.execute(
        update(Course)
        .where(Course.id == course.id, Course.current_enrollment > 0)
        .values(current_enrollment=Course.current_enrollment - 1, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning(f"Seat release skipped for course {course.code}: counter already at zero")
    db.refresh(course)


def apply_transition(
    db: Session,
    registration: Registration,
    course: Course,
    previous: RegistrationStatus,
    new_status: RegistrationStatus,
    delta: int,
    capacity_message: Optional[str] = None,
) -> bool:
    """Set the new status and move the counter by ``delta``, within the open transaction.

    The status is only written while it still reads ``previous``. Returns False,
    with nothing changed, when another writer moved the registration first.
    A full course raises after the status write, so the caller's rollback
    undoes both.
    """
    result = db.execute(
        update(Registration)
        .where(Registration.id == registration.id, Registration.status == previous.value)
        .values(status=new_status.value, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.refresh(registration)
        logger.info(
            f"Registration {registration.id} left {previous.value} before it could move to "
            f"{new_status.value} (now {registration.status})"
        )
        return False

    if delta > 0:
        take_seat(db, course, capacity_message)
    elif delta < 0:
        release_seat(db, course)

    db.refresh(registration)
    return True


__all__ = [
    "ADMIN_TRANSITIONS",
    "WITHDRAWAL_DELTAS",
    "lock_course",
    "lock_registration",
    "admin_transition_delta",
    "withdrawal_delta",
    "take_seat",
    "release_seat",
    "apply_transition",
]

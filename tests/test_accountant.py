# tests/test_accountant.py - Status machine and seat counter rules
import pytest

from course_portal.core.errors import (
    AlreadyWithdrawnError,
    CapacityExceededError,
    InvalidTransitionError,
)
from course_portal.models.registration import RegistrationStatus as RS
from course_portal.services import enrollment


@pytest.mark.parametrize(
    "current, requested, delta",
    [
        (RS.PENDING, RS.APPROVED, 1),
        (RS.REJECTED, RS.APPROVED, 1),
        (RS.APPROVED, RS.REJECTED, -1),
        (RS.APPROVED, RS.WITHDRAWN, -1),
        (RS.PENDING, RS.REJECTED, 0),
        (RS.REJECTED, RS.WITHDRAWN, 0),
    ],
)
def test_admin_transition_deltas(current, requested, delta):
    assert enrollment.admin_transition_delta(current, requested) == delta


@pytest.mark.parametrize("status", list(RS))
def test_same_status_is_a_no_op(status):
    assert enrollment.admin_transition_delta(status, status) == 0


@pytest.mark.parametrize(
    "current, requested",
    [
        (RS.APPROVED, RS.PENDING),
        (RS.REJECTED, RS.PENDING),
        (RS.PENDING, RS.WITHDRAWN),
    ],
)
def test_admin_transitions_outside_the_table_are_rejected(current, requested):
    with pytest.raises(InvalidTransitionError):
        enrollment.admin_transition_delta(current, requested)


@pytest.mark.parametrize("requested", [RS.PENDING, RS.APPROVED, RS.REJECTED])
def test_withdrawn_is_terminal_for_admins(requested):
    with pytest.raises(InvalidTransitionError):
        enrollment.admin_transition_delta(RS.WITHDRAWN, requested)


def test_withdrawal_deltas():
    assert enrollment.withdrawal_delta(RS.PENDING) == 0
    assert enrollment.withdrawal_delta(RS.APPROVED) == -1

    with pytest.raises(AlreadyWithdrawnError):
        enrollment.withdrawal_delta(RS.WITHDRAWN)
    with pytest.raises(InvalidTransitionError):
        enrollment.withdrawal_delta(RS.REJECTED)


def test_take_seat_increments_until_full(db, make_course):
    course = make_course(max_enrollment=2)

    enrollment.take_seat(db, course)
    enrollment.take_seat(db, course)
    db.commit()
    assert course.current_enrollment == 2

    with pytest.raises(CapacityExceededError, match="is full"):
        enrollment.take_seat(db, course)
    db.rollback()
    db.refresh(course)
    assert course.current_enrollment == 2


def test_release_seat_never_goes_below_zero(db, make_course, caplog):
    course = make_course(current_enrollment=0)

    enrollment.release_seat(db, course)
    db.commit()

    assert course.current_enrollment == 0
    assert "counter already at zero" in caplog.text


def test_lock_registration_hides_other_students_rows(db, make_profile, make_course, make_registration):
    owner, other = make_profile(), make_profile()
    course = make_course()
    registration = make_registration(owner, course)

    row = enrollment.lock_registration(db, registration.id, owner.id)
    assert row is not None
    assert row[0].id == registration.id
    assert row[1].id == course.id

    assert enrollment.lock_registration(db, registration.id, other.id) is None
    assert enrollment.lock_registration(db, 9999) is None

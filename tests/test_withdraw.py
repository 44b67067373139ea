# tests/test_withdraw.py - Student-initiated withdrawal
import pytest

from course_portal.core.errors import AlreadyWithdrawnError, InvalidTransitionError, NotFoundError
from course_portal.services.registration_service import RegistrationService


def test_withdraw_approved_releases_a_seat(db, make_profile, make_course, make_registration):
    profile = make_profile()
    course = make_course(current_enrollment=5)
    registration = make_registration(profile, course, status="approved")

    result = RegistrationService(db).withdraw_registration(registration.id, profile.id)

    assert result.status == "withdrawn"
    db.refresh(course)
    assert course.current_enrollment == 4


def test_withdraw_pending_leaves_counter_alone(db, make_profile, make_course, make_registration):
    profile = make_profile()
    course = make_course(current_enrollment=5)
    registration = make_registration(profile, course, status="pending")

    result = RegistrationService(db).withdraw_registration(registration.id, profile.id)

    assert result.status == "withdrawn"
    db.refresh(course)
    assert course.current_enrollment == 5


def test_withdraw_rejected_is_invalid(db, make_profile, make_course, make_registration):
    profile = make_profile()
    course = make_course(current_enrollment=2)
    registration = make_registration(profile, course, status="rejected")

    with pytest.raises(InvalidTransitionError):
        RegistrationService(db).withdraw_registration(registration.id, profile.id)

    db.refresh(registration)
    db.refresh(course)
    assert registration.status == "rejected"
    assert course.current_enrollment == 2


def test_withdraw_twice(db, make_profile, make_course, make_registration):
    profile = make_profile()
    registration = make_registration(profile, make_course(), status="withdrawn")

    with pytest.raises(AlreadyWithdrawnError):
        RegistrationService(db).withdraw_registration(registration.id, profile.id)


def test_withdraw_someone_elses_registration_looks_missing(db, make_profile, make_course, make_registration):
    owner, intruder = make_profile(), make_profile()
    course = make_course(current_enrollment=1)
    registration = make_registration(owner, course, status="approved")
    service = RegistrationService(db)

    with pytest.raises(NotFoundError) as foreign:
        service.withdraw_registration(registration.id, intruder.id)
    with pytest.raises(NotFoundError) as missing:
        service.withdraw_registration(9999, intruder.id)

    assert str(foreign.value) == str(missing.value)
    db.refresh(registration)
    assert registration.status == "approved"


def test_withdraw_with_counter_at_zero_still_withdraws(db, make_profile, make_course, make_registration):
    profile = make_profile()
    course = make_course(current_enrollment=0)
    registration = make_registration(profile, course, status="approved")

    result = RegistrationService(db).withdraw_registration(registration.id, profile.id)

    assert result.status == "withdrawn"
    db.refresh(course)
    assert course.current_enrollment == 0


def test_withdraw_via_api(client, db, make_user, make_profile, make_course, make_registration, auth_headers):
    user = make_user()
    profile = make_profile(user=user)
    course = make_course(current_enrollment=3)
    registration = make_registration(profile, course, status="approved")

    response = client.post(f"/api/registrations/{registration.id}/withdraw", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["status"] == "withdrawn"
    db.refresh(course)
    assert course.current_enrollment == 2

    again = client.post(f"/api/registrations/{registration.id}/withdraw", headers=auth_headers(user))
    assert again.status_code == 409
    assert again.json()["code"] == "already_withdrawn"


def test_withdraw_foreign_registration_via_api_is_404(client, make_user, make_profile, make_course, make_registration, auth_headers):
    intruder = make_user()
    make_profile(user=intruder)
    registration = make_registration(make_profile(), make_course())

    response = client.post(f"/api/registrations/{registration.id}/withdraw", headers=auth_headers(intruder))

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"

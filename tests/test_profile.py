# tests/test_profile.py - Viewing and patching the student profile
import pytest

from course_portal.core.errors import NotFoundError
from course_portal.schemas.profile import StudentProfileUpdate
from course_portal.services.profile_service import update_student_profile


def test_get_own_profile(client, make_user, make_profile, auth_headers):
    user = make_user()
    profile = make_profile(user=user, student_id="STU000777")

    response = client.get("/api/profile", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["id"] == profile.id
    assert response.json()["student_id"] == "STU000777"


def test_profile_missing_for_admin_without_one(client, admin_headers):
    response = client.get("/api/profile", headers=admin_headers)
    assert response.status_code == 404


def test_patch_distinguishes_absent_null_and_value(client, db, make_user, make_profile, auth_headers):
    user = make_user()
    profile = make_profile(user=user, phone="555-0100", address="1 Main St", emergency_contact_name="Mum")

    response = client.patch(
        "/api/profile",
        json={"phone": "555-0199", "address": None},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["phone"] == "555-0199"
    assert data["address"] is None
    assert data["emergency_contact_name"] == "Mum"


def test_patch_rejects_identity_fields(client, make_user, make_profile, auth_headers):
    user = make_user()
    make_profile(user=user)

    response = client.patch("/api/profile", json={"student_id": "HACKED"}, headers=auth_headers(user))
    assert response.status_code == 422


def test_empty_patch_is_harmless(db, make_profile):
    profile = make_profile(phone="555-0100")

    updated = update_student_profile(db, profile.id, StudentProfileUpdate())

    assert updated.phone == "555-0100"


def test_update_unknown_profile(db):
    with pytest.raises(NotFoundError):
        update_student_profile(db, 9999, StudentProfileUpdate(phone="1"))

# tests/test_auth.py - Sign-up, login and bearer authentication
from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from course_portal.core.db import run_atomic
from course_portal.core.errors import PortalError
from course_portal.core.security import SecurityError, hash_password, token_manager
from course_portal.models import StudentProfile, User
from course_portal.services import auth_service

SIGNUP = {
    "email": "John.Doe@Student.edu",
    "password": "secret123",
    "first_name": "John",
    "last_name": "Doe",
    "student_id": "STU123456",
    "date_of_birth": "2004-01-15",
    "phone": "+1 (555) 123-4567",
    "address": "",
}


def test_register_creates_user_and_profile(client, db):
    response = client.post("/api/auth/register", json=SIGNUP)

    assert response.status_code == 201
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["email"] == "john.doe@student.edu"
    assert data["user"]["role"] == "student"
    assert "password_hash" not in data["user"]

    profile = db.query(StudentProfile).filter_by(student_id="STU123456").one()
    assert profile.user_id == data["user"]["id"]
    assert profile.phone == "+1 (555) 123-4567"
    assert profile.address is None


def test_register_duplicate_email_and_student_id(client):
    assert client.post("/api/auth/register", json=SIGNUP).status_code == 201

    same_email = client.post("/api/auth/register", json={**SIGNUP, "student_id": "STU999999"})
    assert same_email.status_code == 409
    assert same_email.json() == {"detail": "Email already registered", "code": "conflict"}

    same_id = client.post("/api/auth/register", json={**SIGNUP, "email": "other@student.edu"})
    assert same_id.status_code == 409
    assert same_id.json()["detail"] == "Student ID already exists"


def test_register_rejects_short_password_and_bad_email(client, db):
    assert client.post("/api/auth/register", json={**SIGNUP, "password": "123"}).status_code == 422
    assert client.post("/api/auth/register", json={**SIGNUP, "email": "not-an-email"}).status_code == 422
    assert db.query(User).count() == 0


def test_login_and_me(client):
    client.post("/api/auth/register", json=SIGNUP)

    response = client.post("/api/auth/login", json={"email": "john.doe@student.edu", "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["first_name"] == "John"


def test_login_failures_share_one_message(client, make_user):
    make_user(email="known@example.edu")

    wrong_password = client.post("/api/auth/login", json={"email": "known@example.edu", "password": "nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "ghost@example.edu", "password": "secret123"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["code"] == "invalid_credentials"


def test_login_records_last_login(client, db, make_user):
    user = make_user(email="known@example.edu")
    assert user.last_login is None

    client.post("/api/auth/login", json={"email": "known@example.edu", "password": "secret123"})

    db.refresh(user)
    assert user.last_login is not None


def test_login_retries_a_transient_failure_recording_last_login(db, make_user, monkeypatch):
    user = make_user(email="flaky@example.edu")
    attempts = []

    def flaky_run_atomic(session, work, *, name="atomic unit"):
        def once_flaky(inner):
            attempts.append(name)
            if len(attempts) == 1:
                raise OperationalError("UPDATE users", {}, Exception("server closed the connection"))
            return work(inner)

        return run_atomic(session, once_flaky, name=name)

    monkeypatch.setattr(auth_service, "run_atomic", flaky_run_atomic)

    logged_in = auth_service.AuthService(db).authenticate_user("flaky@example.edu", "secret123")

    assert attempts == ["record login", "record login"]
    assert logged_in.id == user.id
    assert logged_in.last_login is not None


def test_security_errors_are_portal_errors():
    with pytest.raises(SecurityError) as empty_password:
        hash_password("")
    assert isinstance(empty_password.value, PortalError)
    assert empty_password.value.to_dict() == {"detail": "Password cannot be empty", "code": "security_error"}

    with pytest.raises(SecurityError) as reserved_claim:
        token_manager.create_access_token(1, additional_claims={"sub": "someone-else"})
    assert reserved_claim.value.status_code == 400


def test_protected_route_rejects_missing_and_bad_tokens(client, make_user):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    user = make_user()
    expired = token_manager.create_access_token(subject=user.id, expires_delta=timedelta(minutes=-5))
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired"


def test_token_for_deleted_user_is_rejected(client, db, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)
    db.delete(user)
    db.commit()

    assert client.get("/api/auth/me", headers=headers).status_code == 401

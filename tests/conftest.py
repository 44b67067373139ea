# tests/conftest.py - Shared fixtures: in-memory database, client and factories
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-for-course-portal-0123456789"
os.environ["ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import itertools
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from course_portal.core.db import get_db
from course_portal.core.security import hash_password
from course_portal.main import app
from course_portal.models import Base, Course, Registration, StudentProfile, User, UserRole
from course_portal.services.auth_service import AuthService

engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role=UserRole.STUDENT, email=None, password=PASSWORD, first_name="Test", last_name="User"):
        n = next(counter)
        user = User(
            email=email or f"user{n}@example.edu",
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role.value,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_profile(db, make_user):
    counter = itertools.count(1)

    def _make(user=None, student_id=None, **contact):
        n = next(counter)
        user = user or make_user()
        profile = StudentProfile(
            user_id=user.id,
            student_id=student_id or f"STU{n:06d}",
            date_of_birth=date(2004, 1, 15),
            **contact,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def make_course(db):
    counter = itertools.count(101)

    def _make(
        code=None,
        max_enrollment=30,
        current_enrollment=0,
        semester="fall",
        year=2024,
        is_active=True,
        credits=3,
    ):
        n = next(counter)
        course = Course(
            code=code or f"CS{n}",
            name=f"Course {n}",
            credits=credits,
            semester=semester,
            year=year,
            max_enrollment=max_enrollment,
            current_enrollment=current_enrollment,
            is_active=is_active,
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make


@pytest.fixture
def make_registration(db):
    """Insert a registration row directly; the course counter is left alone"""

    def _make(profile, course, status="pending", semester=None, year=None):
        registration = Registration(
            student_profile_id=profile.id,
            course_id=course.id,
            semester=semester or course.semester,
            year=year or course.year,
            status=status,
        )
        db.add(registration)
        db.commit()
        db.refresh(registration)
        return registration

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {AuthService.create_token_for_user(user)}"}

    return _headers


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN, email="admin@example.edu", first_name="Ada", last_name="Admin")


@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)

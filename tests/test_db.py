# tests/test_db.py - Atomic units, retries and the health endpoint
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from course_portal.core.db import run_atomic
from course_portal.core.errors import NotFoundError, StorageUnavailableError
from course_portal.models import Course


def _flaky(failures):
    """Work that fails with a transient error ``failures`` times, then adds a course"""
    calls = {"n": 0}

    def work(session):
        calls["n"] += 1
        if calls["n"] <= failures:
            raise OperationalError("UPDATE courses", {}, Exception("server closed the connection"))
        course = Course(code=f"RETRY{calls['n']}", name="Retry", credits=1, semester="fall",
                        year=2024, max_enrollment=1)
        session.add(course)
        return course

    return work, calls


def test_transient_failure_is_retried_once(db):
    work, calls = _flaky(failures=1)

    course = run_atomic(db, work, name="flaky")

    assert calls["n"] == 2
    assert db.get(Course, course.id) is not None


def test_persistent_transient_failure_surfaces_as_unavailable(db):
    work, calls = _flaky(failures=5)

    with pytest.raises(StorageUnavailableError):
        run_atomic(db, work, name="flaky")

    assert calls["n"] == 2
    assert db.query(Course).count() == 0


def test_business_errors_roll_back_without_retry(db):
    calls = {"n": 0}

    def work(session):
        calls["n"] += 1
        session.add(Course(code="GONE", name="Gone", credits=1, semester="fall", year=2024, max_enrollment=1))
        session.flush()
        raise NotFoundError("nope")

    with pytest.raises(NotFoundError):
        run_atomic(db, work)

    assert calls["n"] == 1
    assert db.query(Course).count() == 0


def test_other_storage_errors_propagate(db, make_course):
    make_course(code="DUP")

    def work(session):
        session.add(Course(code="DUP", name="Dup", credits=1, semester="fall", year=2024, max_enrollment=1))
        session.flush()

    with pytest.raises(IntegrityError):
        run_atomic(db, work)


def test_storage_unavailable_renders_503(client, admin_headers, monkeypatch):
    from course_portal.services import course_service

    def unavailable(*args, **kwargs):
        raise StorageUnavailableError("Storage is temporarily unavailable, please try again")

    monkeypatch.setattr(course_service, "create_course", unavailable)
    response = client.post(
        "/api/courses",
        json={"code": "CS1", "name": "X", "credits": 1, "semester": "fall", "year": 2024, "max_enrollment": 1},
        headers=admin_headers,
    )

    assert response.status_code == 503
    assert response.json()["code"] == "storage_unavailable"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

# tests/test_courses.py - Course catalog
COURSE = {
    "code": "cs101",
    "name": "Introduction to Programming",
    "credits": 3,
    "semester": "fall",
    "year": 2024,
    "max_enrollment": 30,
}


def test_available_courses_filters_term_activity_and_capacity(client, make_course):
    open_course = make_course(code="CS200")
    make_course(code="CS100")
    make_course(code="CS300", max_enrollment=1, current_enrollment=1)
    make_course(code="CS400", is_active=False)
    make_course(code="CS500", semester="spring")
    make_course(code="CS600", year=2025)

    response = client.get("/api/courses/available", params={"semester": "fall", "year": 2024})

    assert response.status_code == 200
    assert [c["code"] for c in response.json()] == ["CS100", "CS200"]
    assert open_course.id in [c["id"] for c in response.json()]


def test_available_courses_needs_a_term(client):
    assert client.get("/api/courses/available").status_code == 422
    assert client.get("/api/courses/available", params={"semester": "autumn", "year": 2024}).status_code == 422


def test_create_course_as_admin(client, admin_headers):
    response = client.post("/api/courses", json=COURSE, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["code"] == "CS101"
    assert data["current_enrollment"] == 0
    assert data["is_active"] is True


def test_create_course_duplicate_code(client, admin_headers):
    client.post("/api/courses", json=COURSE, headers=admin_headers)
    response = client.post("/api/courses", json={**COURSE, "name": "Again"}, headers=admin_headers)

    assert response.status_code == 409
    assert response.json()["code"] == "conflict"


def test_create_course_validation(client, admin_headers):
    assert client.post("/api/courses", json={**COURSE, "credits": 0}, headers=admin_headers).status_code == 422
    assert client.post("/api/courses", json={**COURSE, "max_enrollment": 0}, headers=admin_headers).status_code == 422


def test_course_management_is_admin_only(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    assert client.post("/api/courses", json=COURSE, headers=headers).status_code == 403
    assert client.get("/api/courses", headers=headers).status_code == 403


def test_list_courses_filters(client, admin_headers, make_course):
    make_course(code="CS100")
    make_course(code="CS200", is_active=False)
    make_course(code="CS300", semester="spring")

    everything = client.get("/api/courses", headers=admin_headers).json()
    assert {c["code"] for c in everything} == {"CS100", "CS200", "CS300"}

    active_fall = client.get(
        "/api/courses",
        params={"semester": "fall", "include_inactive": "false"},
        headers=admin_headers,
    ).json()
    assert [c["code"] for c in active_fall] == ["CS100"]

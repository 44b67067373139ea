# tests/test_dashboard.py
def test_dashboard_shows_profile_registrations_and_active_courses(
    client, make_user, make_profile, make_course, make_registration, auth_headers
):
    user = make_user()
    profile = make_profile(user=user)
    enrolled = make_course(code="CS100")
    make_course(code="CS200")
    make_course(code="CS300", is_active=False)
    make_registration(profile, enrolled, status="approved")

    response = client.get("/api/dashboard", headers=auth_headers(user))

    assert response.status_code == 200
    data = response.json()
    assert data["student_profile"]["id"] == profile.id
    assert len(data["current_registrations"]) == 1
    assert data["current_registrations"][0]["course"]["code"] == "CS100"
    assert data["current_registrations"][0]["status"] == "approved"
    assert {c["code"] for c in data["available_courses"]} == {"CS100", "CS200"}


def test_dashboard_without_profile_is_404(client, admin_headers):
    response = client.get("/api/dashboard", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_admin_can_view_any_dashboard(client, admin_headers, make_user, make_profile):
    student = make_user()
    make_profile(user=student)

    response = client.get(f"/api/dashboard/{student.id}", headers=admin_headers)
    assert response.status_code == 200


def test_students_cannot_view_other_dashboards(client, make_user, make_profile, auth_headers):
    me, other = make_user(), make_user()
    make_profile(user=me)
    make_profile(user=other)

    response = client.get(f"/api/dashboard/{other.id}", headers=auth_headers(me))
    assert response.status_code == 403

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from classify.crud.academic_session import semester as crud_semester
from classify.crud.user import user as crud_user
from tests.helpers.asserts import api_call, assert_error, auth_headers


def test_department_create_and_list(client: TestClient, admin_token, instructor_token):
    created = api_call(client, "POST", "/departments", headers=auth_headers(admin_token),
                       json={"name": "Mathematics", "code": "MTH"}).json()["data"]
    assert created["code"] == "MTH"

    assert_error(client.post("/departments", headers=auth_headers(admin_token), json={"name": "Mathematics"}), 409)
    assert_error(client.post("/departments", headers=auth_headers(instructor_token), json={"name": "Physics"}), 403)

    listed = api_call(client, "GET", "/departments", headers=auth_headers(instructor_token)).json()["data"]
    assert "Mathematics" in [d["name"] for d in listed]


def test_only_one_current_semester(client: TestClient, admin_token, db_session: Session):
    print("\n[TEST] Semester activation")
    headers = auth_headers(admin_token)
    session = api_call(client, "POST", "/sessions", headers=headers, json={"title": "2024/2025"}).json()["data"]
    first = api_call(client, "POST", f"/sessions/{session['id']}/semesters", headers=headers,
                     json={"name": "First", "is_current": True}).json()["data"]
    second = api_call(client, "POST", f"/sessions/{session['id']}/semesters", headers=headers,
                      json={"name": "Second"}).json()["data"]
    assert first["is_current"] is True
    assert second["is_current"] is False

    activated = api_call(client, "PUT", f"/sessions/semesters/{second['id']}/activate", headers=headers).json()["data"]
    assert activated["is_current"] is True

    db_session.expire_all()
    assert crud_semester.get_current(db_session).id == second["id"]
    assert crud_semester.get(db_session, id=first["id"]).is_current is False

    sessions = api_call(client, "GET", "/sessions", headers=headers).json()["data"]
    assert {s["name"] for s in sessions[0]["semesters"]} == {"First", "Second"}

    assert_error(client.post(f"/sessions/{session['id']}/semesters", headers=headers, json={"name": "First"}), 409)
    assert_error(client.put("/sessions/semesters/999999/activate", headers=headers), 404)


def test_course_and_topics(client: TestClient, admin_token, instructor_token, department):
    course = api_call(client, "POST", "/courses", headers=auth_headers(admin_token), json={
        "code": "MTH101", "title": "Calculus I", "department_id": department.id, "level": 100,
    }).json()["data"]
    assert course["credit_units"] == 3
    assert_error(client.post("/courses", headers=auth_headers(admin_token), json={"code": "MTH101", "title": "Dup"}), 409)

    api_call(client, "POST", f"/courses/{course['id']}/topics", headers=auth_headers(instructor_token), json={"title": "Limits"})
    assert_error(
        client.post(f"/courses/{course['id']}/topics", headers=auth_headers(instructor_token), json={"title": "Limits"}),
        409,
    )
    topics = api_call(client, "GET", f"/courses/{course['id']}/topics", headers=auth_headers(instructor_token)).json()["data"]
    assert [t["title"] for t in topics] == ["Limits"]

    filtered = api_call(client, "GET", f"/courses?department_id={department.id}", headers=auth_headers(instructor_token)).json()["data"]
    assert [c["code"] for c in filtered] == ["MTH101"]


def test_enrollment_is_idempotent(client: TestClient, instructor_token, make_student, course, current_semester):
    student, _ = make_student()
    body = {"semester_id": current_semester.id, "student_ids": [student.id, student.id]}
    first = api_call(client, "POST", f"/courses/{course.id}/enrollments", headers=auth_headers(instructor_token), json=body).json()["data"]
    second = api_call(client, "POST", f"/courses/{course.id}/enrollments", headers=auth_headers(instructor_token), json=body).json()["data"]
    assert len(first) == 1
    assert [e["id"] for e in second] == [e["id"] for e in first]

    assert_error(client.post(f"/courses/{course.id}/enrollments", headers=auth_headers(instructor_token),
                             json={"semester_id": current_semester.id, "student_ids": [999999]}), 404)


def test_student_creation(client: TestClient, admin_token, instructor_token, department, db_session: Session):
    print("\n[TEST] Student creation")
    payload = {
        "email": "Chidi.Okafor@School.edu", "matric_number": "MTH/2024/001",
        "first_name": "Chidi", "last_name": "Okafor", "department_id": department.id, "level": 200,
    }
    created = api_call(client, "POST", "/students", headers=auth_headers(admin_token), json=payload).json()["data"]
    assert created["matric_number"] == "MTH/2024/001"

    user = crud_user.get(db_session, id=created["user_id"])
    assert user.role.value == "STUDENT"
    assert user.email == "chidi.okafor@school.edu"

    assert_error(client.post("/students", headers=auth_headers(admin_token), json=payload), 409)
    assert_error(client.post("/students", headers=auth_headers(admin_token),
                             json={**payload, "email": "other@school.edu"}), 409, message="Matric number")
    assert_error(client.post("/students", headers=auth_headers(admin_token),
                             json={**payload, "email": "not-an-email"}), 400, code="VALIDATION_ERROR")

    listed = api_call(client, "GET", "/students?search=Okafor", headers=auth_headers(instructor_token)).json()["data"]
    assert [s["id"] for s in listed] == [created["id"]]

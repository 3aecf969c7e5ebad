from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from classify.crud.attendance import attendance as crud_attendance, attendance_session as crud_attendance_session
from tests.helpers.asserts import api_call, assert_error, auth_headers


def _open_session(client, token, course, semester, **extra):
    return api_call(client, "POST", "/attendance/sessions", headers=auth_headers(token),
                    json={"course_id": course.id, "semester_id": semester.id, **extra}).json()["data"]


def test_new_session_closes_previous(client: TestClient, instructor_token, course, current_semester, db_session: Session):
    print("\n[TEST] Attendance sessions")
    first = _open_session(client, instructor_token, course, current_semester)
    second = _open_session(client, instructor_token, course, current_semester)
    assert second["is_active"] is True

    db_session.expire_all()
    assert crud_attendance_session.get(db_session, id=first["id"]).is_active is False

    ended = api_call(client, "PUT", f"/attendance/sessions/{second['id']}/end", headers=auth_headers(instructor_token)).json()["data"]
    assert ended["is_active"] is False
    assert ended["ended_at"] is not None
    assert_error(client.put(f"/attendance/sessions/{second['id']}/end", headers=auth_headers(instructor_token)), 409)


def test_mark_upserts_per_day(client: TestClient, instructor_token, make_student, course, current_semester, db_session: Session):
    student, _ = make_student()
    today = date.today().isoformat()
    payload = {
        "course_id": course.id, "semester_id": current_semester.id, "date": today,
        "records": [{"student_id": student.id, "status": "ABSENT"}],
    }
    assert api_call(client, "POST", "/attendance/mark", headers=auth_headers(instructor_token), json=payload).json()["data"] == {"marked": 1}

    payload["records"][0]["status"] = "LATE"
    api_call(client, "POST", "/attendance/mark", headers=auth_headers(instructor_token), json=payload)

    db_session.expire_all()
    rows = crud_attendance.get_multi_filtered(db_session, course_id=course.id)
    assert len(rows) == 1
    assert rows[0].status.value == "LATE"
    assert crud_attendance.count_attended(db_session, student_id=student.id, course_id=course.id, semester_id=current_semester.id) == 1


def test_self_mark_requires_active_session(client: TestClient, instructor_token, student_with_token, course, current_semester):
    student, token = student_with_token
    body = {"course_id": course.id, "semester_id": current_semester.id}

    assert_error(client.post("/attendance/self-mark", headers=auth_headers(token), json=body), 403,
                 message="No active attendance session")

    _open_session(client, instructor_token, course, current_semester, level=100)
    record = api_call(client, "POST", "/attendance/self-mark", headers=auth_headers(token), json=body).json()["data"]
    assert record["student_id"] == student.id
    assert record["status"] == "PRESENT"


def test_self_mark_respects_session_level(client: TestClient, instructor_token, student_with_token, course, current_semester):
    _, token = student_with_token
    _open_session(client, instructor_token, course, current_semester, level=300)
    response = client.post("/attendance/self-mark", headers=auth_headers(token),
                           json={"course_id": course.id, "semester_id": current_semester.id})
    assert_error(response, 403)


def test_staff_only_session_control(client: TestClient, student_with_token, course, current_semester):
    _, token = student_with_token
    response = client.post("/attendance/sessions", headers=auth_headers(token),
                           json={"course_id": course.id, "semester_id": current_semester.id})
    assert_error(response, 403)

from fastapi.testclient import TestClient

from tests.helpers.asserts import api_call, assert_error, auth_headers


def test_settings_defaults_and_update(client: TestClient, admin_token):
    print("\n[TEST] Institution settings")
    current = api_call(client, "GET", "/settings", headers=auth_headers(admin_token)).json()["data"]
    assert current["attendance_weight"] == 10.0
    assert current["exam_deletion_grace_days"] == 3
    assert current["require_attendance_session_for_cbt"] is False

    updated = api_call(client, "PUT", "/settings", headers=auth_headers(admin_token), json={
        "institution_name": "Federal Polytechnic", "attendance_weight": 15,
    }).json()["data"]
    assert updated["institution_name"] == "Federal Polytechnic"
    assert updated["attendance_weight"] == 15.0
    assert updated["exam_deletion_grace_days"] == 3

    again = api_call(client, "GET", "/settings", headers=auth_headers(admin_token)).json()["data"]
    assert again["attendance_weight"] == 15.0


def test_settings_validation(client: TestClient, admin_token):
    assert_error(client.put("/settings", headers=auth_headers(admin_token), json={}), 400, code="VALIDATION_ERROR")
    assert_error(client.put("/settings", headers=auth_headers(admin_token), json={"attendance_weight": -1}), 400)
    assert_error(client.put("/settings", headers=auth_headers(admin_token), json={"exam_deletion_grace_days": -2}), 400)
    for field in ("attendance_weight", "institution_name", "require_attendance_session_for_cbt"):
        assert_error(client.put("/settings", headers=auth_headers(admin_token), json={field: None}), 400, code="VALIDATION_ERROR")


def test_settings_admin_only(client: TestClient, instructor_token, student_with_token):
    _, student_token = student_with_token
    assert_error(client.get("/settings", headers=auth_headers(instructor_token)), 403)
    assert_error(client.put("/settings", headers=auth_headers(student_token), json={"attendance_weight": 1}), 403)

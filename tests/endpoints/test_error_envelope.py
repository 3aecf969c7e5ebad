from fastapi.testclient import TestClient

from classify.core.constants import RoleEnum
from classify.core.security import create_access_token
from tests.helpers.asserts import assert_error, auth_headers


def test_error_body_shape(client: TestClient, admin_token):
    response = client.get("/cbt/exams/999999", headers=auth_headers(admin_token))
    error = assert_error(response, 404, code="NOT_FOUND")
    body = response.json()
    assert set(body) == {"error", "timestamp", "path", "request_id"}
    assert error["message"] == "Exam not found."
    assert body["request_id"] == response.headers["X-Request-ID"]


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-123"


def test_validation_errors_are_400(client: TestClient, instructor_token):
    response = client.post("/cbt/questions", headers=auth_headers(instructor_token), json={"course_id": "abc"})
    error = assert_error(response, 400, code="VALIDATION_ERROR")
    assert error["details"]["validation_errors"]


def test_token_problems_are_401(client: TestClient, db_session):
    assert_error(client.get("/departments", headers=auth_headers("not-a-token")), 401, code="UNAUTHORIZED")

    orphan = create_access_token({"user_id": 424242, "role": RoleEnum.ADMIN.value})
    assert_error(client.get("/departments", headers=auth_headers(orphan)), 401)

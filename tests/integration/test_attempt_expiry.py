from datetime import timedelta
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from classify.crud.exam_attempt import exam_attempt as crud_exam_attempt
from classify.services.exam_attempt import exam_attempt_service
from classify.utils.timeutils import utcnow
from tests.helpers.asserts import api_call, assert_error, auth_headers


def _start_and_save(client, exam_id, token, picks):
    attempt_id = api_call(client, "POST", f"/cbt/exams/{exam_id}/start", headers=auth_headers(token)).json()["data"]["attempt"]["id"]
    for question_id, selected in picks:
        api_call(client, "POST", f"/cbt/attempts/{attempt_id}/answers", headers=auth_headers(token),
                 json={"question_id": question_id, "selected": selected})
    return attempt_id


def test_overdue_attempt_is_graded_from_saved_answers(client: TestClient, student_with_token, published_exam, db_session: Session):
    print("\n[TEST] Expiry sweep")
    _, token = student_with_token
    questions = published_exam["questions"]
    attempt_id = _start_and_save(client, published_exam["id"], token, [(questions[0].id, "A"), (questions[1].id, "A")])

    print("[1] Nothing is due while the clock is inside the duration")
    assert exam_attempt_service.expire_stale_attempts(db_session, now=utcnow(), grace_seconds=0) == 0

    print("[2] Sweeping two hours later")
    finalized = exam_attempt_service.expire_stale_attempts(db_session, now=utcnow() + timedelta(hours=2), grace_seconds=0)
    assert finalized == 1

    db_session.expire_all()
    attempt = crud_exam_attempt.get(db_session, id=attempt_id)
    assert attempt.is_completed is True
    assert attempt.auto_submitted is True
    assert attempt.score == 1
    assert attempt.percentage == 20.0
    assert attempt.is_passed is False
    print("[OK] Auto-submitted with saved answers")

    print("[3] Re-running the sweep is a no-op")
    assert exam_attempt_service.expire_stale_attempts(db_session, now=utcnow() + timedelta(hours=3), grace_seconds=0) == 0

    assert_error(
        client.post(f"/cbt/attempts/{attempt_id}/submit", headers=auth_headers(token), json={"answers": []}),
        409, message="Already submitted",
    )


def test_grace_period_delays_expiry(client: TestClient, student_with_token, published_exam, db_session: Session):
    _, token = student_with_token
    _start_and_save(client, published_exam["id"], token, [])

    thirty_five_minutes_on = utcnow() + timedelta(minutes=35)
    assert exam_attempt_service.expire_stale_attempts(db_session, now=thirty_five_minutes_on, grace_seconds=600) == 0
    assert exam_attempt_service.expire_stale_attempts(db_session, now=thirty_five_minutes_on, grace_seconds=60) == 1


def test_sweep_skips_completed_attempts(client: TestClient, student_with_token, make_student, published_exam, db_session: Session):
    _, token = student_with_token
    questions = published_exam["questions"]
    submitted_id = _start_and_save(client, published_exam["id"], token, [])
    api_call(client, "POST", f"/cbt/attempts/{submitted_id}/submit", headers=auth_headers(token),
             json={"answers": [{"question_id": q.id, "selected": s} for q, s in zip(questions, "ABCDA")]})

    _, other_token = make_student()
    idle_id = _start_and_save(client, published_exam["id"], other_token, [])

    assert exam_attempt_service.expire_stale_attempts(db_session, now=utcnow() + timedelta(hours=2), grace_seconds=0) == 1

    db_session.expire_all()
    submitted = crud_exam_attempt.get(db_session, id=submitted_id)
    idle = crud_exam_attempt.get(db_session, id=idle_id)
    assert submitted.auto_submitted is False
    assert submitted.score == 5
    assert idle.auto_submitted is True
    assert idle.score == 0

from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from classify.crud.exam import exam as crud_exam
from classify.crud.institution_setting import institution_setting as crud_setting
from classify.utils.timeutils import ensure_aware
from tests.helpers.asserts import api_call, assert_error, auth_headers


def _exam_body(course, semester, **overrides):
    body = {
        "course_id": course.id,
        "semester_id": semester.id,
        "title": "Mid-semester Test",
        "category": "TEST",
        "duration_minutes": 20,
    }
    body.update(overrides)
    return body


class TestExamDefinitionEndpoints:
    def test_explicit_question_ids_keep_order(self, client: TestClient, instructor_token, course, current_semester, make_questions):
        questions = make_questions(4)
        ordered = [questions[2].id, questions[0].id, questions[3].id]
        response = api_call(
            client, "POST", "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, question_ids=ordered),
        )
        data = response.json()["data"]
        assert data["question_ids"] == ordered
        assert data["total_marks"] == 3
        assert data["is_published"] is False
        assert data["pass_mark"] == 50
        assert data["allow_review"] is True

    def test_total_marks_defaults_to_one_without_questions(self, client: TestClient, instructor_token, course, current_semester):
        response = api_call(client, "POST", "/cbt/exams", headers=auth_headers(instructor_token), json=_exam_body(course, current_semester))
        assert response.json()["data"]["total_marks"] == 1
        assert response.json()["data"]["question_ids"] == []

    def test_pooling_selects_from_topics(self, client: TestClient, instructor_token, course, current_semester, topics, make_questions):
        pool = make_questions(6, topic_id=topics[0].id)
        make_questions(4, topic_id=topics[1].id)
        response = api_call(
            client, "POST", "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, topic_ids=[topics[0].id], num_questions=4, total_marks=40),
        )
        data = response.json()["data"]
        assert len(data["question_ids"]) == 4
        assert len(set(data["question_ids"])) == 4
        assert set(data["question_ids"]) <= {q.id for q in pool}
        assert data["total_marks"] == 40

    def test_pooling_caps_at_available_questions(self, client: TestClient, instructor_token, course, current_semester, topics, make_questions):
        make_questions(2, topic_id=topics[0].id)
        response = api_call(
            client, "POST", "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, topic_ids=[topics[0].id], num_questions=10),
        )
        assert len(response.json()["data"]["question_ids"]) == 2

    def test_pooling_skips_inactive_questions(self, client: TestClient, instructor_token, course, current_semester, topics, make_questions, db_session: Session):
        from classify.crud.question import question as crud_question
        questions = make_questions(3, topic_id=topics[0].id)
        crud_question.update(db_session, db_obj=questions[0], obj_in={"is_active": False})
        response = api_call(
            client, "POST", "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, topic_ids=[topics[0].id], num_questions=3),
        )
        assert sorted(response.json()["data"]["question_ids"]) == sorted([questions[1].id, questions[2].id])

    def test_window_must_be_ordered(self, client: TestClient, instructor_token, course, current_semester):
        start = datetime.now(timezone.utc) + timedelta(days=1)
        response = client.post(
            "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, start_window=start.isoformat(), end_window=(start - timedelta(hours=1)).isoformat()),
        )
        assert_error(response, 400, code="VALIDATION_ERROR")

    def test_duplicate_question_ids_rejected(self, client: TestClient, instructor_token, course, current_semester, make_questions):
        question = make_questions(1)[0]
        response = client.post(
            "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, question_ids=[question.id, question.id]),
        )
        assert_error(response, 400)

    def test_question_from_other_course_rejected(self, client: TestClient, instructor_token, course, current_semester, db_session: Session):
        from classify.crud.course import course as crud_course
        from classify.crud.question import question as crud_question
        other = crud_course.create(db_session, obj_in={"code": "PHY101", "title": "Physics", "credit_units": 2})
        foreign = crud_question.create(db_session, obj_in={
            "course_id": other.id, "question_text": "g?", "option_a": "9.8", "option_b": "10",
            "option_c": "1", "option_d": "0", "correct_option": "A",
        })
        response = client.post(
            "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, question_ids=[foreign.id]),
        )
        assert_error(response, 400, code="BAD_REQUEST")

    def test_staff_detail_includes_answer_key(self, client: TestClient, instructor_token, published_exam):
        response = api_call(client, "GET", f"/cbt/exams/{published_exam['id']}", headers=auth_headers(instructor_token))
        questions = response.json()["data"]["questions"]
        assert [q["id"] for q in questions] == [q.id for q in published_exam["questions"]]
        assert [q["correct_option"] for q in questions] == ["A", "B", "C", "D", "A"]

    def test_student_cannot_view_staff_detail(self, client: TestClient, student_with_token, published_exam):
        _, token = student_with_token
        assert_error(client.get(f"/cbt/exams/{published_exam['id']}", headers=auth_headers(token)), 403)

    def test_students_see_only_published_exams(self, client: TestClient, instructor_token, student_with_token, course, current_semester, published_exam):
        api_call(client, "POST", "/cbt/exams", headers=auth_headers(instructor_token), json=_exam_body(course, current_semester, title="Draft"))
        _, token = student_with_token

        student_view = api_call(client, "GET", f"/cbt/exams?course_id={course.id}", headers=auth_headers(token)).json()["data"]
        assert [e["id"] for e in student_view] == [published_exam["id"]]
        assert student_view[0]["my_attempt"] is None

        staff_view = api_call(client, "GET", f"/cbt/exams?course_id={course.id}", headers=auth_headers(instructor_token)).json()["data"]
        assert len(staff_view) == 2

    def test_listing_reports_my_attempt(self, client: TestClient, student_with_token, published_exam):
        _, token = student_with_token
        api_call(client, "POST", f"/cbt/exams/{published_exam['id']}/start", headers=auth_headers(token))
        listing = api_call(client, "GET", "/cbt/exams", headers=auth_headers(token)).json()["data"]
        assert listing[0]["my_attempt"]["status"] == "in_progress"
        assert listing[0]["attempt_count"] == 1

    def test_update_with_topics_repools(self, client: TestClient, instructor_token, course, current_semester, topics, make_questions):
        make_questions(2, topic_id=topics[0].id)
        second_pool = make_questions(3, topic_id=topics[1].id)
        created = api_call(
            client, "POST", "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, topic_ids=[topics[0].id], num_questions=2),
        ).json()["data"]

        updated = api_call(
            client, "PUT", f"/cbt/exams/{created['id']}", headers=auth_headers(instructor_token),
            json={"topic_ids": [topics[1].id], "num_questions": 3},
        ).json()["data"]
        assert sorted(updated["question_ids"]) == sorted(q.id for q in second_pool)
        assert updated["topic_ids"] == [topics[1].id]

    def test_plain_update_keeps_question_set(self, client: TestClient, instructor_token, published_exam):
        updated = api_call(
            client, "PUT", f"/cbt/exams/{published_exam['id']}", headers=auth_headers(instructor_token),
            json={"title": "Renamed", "duration_minutes": 45},
        ).json()["data"]
        assert updated["title"] == "Renamed"
        assert updated["question_ids"] == [q.id for q in published_exam["questions"]]

    def test_update_rejects_inverted_window(self, client: TestClient, instructor_token, published_exam):
        now = datetime.now(timezone.utc)
        api_call(
            client, "PUT", f"/cbt/exams/{published_exam['id']}", headers=auth_headers(instructor_token),
            json={"start_window": now.isoformat()},
        )
        response = client.put(
            f"/cbt/exams/{published_exam['id']}", headers=auth_headers(instructor_token),
            json={"end_window": (now - timedelta(minutes=5)).isoformat()},
        )
        assert_error(response, 400, code="BAD_REQUEST")

    def test_assign_questions_replaces_set(self, client: TestClient, instructor_token, published_exam, make_questions):
        replacement = make_questions(2)
        updated = api_call(
            client, "POST", f"/cbt/exams/{published_exam['id']}/questions", headers=auth_headers(instructor_token),
            json={"question_ids": [replacement[1].id, replacement[0].id]},
        ).json()["data"]
        assert updated["question_ids"] == [replacement[1].id, replacement[0].id]

    def test_archive_hides_exam(self, client: TestClient, admin_token, instructor_token, published_exam):
        response = api_call(client, "DELETE", f"/cbt/exams/{published_exam['id']}", headers=auth_headers(admin_token))
        data = response.json()["data"]
        assert data["is_archived"] is True
        assert data["deletion_scheduled_at"] is None

        listing = api_call(client, "GET", "/cbt/exams", headers=auth_headers(instructor_token)).json()["data"]
        assert listing == []

    def test_full_delete_schedules_with_grace_period(self, client: TestClient, admin_token, published_exam, db_session: Session):
        grace_days = crud_setting.get_or_create(db_session).exam_deletion_grace_days
        before = datetime.now(timezone.utc)
        api_call(client, "DELETE", f"/cbt/exams/{published_exam['id']}?mode=full", headers=auth_headers(admin_token))

        db_session.expire_all()
        stored = crud_exam.get(db_session, id=published_exam["id"])
        scheduled = ensure_aware(stored.deletion_scheduled_at)
        assert stored.is_archived is True
        assert before + timedelta(days=grace_days) - timedelta(minutes=1) <= scheduled
        assert scheduled <= datetime.now(timezone.utc) + timedelta(days=grace_days)

    def test_only_admin_can_delete(self, client: TestClient, instructor_token, published_exam):
        assert_error(client.delete(f"/cbt/exams/{published_exam['id']}", headers=auth_headers(instructor_token)), 403)

    def test_purge_removes_overdue_exams(self, client: TestClient, admin_token, published_exam, db_session: Session):
        from classify.services.exam import exam_service
        api_call(client, "DELETE", f"/cbt/exams/{published_exam['id']}?mode=full", headers=auth_headers(admin_token))
        assert exam_service.purge_scheduled_deletions(db_session) == 0

        db_session.expire_all()
        stored = crud_exam.get(db_session, id=published_exam["id"])
        crud_exam.update(db_session, db_obj=stored, obj_in={"deletion_scheduled_at": datetime.now(timezone.utc) - timedelta(minutes=1)})
        assert exam_service.purge_scheduled_deletions(db_session) == 1
        db_session.expire_all()
        assert crud_exam.get(db_session, id=published_exam["id"]) is None

    def test_num_questions_update_keeps_fixed_question_set(self, client: TestClient, instructor_token, published_exam):
        headers = auth_headers(instructor_token)
        api_call(client, "PUT", f"/cbt/exams/{published_exam['id']}", headers=headers, json={"num_questions": 3})
        detail = api_call(client, "GET", f"/cbt/exams/{published_exam['id']}", headers=headers).json()["data"]
        assert detail["question_ids"] == [q.id for q in published_exam["questions"]]
        assert detail["num_questions"] == 3

    def test_update_rejects_null_for_required_fields(self, client: TestClient, instructor_token, published_exam):
        headers = auth_headers(instructor_token)
        for field in ("total_marks", "title", "is_published", "topic_ids"):
            response = client.put(f"/cbt/exams/{published_exam['id']}", headers=headers, json={field: None})
            assert_error(response, 400, code="VALIDATION_ERROR")

        cleared = api_call(
            client, "PUT", f"/cbt/exams/{published_exam['id']}", headers=headers,
            json={"instructions": None, "end_window": None},
        ).json()["data"]
        assert cleared["instructions"] is None

    def test_window_accepts_mixed_offsets(self, client: TestClient, instructor_token, course, current_semester):
        response = api_call(
            client, "POST", "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, start_window="2026-01-01T00:00:00Z", end_window="2026-01-02T00:00:00"),
        )
        assert response.status_code == 201

        inverted = client.post(
            "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, start_window="2026-01-02T00:00:00", end_window="2026-01-01T00:00:00+00:00"),
        )
        assert_error(inverted, 400, code="VALIDATION_ERROR")

    def test_attempt_counts_are_per_exam(self, client: TestClient, instructor_token, student_with_token, make_student, course, current_semester, published_exam, db_session: Session):
        from classify.crud.course_enrollment import course_enrollment as crud_enrollment
        second = api_call(
            client, "POST", "/cbt/exams", headers=auth_headers(instructor_token),
            json=_exam_body(course, current_semester, title="Second Quiz"),
        ).json()["data"]

        _, token = student_with_token
        other, other_token = make_student()
        crud_enrollment.create(db_session, obj_in={
            "student_id": other.id, "course_id": course.id, "semester_id": current_semester.id
        })
        for student_token in (token, other_token):
            api_call(client, "POST", f"/cbt/exams/{published_exam['id']}/start", headers=auth_headers(student_token))

        listing = api_call(client, "GET", f"/cbt/exams?course_id={course.id}", headers=auth_headers(instructor_token)).json()["data"]
        counts = {e["id"]: e["attempt_count"] for e in listing}
        assert counts == {published_exam["id"]: 2, second["id"]: 0}

    def test_listing_flags_open_attendance_session(self, client: TestClient, instructor_token, student_with_token, course, current_semester, published_exam):
        _, token = student_with_token
        headers = auth_headers(instructor_token)

        def student_flag():
            listing = api_call(client, "GET", "/cbt/exams", headers=auth_headers(token)).json()["data"]
            return listing[0]["is_session_active"]

        assert student_flag() is False

        api_call(client, "POST", "/attendance/sessions", headers=headers,
                 json={"course_id": course.id, "semester_id": current_semester.id, "level": 400})
        assert student_flag() is False

        api_call(client, "POST", "/attendance/sessions", headers=headers,
                 json={"course_id": course.id, "semester_id": current_semester.id, "level": 100})
        assert student_flag() is True

        staff_listing = api_call(client, "GET", "/cbt/exams", headers=headers).json()["data"]
        assert staff_listing[0]["is_session_active"] is None

    def test_question_changes_blocked_while_attempt_in_progress(self, client: TestClient, instructor_token, student_with_token, topics, make_questions, published_exam):
        _, token = student_with_token
        api_call(client, "POST", f"/cbt/exams/{published_exam['id']}/start", headers=auth_headers(token))
        replacement = make_questions(3, topic_id=topics[0].id)
        headers = auth_headers(instructor_token)

        response = client.post(
            f"/cbt/exams/{published_exam['id']}/questions", headers=headers,
            json={"question_ids": [q.id for q in replacement]},
        )
        assert_error(response, 409, code="CONFLICT", message="attempts in progress")

        response = client.put(
            f"/cbt/exams/{published_exam['id']}", headers=headers,
            json={"topic_ids": [topics[0].id], "num_questions": 2},
        )
        assert_error(response, 409, code="CONFLICT")

        renamed = api_call(client, "PUT", f"/cbt/exams/{published_exam['id']}", headers=headers, json={"title": "Renamed"})
        assert renamed.json()["data"]["question_ids"] == [q.id for q in published_exam["questions"]]

from fastapi.testclient import TestClient

from tests.helpers.asserts import api_call, assert_error, auth_headers


class TestWrittenExamEndpoints:

    def _create(self, client, token, course, semester, total_marks=60):
        return api_call(client, "POST", "/written-exams", headers=auth_headers(token), json={
            "course_id": course.id, "semester_id": semester.id, "title": "Theory Paper", "total_marks": total_marks,
        }).json()["data"]

    def test_create_and_list(self, client: TestClient, instructor_token, course, current_semester):
        created = self._create(client, instructor_token, course, current_semester)
        assert created["exam_type"] == "WRITTEN"
        assert created["total_marks"] == 60

        listed = api_call(client, "GET", f"/written-exams?course_id={course.id}", headers=auth_headers(instructor_token)).json()["data"]
        assert [e["id"] for e in listed] == [created["id"]]

    def test_scores_are_graded_and_upserted(self, client: TestClient, instructor_token, make_student, course, current_semester):
        print("\n[TEST] Written exam scores")
        exam = self._create(client, instructor_token, course, current_semester)
        first, _ = make_student()
        second, _ = make_student()

        saved = api_call(client, "POST", f"/written-exams/{exam['id']}/scores", headers=auth_headers(instructor_token), json={
            "scores": [{"student_id": first.id, "score": 45}, {"student_id": second.id, "score": 20}],
        }).json()["data"]
        assert saved == {"saved": 2}

        results = {s["student_id"]: s for s in api_call(
            client, "GET", f"/written-exams/{exam['id']}/results", headers=auth_headers(instructor_token)
        ).json()["data"]}
        assert results[first.id]["grade"] == "A"
        assert results[second.id]["grade"] == "F"

        print("[1] Re-saving replaces the score")
        api_call(client, "POST", f"/written-exams/{exam['id']}/scores", headers=auth_headers(instructor_token), json={
            "scores": [{"student_id": second.id, "score": 30, "remark": "Resit"}],
        })
        results = api_call(client, "GET", f"/written-exams/{exam['id']}/results", headers=auth_headers(instructor_token)).json()["data"]
        assert len(results) == 2
        resat = next(s for s in results if s["student_id"] == second.id)
        assert (resat["score"], resat["grade"], resat["remark"]) == (30.0, "C", "Resit")

    def test_score_validation(self, client: TestClient, instructor_token, make_student, course, current_semester):
        exam = self._create(client, instructor_token, course, current_semester)
        student, _ = make_student()
        headers = auth_headers(instructor_token)

        assert_error(client.post(f"/written-exams/{exam['id']}/scores", headers=headers,
                                 json={"scores": [{"student_id": student.id, "score": 61}]}), 400, code="BAD_REQUEST")
        assert_error(client.post(f"/written-exams/{exam['id']}/scores", headers=headers,
                                 json={"scores": [{"student_id": 999999, "score": 10}]}), 404)
        assert_error(client.post("/written-exams/999999/scores", headers=headers,
                                 json={"scores": [{"student_id": student.id, "score": 10}]}), 404)
        assert_error(client.post(f"/written-exams/{exam['id']}/scores", headers=headers, json={"scores": []}), 400)

    def test_students_cannot_manage_written_exams(self, client: TestClient, student_with_token, course, current_semester):
        _, token = student_with_token
        response = client.post("/written-exams", headers=auth_headers(token), json={
            "course_id": course.id, "semester_id": current_semester.id, "title": "Nope",
        })
        assert_error(response, 403)

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import RoleEnum
from app.models.submission import Submission
from tests.helpers.asserts import api_call, assert_error, assert_no_answer_key


def start(client, exam, headers):
    return api_call(client, "POST", f"/api/exams/{exam.id}/start", headers=headers).json()["data"]


def answers_for(exam, correct=True, text="Atomicity and isolation"):
    mcq, short = exam.questions
    option = next(o for o in mcq.options if o.is_correct is correct)
    return {"answers": [
        {"question_id": mcq.id, "selected_option_id": option.id},
        {"question_id": short.id, "text_answer": text},
    ]}


class TestSubmissionEndpoints:
    def test_submit_answers(self, client: TestClient, exam_factory, student_user, auth_headers):
        exam = exam_factory()
        headers = auth_headers(student_user)
        submission = start(client, exam, headers)

        response = api_call(client, "POST", f"/api/submissions/{submission['id']}/submit", headers=headers, json=answers_for(exam))

        data = response.json()["data"]
        assert data["status"] == "COMPLETED"
        # 10 + round(10 * 2/4) out of 20
        assert data["score"] == 75
        assert data["end_time"] is not None

    def test_double_submit_is_rejected(self, client: TestClient, db_session: Session, exam_factory, student_user, auth_headers):
        exam = exam_factory()
        headers = auth_headers(student_user)
        submission = start(client, exam, headers)
        path = f"/api/submissions/{submission['id']}/submit"

        api_call(client, "POST", path, headers=headers, json=answers_for(exam))
        response = client.post(path, headers=headers, json=answers_for(exam, correct=False, text=""))

        assert_error(response, 400, "STATE_CONFLICT", "Already submitted")
        assert db_session.get(Submission, submission["id"]).score == 75

    def test_submit_someone_elses_submission(self, client: TestClient, exam_factory, student_user, user_factory, auth_headers):
        exam = exam_factory()
        submission = start(client, exam, auth_headers(student_user))
        intruder = user_factory(RoleEnum.STUDENT)

        response = client.post(
            f"/api/submissions/{submission['id']}/submit", headers=auth_headers(intruder), json=answers_for(exam)
        )
        assert_error(response, 403, "FORBIDDEN")

    def test_submit_missing_submission(self, client: TestClient, student_user, auth_headers):
        response = client.post("/api/submissions/999999/submit", headers=auth_headers(student_user), json={"answers": []})
        assert_error(response, 404, "NOT_FOUND")

    def test_answer_with_option_and_text_is_rejected(self, client: TestClient, exam_factory, student_user, auth_headers):
        exam = exam_factory()
        headers = auth_headers(student_user)
        submission = start(client, exam, headers)
        mcq = exam.questions[0]

        response = client.post(f"/api/submissions/{submission['id']}/submit", headers=headers, json={"answers": [
            {"question_id": mcq.id, "selected_option_id": mcq.options[0].id, "text_answer": "both"}
        ]})
        assert_error(response, 400, "VALIDATION_ERROR")

    def test_empty_submission_scores_zero(self, client: TestClient, exam_factory, student_user, auth_headers):
        exam = exam_factory()
        headers = auth_headers(student_user)
        submission = start(client, exam, headers)

        data = api_call(client, "POST", f"/api/submissions/{submission['id']}/submit", headers=headers, json={}).json()["data"]
        assert data["score"] == 0
        assert data["status"] == "COMPLETED"

    def test_late_submit_rejected_when_time_limit_enforced(self, client: TestClient, db_session: Session, exam_factory, student_user, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "ENFORCE_TIME_LIMIT", True)
        exam = exam_factory()
        headers = auth_headers(student_user)
        submission = start(client, exam, headers)
        row = db_session.get(Submission, submission["id"])
        row.start_time = datetime.now(timezone.utc) - timedelta(hours=2)
        db_session.flush()

        response = client.post(f"/api/submissions/{submission['id']}/submit", headers=headers, json=answers_for(exam))
        assert_error(response, 400, "STATE_CONFLICT")

    def test_get_submission_as_student_hides_answer_key(self, client: TestClient, exam_factory, student_user, auth_headers):
        exam = exam_factory()
        headers = auth_headers(student_user)
        submission = start(client, exam, headers)
        api_call(client, "POST", f"/api/submissions/{submission['id']}/submit", headers=headers, json=answers_for(exam))

        response = api_call(client, "GET", f"/api/submissions/{submission['id']}", headers=headers)
        data = response.json()["data"]

        assert data["score"] == 75
        assert len(data["answers"]) == 2
        assert [a["points_awarded"] for a in data["answers"]] == [10, 5]
        assert all("is_correct" not in a for a in data["answers"])
        assert_no_answer_key(data["exam"])
        assert "is_correct" not in response.text

    def test_get_submission_as_admin_includes_answer_key(self, client: TestClient, exam_factory, student_user, admin_user, auth_headers):
        exam = exam_factory()
        submission = start(client, exam, auth_headers(student_user))
        api_call(client, "POST", f"/api/submissions/{submission['id']}/submit", headers=auth_headers(student_user), json=answers_for(exam))

        data = api_call(client, "GET", f"/api/submissions/{submission['id']}", headers=auth_headers(admin_user)).json()["data"]

        assert data["student_id"] == student_user.id
        assert data["exam"]["questions"][1]["keywords"] == ["atomicity", "consistency", "isolation", "durability"]
        assert "is_correct" in data["exam"]["questions"][0]["options"][0]
        assert [a["is_correct"] for a in data["answers"]] == [True, False]

    def test_get_submission_of_another_student(self, client: TestClient, exam_factory, student_user, user_factory, auth_headers):
        exam = exam_factory()
        submission = start(client, exam, auth_headers(student_user))
        other = user_factory(RoleEnum.STUDENT)

        response = client.get(f"/api/submissions/{submission['id']}", headers=auth_headers(other))
        assert_error(response, 403)

    def test_get_missing_submission(self, client: TestClient, admin_user, auth_headers):
        assert_error(client.get("/api/submissions/999999", headers=auth_headers(admin_user)), 404)

    def test_list_submissions(self, client: TestClient, exam_factory, student_user, user_factory, admin_user, auth_headers):
        exam = exam_factory()
        other = user_factory(RoleEnum.STUDENT)
        mine = start(client, exam, auth_headers(student_user))
        theirs = start(client, exam, auth_headers(other))

        own = api_call(client, "GET", "/api/submissions/", headers=auth_headers(student_user)).json()["data"]
        everything = api_call(client, "GET", "/api/submissions/", headers=auth_headers(admin_user)).json()["data"]

        assert [s["id"] for s in own] == [mine["id"]]
        assert own[0]["exam"]["title"] == exam.title
        assert "questions" not in own[0]["exam"]
        assert [s["id"] for s in everything] == [mine["id"], theirs["id"]]

    def test_list_submissions_requires_token(self, client: TestClient):
        assert_error(client.get("/api/submissions/"), 401)

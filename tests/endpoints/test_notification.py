from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.constants import NotificationTypeEnum
from app.services.notification import notification_service
from tests.helpers.asserts import api_call, assert_error


class TestNotificationEndpoints:
    def _notify(self, db_session, user, title="Hello"):
        return notification_service.create_notification(
            db_session, user_id=user.id, title=title, message=f"{title} message"
        )

    def test_get_my_notifications(self, client: TestClient, db_session: Session, student_user, admin_user, auth_headers):
        self._notify(db_session, student_user, "First")
        self._notify(db_session, student_user, "Second")
        self._notify(db_session, admin_user, "Not yours")

        data = api_call(client, "GET", "/api/notifications/", headers=auth_headers(student_user)).json()["data"]

        assert sorted(n["title"] for n in data) == ["First", "Second"]
        assert all(n["user_id"] == student_user.id for n in data)
        assert all(n["notification_type"] == NotificationTypeEnum.SYSTEM.value for n in data)

    def test_unread_count_and_mark_read(self, client: TestClient, db_session: Session, student_user, auth_headers):
        headers = auth_headers(student_user)
        first = self._notify(db_session, student_user, "First")
        self._notify(db_session, student_user, "Second")

        assert api_call(client, "GET", "/api/notifications/unread_count", headers=headers).json()["data"] == 2

        data = api_call(client, "POST", f"/api/notifications/{first.id}/read", headers=headers).json()["data"]
        assert data["is_read"] is True
        assert api_call(client, "GET", "/api/notifications/unread_count", headers=headers).json()["data"] == 1

    def test_mark_all_read(self, client: TestClient, db_session: Session, student_user, auth_headers):
        headers = auth_headers(student_user)
        for title in ("One", "Two", "Three"):
            self._notify(db_session, student_user, title)

        assert api_call(client, "POST", "/api/notifications/mark_all_read", headers=headers).json()["data"] == 3
        assert api_call(client, "GET", "/api/notifications/unread_count", headers=headers).json()["data"] == 0

    def test_cannot_mark_someone_elses_notification(self, client: TestClient, db_session: Session, student_user, admin_user, auth_headers):
        notification = self._notify(db_session, admin_user)

        response = client.post(f"/api/notifications/{notification.id}/read", headers=auth_headers(student_user))
        assert_error(response, 404, "NOT_FOUND")
        assert notification.is_read is False

    def test_notifications_require_token(self, client: TestClient):
        assert_error(client.get("/api/notifications/"), 401)

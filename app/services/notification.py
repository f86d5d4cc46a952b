import logging
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core.constants import NotificationTypeEnum
from app.core.exceptions import NotificationNotFoundError
from app.crud.notification import notification as crud_notification
from app.crud.user import user as crud_user
from app.models.notification import Notification
from app.schemas.notification import NotificationCreate

logger = logging.getLogger(__name__)

class NotificationService:
    def __init__(self, notifications=crud_notification, users=crud_user):
        self.notifications = notifications
        self.users = users

    def create_notification(
        self,
        db: Session,
        *,
        user_id: int,
        title: str,
        message: str,
        notification_type: NotificationTypeEnum = NotificationTypeEnum.SYSTEM,
        link: Optional[str] = None
    ) -> Notification:
        notification_in = NotificationCreate(
            user_id=user_id, title=title, message=message,
            notification_type=notification_type, link=link
        )
        return self.notifications.create(db, obj_in=notification_in)

    def notify_all_students(
        self,
        db: Session,
        *,
        title: str,
        message: str,
        notification_type: NotificationTypeEnum,
        link: Optional[str] = None
    ) -> int:
        students = self.users.get_active_students(db)
        self.notifications.create_multi(db, objs_in=[
            NotificationCreate(
                user_id=student.id, title=title, message=message,
                notification_type=notification_type, link=link
            )
            for student in students
        ])
        logger.info(f"Sent {notification_type.value} notification to {len(students)} students")
        return len(students)

    def get_user_notifications(self, db: Session, *, user_id: int, skip: int = 0, limit: int = 100) -> List[Notification]:
        return self.notifications.get_for_user(db, user_id=user_id, skip=skip, limit=limit)

    def get_unread_count(self, db: Session, *, user_id: int) -> int:
        return self.notifications.count_unread_for_user(db, user_id=user_id)

    def mark_notification_as_read(self, db: Session, *, notification_id: int, user_id: int) -> Notification:
        notification = self.notifications.mark_as_read(db, notification_id=notification_id, user_id=user_id)
        if not notification:
            raise NotificationNotFoundError()
        return notification

    def mark_all_notifications_as_read(self, db: Session, *, user_id: int) -> int:
        return self.notifications.mark_all_as_read(db, user_id=user_id)

notification_service = NotificationService()

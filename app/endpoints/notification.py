from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.schemas.response import APIResponse
from app.schemas.user import UserContext
from app.utils import deps
from app.schemas.notification import Notification
from app.services.notification import NotificationService

router = APIRouter()

@router.get("/", response_model=APIResponse[List[Notification]])
async def get_my_notifications(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    notification_service: NotificationService = Depends(deps.get_notification_service),
    skip: int = 0,
    limit: int = 100
):
    """Retrieve notifications for the current user."""
    data = notification_service.get_user_notifications(db, user_id=context.user.id, skip=skip, limit=limit)
    return APIResponse(message="Notifications fetched successfully", data=[Notification.model_validate(n) for n in data])

@router.get("/unread_count", response_model=APIResponse[int])
async def get_unread_notifications_count(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    notification_service: NotificationService = Depends(deps.get_notification_service)
):
    """Get the count of unread notifications for the current user."""
    count = notification_service.get_unread_count(db, user_id=context.user.id)
    return APIResponse(message="Unread notifications count fetched successfully", data=count)

@router.post("/{notification_id}/read", response_model=APIResponse[Notification])
async def mark_notification_as_read(
    notification_id: int,
    db: Session = Depends(deps.get_transactional_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    notification_service: NotificationService = Depends(deps.get_notification_service)
):
    """Mark a specific notification as read."""
    notification = notification_service.mark_notification_as_read(
        db, notification_id=notification_id, user_id=context.user.id
    )
    return APIResponse(message="Notification marked as read", data=Notification.model_validate(notification))

@router.post("/mark_all_read", response_model=APIResponse[int])
async def mark_all_notifications_as_read(
    db: Session = Depends(deps.get_transactional_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    notification_service: NotificationService = Depends(deps.get_notification_service)
):
    """Mark all unread notifications for the current user as read."""
    updated = notification_service.mark_all_notifications_as_read(db, user_id=context.user.id)
    return APIResponse(message="All notifications marked as read", data=updated)

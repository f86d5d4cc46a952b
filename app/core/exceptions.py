from typing import Any, Dict, Optional
from fastapi import status


class AppError(Exception):
    """Base class for errors the API maps onto a status code and error code."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ExamNotFoundError(NotFoundError):
    default_message = "Exam not found."


class SubmissionNotFoundError(NotFoundError):
    default_message = "Submission not found."


class NotificationNotFoundError(NotFoundError):
    default_message = "Notification not found."


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action."


class RoleRequiredError(PermissionDeniedError):
    pass


class NotSubmissionOwnerError(PermissionDeniedError):
    default_message = "You can only access your own submissions."


class StateConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "STATE_CONFLICT"
    default_message = "The resource is not in a state that allows this action."


class SubmissionAlreadyCompletedError(StateConflictError):
    default_message = "Already submitted"


class ExamHasSubmissionsError(StateConflictError):
    default_message = "Cannot edit an exam that already has student submissions"


class SubmissionTimeExpiredError(StateConflictError):
    default_message = "The time limit for this exam has expired."

from app.core.constants import RoleEnum
from app.core.exceptions import NotSubmissionOwnerError, RoleRequiredError
from app.models.submission import Submission
from app.schemas.user import UserContext


class PermissionHelper:
    @staticmethod
    def is_admin(context: UserContext) -> bool:
        return context.role == RoleEnum.ADMIN

    @staticmethod
    def is_student(context: UserContext) -> bool:
        return context.role == RoleEnum.STUDENT

    @staticmethod
    def is_submission_owner(context: UserContext, submission: Submission) -> bool:
        return submission.student_id == context.user.id

    @staticmethod
    def require_admin(context: UserContext, error_message: str = "Only administrators can perform this action."):
        if not PermissionHelper.is_admin(context):
            raise RoleRequiredError(error_message)

    @staticmethod
    def require_student(context: UserContext, error_message: str = "Only students can perform this action."):
        if not PermissionHelper.is_student(context):
            raise RoleRequiredError(error_message)

    @staticmethod
    def require_submission_owner(context: UserContext, submission: Submission):
        if not PermissionHelper.is_submission_owner(context, submission):
            raise NotSubmissionOwnerError("You can only submit answers for your own submissions.")

    @staticmethod
    def require_submission_view_permission(context: UserContext, submission: Submission):
        if PermissionHelper.is_admin(context):
            return
        if not PermissionHelper.is_submission_owner(context, submission):
            raise NotSubmissionOwnerError("You can only view your own submissions.")

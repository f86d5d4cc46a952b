import logging
from typing import List, Union
from sqlalchemy.orm import Session

from app.core.constants import NotificationTypeEnum
from app.core.exceptions import ExamHasSubmissionsError, ExamNotFoundError
from app.crud.exam import exam as crud_exam
from app.crud.submission import submission as crud_submission
from app.models.exam import Exam
from app.schemas.exam import ExamCreate, ExamDetail, ExamPublicDetail, ExamUpdate
from app.schemas.user import UserContext
from app.services.notification import notification_service
from app.services.visibility import exam_for_role
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class ExamService:

    def __init__(self, exams=crud_exam, submissions=crud_submission, notifications=notification_service):
        self.exams = exams
        self.submissions = submissions
        self.notifications = notifications

    def _get_exam_or_404(self, db: Session, exam_id: int) -> Exam:
        exam = self.exams.get(db, id=exam_id)
        if not exam:
            raise ExamNotFoundError()
        return exam

    def _get_visible_exam_or_404(self, db: Session, exam_id: int, current_user_context: UserContext) -> Exam:
        # Drafts are invisible to students, same as in the listing.
        exam = self._get_exam_or_404(db, exam_id)
        if not exam.is_active and not permission_helper.is_admin(current_user_context):
            raise ExamNotFoundError()
        return exam

    def get_all_exams(self, db: Session, current_user_context: UserContext, skip: int = 0, limit: int = 100) -> List[Exam]:
        active_only = not permission_helper.is_admin(current_user_context)
        return self.exams.get_multi(db, skip=skip, limit=limit, active_only=active_only)

    def get_exam(self, db: Session, exam_id: int, current_user_context: UserContext) -> Union[ExamDetail, ExamPublicDetail]:
        exam = self._get_visible_exam_or_404(db, exam_id, current_user_context)
        return exam_for_role(exam, current_user_context.role)

    def create_exam(self, db: Session, exam_in: ExamCreate, current_user_context: UserContext) -> ExamDetail:
        permission_helper.require_admin(current_user_context, "Only administrators can create exams.")

        new_exam = self.exams.create_with_questions(
            db, obj_in=exam_in, created_by_id=current_user_context.user.id
        )
        logger.info(
            f"Exam {new_exam.id} created by user {current_user_context.user.id} "
            f"with {len(exam_in.questions)} questions"
        )

        if new_exam.is_active:
            self.notifications.notify_all_students(
                db,
                title="New Exam Available",
                message=f"A new exam '{new_exam.title}' is now available.",
                notification_type=NotificationTypeEnum.NEW_EXAM,
                link=f"/exams/{new_exam.id}"
            )

        return ExamDetail.model_validate(new_exam)

    def update_exam(self, db: Session, exam_id: int, exam_in: ExamUpdate, current_user_context: UserContext) -> ExamDetail:
        permission_helper.require_admin(current_user_context, "Only administrators can edit exams.")
        exam = self._get_exam_or_404(db, exam_id)

        # Graded submissions reference the current question and option ids.
        if self.submissions.exists_for_exam(db, exam_id=exam_id):
            logger.warning(f"Rejected edit of exam {exam_id}: submissions exist")
            raise ExamHasSubmissionsError()

        updated_exam = self.exams.replace_definition(db, db_obj=exam, obj_in=exam_in)
        logger.info(f"Exam {exam_id} replaced by user {current_user_context.user.id}")
        return ExamDetail.model_validate(updated_exam)

    def delete_exam(self, db: Session, exam_id: int, current_user_context: UserContext) -> Exam:
        """Soft delete: submissions keep pointing at the exam they were graded against."""
        permission_helper.require_admin(current_user_context, "Only administrators can delete exams.")
        self._get_exam_or_404(db, exam_id)

        deleted_exam = self.exams.remove(db, id=exam_id)
        logger.info(f"Exam {exam_id} deleted by user {current_user_context.user.id}")
        return deleted_exam

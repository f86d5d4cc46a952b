import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Union
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import QuestionTypeEnum, NotificationTypeEnum, SubmissionStatusEnum
from app.core.exceptions import (
    ExamNotFoundError,
    SubmissionAlreadyCompletedError,
    SubmissionNotFoundError,
    SubmissionTimeExpiredError,
)
from app.crud.answer import answer as crud_answer
from app.crud.exam import exam as crud_exam
from app.crud.submission import submission as crud_submission
from app.models.exam import Exam
from app.models.submission import Submission
from app.schemas.answer import AnswerCreate, AnswerSubmit
from app.schemas.submission import SubmissionDetail, SubmissionPublicDetail, SubmissionWithExam
from app.schemas.user import UserContext
from app.services import scoring
from app.services.notification import notification_service
from app.services.visibility import submission_for_role
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SubmissionService:
    """Lifecycle of one student's attempt: start -> IN_PROGRESS -> COMPLETED."""

    def __init__(
        self,
        exams=crud_exam,
        submissions=crud_submission,
        answers=crud_answer,
        notifications=notification_service,
        enforce_time_limit: Optional[bool] = None,
        grace_seconds: Optional[int] = None
    ):
        self.exams = exams
        self.submissions = submissions
        self.answers = answers
        self.notifications = notifications
        self.enforce_time_limit = settings.ENFORCE_TIME_LIMIT if enforce_time_limit is None else enforce_time_limit
        self.grace_seconds = settings.SUBMISSION_GRACE_SECONDS if grace_seconds is None else grace_seconds

    def _get_submission_or_404(self, db: Session, submission_id: int) -> Submission:
        submission = self.submissions.get(db, id=submission_id)
        if not submission:
            raise SubmissionNotFoundError()
        return submission

    def _get_graded_exam(self, db: Session, submission: Submission) -> Exam:
        # Deleted exams stay gradable and viewable for their submissions.
        exam = self.exams.get_including_deleted(db, id=submission.exam_id)
        if not exam:
            raise ExamNotFoundError("Exam not found for this submission.")
        return exam

    def _check_time_limit(self, submission: Submission, exam: Exam, now: datetime):
        deadline = _as_utc(submission.start_time) + timedelta(minutes=exam.duration)
        if now <= deadline + timedelta(seconds=self.grace_seconds):
            return

        late_by = int((now - deadline).total_seconds())
        if self.enforce_time_limit:
            logger.warning(f"Rejected late submission {submission.id}: {late_by}s past the time limit")
            raise SubmissionTimeExpiredError()
        logger.warning(f"Accepting late submission {submission.id}: {late_by}s past the time limit")

    def _normalize_answers(self, exam: Exam, answers_in: Iterable[AnswerSubmit]) -> List[AnswerSubmit]:
        """Keep one answer per exam question, shaped for that question's type."""
        questions = {q.id: q for q in exam.questions}
        normalized = []
        for question_id, answer in scoring.index_answers(answers_in).items():
            question = questions.get(question_id)
            if question is None:
                continue
            if question.type == QuestionTypeEnum.MCQ:
                option_ids = {o.id for o in question.options}
                selected = answer.selected_option_id if answer.selected_option_id in option_ids else None
                normalized.append(AnswerSubmit(question_id=question_id, selected_option_id=selected))
            else:
                normalized.append(AnswerSubmit(question_id=question_id, text_answer=answer.text_answer))
        return normalized

    def start_exam(self, db: Session, exam_id: int, current_user_context: UserContext) -> Submission:
        permission_helper.require_student(current_user_context, "Only students can start exams.")
        exam = self.exams.get(db, id=exam_id)
        # Only students get here, and drafts are hidden from them.
        if not exam or not exam.is_active:
            raise ExamNotFoundError()

        student_id = current_user_context.user.id
        existing = self.submissions.get_in_progress(db, exam_id=exam_id, student_id=student_id)
        if existing:
            logger.info(f"Resuming submission {existing.id} for exam {exam_id}, student {student_id}")
            return existing

        try:
            submission = self.submissions.create(db, obj_in={
                "exam_id": exam_id,
                "student_id": student_id,
                "start_time": datetime.now(timezone.utc),
                "status": SubmissionStatusEnum.IN_PROGRESS,
            })
        except IntegrityError:
            # A concurrent start won the unique IN_PROGRESS slot.
            db.rollback()
            existing = self.submissions.get_in_progress(db, exam_id=exam_id, student_id=student_id)
            if not existing:
                raise
            return existing

        logger.info(f"Started submission {submission.id} for exam {exam_id}, student {student_id}")
        return submission

    def submit(self, db: Session, submission_id: int, answers_in: List[AnswerSubmit], current_user_context: UserContext) -> Submission:
        """Grade and complete a submission.

        Manual submits and timer auto-submits both land here. The answers,
        the score and the status change are written in the caller's
        transaction; the status change is a conditional update, so of two
        racing submits exactly one completes and the other is rejected.
        """
        submission = self._get_submission_or_404(db, submission_id)
        permission_helper.require_submission_owner(current_user_context, submission)
        if submission.status == SubmissionStatusEnum.COMPLETED:
            raise SubmissionAlreadyCompletedError()

        exam = self._get_graded_exam(db, submission)
        now = datetime.now(timezone.utc)
        self._check_time_limit(submission, exam, now)

        answers = self._normalize_answers(exam, answers_in)
        result = scoring.grade_submission(scoring.answer_keys_for(exam.questions), answers)

        if not self.submissions.mark_completed(db, submission_id=submission.id, score=result.score, end_time=now):
            logger.warning(f"Submission {submission.id} was completed by a concurrent request")
            raise SubmissionAlreadyCompletedError()

        answer_rows = []
        for answer in answers:
            graded = result.for_question(answer.question_id)
            answer_rows.append(AnswerCreate(
                submission_id=submission.id,
                question_id=answer.question_id,
                selected_option_id=answer.selected_option_id,
                text_answer=answer.text_answer,
                is_correct=graded.is_correct,
                points_awarded=graded.earned,
            ))
        self.answers.create_multi(db, objs_in=answer_rows)

        self.notifications.create_notification(
            db,
            user_id=submission.student_id,
            title="Exam Graded",
            message=f"Your submission for '{exam.title}' scored {result.score}%.",
            notification_type=NotificationTypeEnum.RESULT,
            link=f"/submissions/{submission.id}"
        )

        # Answers were inserted by foreign key, so the loaded collection is stale.
        db.expire(submission)
        db.refresh(submission)
        logger.info(
            f"Submission {submission.id} graded: {result.earned_points}/{result.total_points} "
            f"points, score {result.score}%"
        )
        return submission

    def get_submission(
        self, db: Session, submission_id: int, current_user_context: UserContext
    ) -> Union[SubmissionDetail, SubmissionPublicDetail]:
        submission = self._get_submission_or_404(db, submission_id)
        permission_helper.require_submission_view_permission(current_user_context, submission)
        exam = self._get_graded_exam(db, submission)
        return submission_for_role(submission, exam, current_user_context.role)

    def list_submissions(self, db: Session, current_user_context: UserContext, skip: int = 0, limit: int = 100) -> List[SubmissionWithExam]:
        if permission_helper.is_admin(current_user_context):
            submissions = self.submissions.get_all(db, skip=skip, limit=limit)
        else:
            submissions = self.submissions.get_all_by_student(
                db, student_id=current_user_context.user.id, skip=skip, limit=limit
            )
        return [SubmissionWithExam.model_validate(s) for s in submissions]

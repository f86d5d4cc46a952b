from typing import Union

from app.core.constants import RoleEnum
from app.models.exam import Exam as ExamModel
from app.models.submission import Submission as SubmissionModel
from app.schemas.answer import Answer, AnswerPublic
from app.schemas.exam import ExamDetail, ExamPublicDetail
from app.schemas.submission import SubmissionDetail, SubmissionPublicDetail


def can_see_answer_key(role: RoleEnum) -> bool:
    return role == RoleEnum.ADMIN


def exam_for_role(exam: ExamModel, role: RoleEnum) -> Union[ExamDetail, ExamPublicDetail]:
    """Serialize an exam for ``role``.

    Students get ``ExamPublicDetail``, whose question and option schemas have
    no ``keywords`` or ``is_correct`` fields at all.
    """
    if can_see_answer_key(role):
        return ExamDetail.model_validate(exam)
    return ExamPublicDetail.model_validate(exam)


def submission_for_role(
    submission: SubmissionModel, exam: ExamModel, role: RoleEnum
) -> Union[SubmissionDetail, SubmissionPublicDetail]:
    answer_schema = Answer if can_see_answer_key(role) else AnswerPublic
    data = {
        "id": submission.id,
        "exam_id": submission.exam_id,
        "student_id": submission.student_id,
        "start_time": submission.start_time,
        "end_time": submission.end_time,
        "score": submission.score,
        "status": submission.status,
        "answers": [answer_schema.model_validate(a) for a in submission.answers],
        "exam": exam_for_role(exam, role),
    }
    if can_see_answer_key(role):
        return SubmissionDetail.model_validate(data)
    return SubmissionPublicDetail.model_validate(data)

from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

from app.core.constants import SubmissionStatusEnum
from app.schemas.answer import Answer, AnswerPublic
from app.schemas.exam import Exam, ExamDetail, ExamPublicDetail

class SubmissionBase(BaseModel):
    exam_id: int
    student_id: int
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    score: Optional[int] = None
    status: SubmissionStatusEnum = SubmissionStatusEnum.IN_PROGRESS

class SubmissionCreate(SubmissionBase):
    pass

class Submission(SubmissionBase):
    id: int

    model_config = ConfigDict(from_attributes=True)

class SubmissionWithExam(Submission):
    exam: Optional[Exam] = None

class SubmissionDetail(Submission):
    """Submission review for admins: exam with its answer key."""
    exam: ExamDetail
    answers: List[Answer] = []

class SubmissionPublicDetail(Submission):
    """Submission review for students: exam without its answer key."""
    exam: ExamPublicDetail
    answers: List[AnswerPublic] = []

    model_config = ConfigDict(from_attributes=True, extra="forbid")

from datetime import datetime
from typing import List, Optional
from sqlalchemy import exists
from sqlalchemy.orm import Session, selectinload

from app.core.constants import SubmissionStatusEnum
from app.crud.base import CRUDBase
from app.models.submission import Submission
from app.schemas.submission import SubmissionCreate


class CRUDSubmission(CRUDBase[Submission, SubmissionCreate, SubmissionCreate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Submission).options(
            selectinload(Submission.exam),
            selectinload(Submission.answers)
        )

    def get(self, db: Session, id: int) -> Optional[Submission]:
        return self._query_with_relationships(db).filter(Submission.id == id).first()

    def get_in_progress(self, db: Session, *, exam_id: int, student_id: int) -> Optional[Submission]:
        return (
            db.query(Submission)
            .filter(
                Submission.exam_id == exam_id,
                Submission.student_id == student_id,
                Submission.status == SubmissionStatusEnum.IN_PROGRESS
            )
            .order_by(Submission.start_time.desc())
            .first()
        )

    def get_all_by_student(self, db: Session, *, student_id: int, skip: int = 0, limit: int = 100) -> List[Submission]:
        return (
            self._query_with_relationships(db)
            .filter(Submission.student_id == student_id)
            .order_by(Submission.start_time, Submission.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_all(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Submission]:
        return (
            self._query_with_relationships(db)
            .order_by(Submission.start_time, Submission.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def exists_for_exam(self, db: Session, *, exam_id: int) -> bool:
        return db.query(exists().where(Submission.exam_id == exam_id)).scalar()

    def mark_completed(self, db: Session, *, submission_id: int, score: int, end_time: datetime) -> bool:
        """IN_PROGRESS -> COMPLETED as a single conditional UPDATE.

        Returns False when no row was IN_PROGRESS, i.e. another request
        already completed the submission.
        """
        updated = (
            db.query(Submission)
            .filter(
                Submission.id == submission_id,
                Submission.status == SubmissionStatusEnum.IN_PROGRESS
            )
            .update(
                {
                    Submission.status: SubmissionStatusEnum.COMPLETED,
                    Submission.score: score,
                    Submission.end_time: end_time,
                }
            )
        )
        return updated == 1

submission = CRUDSubmission(Submission)

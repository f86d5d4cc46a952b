from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.crud.question import question as crud_question
from app.models.exam import Exam
from app.models.question import Question
from app.schemas.exam import ExamCreate, ExamUpdate


class CRUDExam(CRUDBase[Exam, ExamCreate, ExamUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Exam).options(
            selectinload(Exam.questions).selectinload(Question.options)
        )

    def _query_active(self, db: Session):
        return self._query_with_relationships(db).filter(Exam.deleted_at.is_(None))

    def get(self, db: Session, id: int) -> Optional[Exam]:
        return self._query_active(db).filter(Exam.id == id).first()

    def get_including_deleted(self, db: Session, id: int) -> Optional[Exam]:
        return self._query_with_relationships(db).filter(Exam.id == id).first()

    def get_multi(
        self, db: Session, skip: int = 0, limit: int = 100, active_only: bool = False
    ) -> List[Exam]:
        query = db.query(Exam).filter(Exam.deleted_at.is_(None))
        if active_only:
            query = query.filter(Exam.is_active.is_(True))
        return query.order_by(Exam.created_at, Exam.id).offset(skip).limit(limit).all()

    def create_with_questions(self, db: Session, *, obj_in: ExamCreate, created_by_id: int) -> Exam:
        db_obj = Exam(
            title=obj_in.title,
            description=obj_in.description,
            duration=obj_in.duration,
            is_active=obj_in.is_active,
            created_by_id=created_by_id,
            questions=[
                crud_question.build(question_in, position=position)
                for position, question_in in enumerate(obj_in.questions)
            ],
        )
        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        return db_obj

    def replace_definition(self, db: Session, *, db_obj: Exam, obj_in: ExamUpdate) -> Exam:
        """Overwrite exam fields and recreate the whole question/option tree."""
        db_obj.title = obj_in.title
        db_obj.description = obj_in.description
        db_obj.duration = obj_in.duration
        db_obj.is_active = obj_in.is_active

        db_obj.questions.clear()
        db.flush()

        db_obj.questions.extend(
            crud_question.build(question_in, position=position)
            for position, question_in in enumerate(obj_in.questions)
        )
        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        return db_obj

exam = CRUDExam(Exam)

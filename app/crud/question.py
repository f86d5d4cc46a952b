from app.crud.base import CRUDBase
from app.models.option import Option
from app.models.question import Question
from app.schemas.question import QuestionCreate

class CRUDQuestion(CRUDBase[Question, QuestionCreate, QuestionCreate]):
    def build(self, question_in: QuestionCreate, *, position: int) -> Question:
        """Build an unsaved question with its options; the caller attaches it to an exam."""
        return Question(
            position=position,
            text=question_in.text,
            type=question_in.type,
            points=question_in.points,
            keywords=list(question_in.keywords) if question_in.keywords else None,
            options=[Option(text=o.text, is_correct=o.is_correct) for o in question_in.options],
        )

question = CRUDQuestion(Question)

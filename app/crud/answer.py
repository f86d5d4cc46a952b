from app.crud.base import CRUDBase
from app.models.answer import Answer
from app.schemas.answer import AnswerCreate

class CRUDAnswer(CRUDBase[Answer, AnswerCreate, AnswerCreate]):
    pass

answer = CRUDAnswer(Answer)

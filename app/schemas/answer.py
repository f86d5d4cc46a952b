from pydantic import BaseModel, ConfigDict, model_validator
from typing import Optional, List

class AnswerBase(BaseModel):
    question_id: int
    selected_option_id: Optional[int] = None # MCQ
    text_answer: Optional[str] = None # SHORT_ANSWER

class AnswerSubmit(AnswerBase):
    @model_validator(mode="after")
    def one_kind_of_answer(self):
        if self.selected_option_id is not None and self.text_answer is not None:
            raise ValueError("An answer carries either selected_option_id or text_answer, not both")
        return self

class AnswerCreate(AnswerBase):
    submission_id: int
    is_correct: Optional[bool] = None
    points_awarded: int = 0

class Answer(AnswerBase):
    id: int
    submission_id: int
    is_correct: Optional[bool] = None
    points_awarded: int = 0

    model_config = ConfigDict(from_attributes=True)

class AnswerPublic(AnswerBase):
    """Graded answer as its student sees it, without the correctness flag."""
    id: int
    submission_id: int
    points_awarded: int = 0

    model_config = ConfigDict(from_attributes=True, extra="forbid")

class SubmitRequest(BaseModel):
    answers: List[AnswerSubmit] = []

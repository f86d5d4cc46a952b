from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List

from app.core.constants import QuestionTypeEnum, MIN_MCQ_OPTIONS


class OptionBase(BaseModel):
    text: str = Field(..., min_length=1)

class OptionCreate(OptionBase):
    is_correct: bool = False

class Option(OptionBase):
    """Option as seen by exam authors, including the answer key flag."""
    id: int
    question_id: int
    is_correct: bool

    model_config = ConfigDict(from_attributes=True)

class OptionPublic(OptionBase):
    """Option as served to students. The answer key flag is not a field."""
    id: int
    question_id: int

    model_config = ConfigDict(from_attributes=True, extra="forbid")


class QuestionBase(BaseModel):
    text: str = Field(..., min_length=1)
    type: QuestionTypeEnum
    points: int = Field(default=1, ge=0)

class QuestionCreate(QuestionBase):
    options: List[OptionCreate] = []
    keywords: Optional[List[str]] = None

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Question text cannot be empty")
        return v

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v):
        if v is None:
            return v
        seen = set()
        keywords = []
        for keyword in v:
            cleaned = keyword.strip()
            if not cleaned:
                raise ValueError("Keywords cannot be blank")
            if cleaned.lower() in seen:
                continue
            seen.add(cleaned.lower())
            keywords.append(cleaned)
        return keywords

    @model_validator(mode="after")
    def check_answer_key(self):
        if self.type == QuestionTypeEnum.MCQ:
            if len(self.options) < MIN_MCQ_OPTIONS:
                raise ValueError(f"Multiple-choice questions need at least {MIN_MCQ_OPTIONS} options")
            correct = sum(1 for option in self.options if option.is_correct)
            if correct != 1:
                raise ValueError("Multiple-choice questions must have exactly one correct option")
            if self.keywords:
                raise ValueError("Keywords are only allowed on short-answer questions")
        elif self.type == QuestionTypeEnum.SHORT_ANSWER:
            if self.options:
                raise ValueError("Short-answer questions cannot have options")
        return self

class Question(QuestionBase):
    """Question as seen by exam authors, including the answer key."""
    id: int
    exam_id: int
    position: int
    keywords: List[str]
    options: List[Option] = []

    model_config = ConfigDict(from_attributes=True)

    @field_validator("keywords", mode="before")
    @classmethod
    def default_keywords(cls, v):
        return v or []

class QuestionPublic(QuestionBase):
    """Question as served to students: no keywords, options without flags."""
    id: int
    exam_id: int
    position: int
    options: List[OptionPublic] = []

    model_config = ConfigDict(from_attributes=True, extra="forbid")

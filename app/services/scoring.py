"""Submission scoring.

Everything here is pure: answer keys and submitted answers in, a
``GradingResult`` out. No database access and no clock, so the grading
rules can be exercised with plain objects.

Rules
-----
* MCQ: full points when the selected option is the correct one, else 0.
* SHORT_ANSWER without keywords: full points for any non-blank answer.
* SHORT_ANSWER with K keywords: ``round(points * M / K)`` where M is the
  number of distinct keywords found (case-insensitive substring match).
* Exam score: ``round(100 * earned / possible)``, 0 when nothing is possible.

All rounding is half-up and done on integers.
"""
from typing import Annotated, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import QuestionTypeEnum
from app.models.question import Question
from app.schemas.answer import AnswerBase


class McqAnswerKey(BaseModel):
    type: Literal[QuestionTypeEnum.MCQ] = QuestionTypeEnum.MCQ
    question_id: int
    points: int = Field(ge=0)
    correct_option_id: Optional[int] = None

    model_config = ConfigDict(frozen=True)


class ShortAnswerKey(BaseModel):
    type: Literal[QuestionTypeEnum.SHORT_ANSWER] = QuestionTypeEnum.SHORT_ANSWER
    question_id: int
    points: int = Field(ge=0)
    keywords: List[str] = []

    model_config = ConfigDict(frozen=True)


AnswerKey = Annotated[Union[McqAnswerKey, ShortAnswerKey], Field(discriminator="type")]


class QuestionResult(BaseModel):
    question_id: int
    earned: int
    possible: int
    is_correct: bool
    answered: bool


class GradingResult(BaseModel):
    score: int
    earned_points: int
    total_points: int
    questions: List[QuestionResult]

    def for_question(self, question_id: int) -> Optional[QuestionResult]:
        return next((q for q in self.questions if q.question_id == question_id), None)


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer ``round(numerator / denominator)`` with .5 rounding up."""
    return (2 * numerator + denominator) // (2 * denominator)


def _norm(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def answer_key_for(question: Question) -> AnswerKey:
    if question.type == QuestionTypeEnum.MCQ:
        correct = next((o.id for o in question.options if o.is_correct), None)
        return McqAnswerKey(question_id=question.id, points=question.points, correct_option_id=correct)
    if question.type == QuestionTypeEnum.SHORT_ANSWER:
        return ShortAnswerKey(question_id=question.id, points=question.points, keywords=question.keywords or [])
    raise TypeError(f"Unsupported question type: {question.type!r}")


def answer_keys_for(questions: Iterable[Question]) -> List[AnswerKey]:
    return [answer_key_for(q) for q in questions]


def index_answers(answers: Iterable[AnswerBase]) -> Dict[int, AnswerBase]:
    """Map question_id to answer. The first answer for a question wins."""
    indexed: Dict[int, AnswerBase] = {}
    for answer in answers:
        indexed.setdefault(answer.question_id, answer)
    return indexed


def grade_mcq(key: McqAnswerKey, answer: Optional[AnswerBase]) -> QuestionResult:
    selected = answer.selected_option_id if answer else None
    is_correct = (
        selected is not None
        and key.correct_option_id is not None
        and selected == key.correct_option_id
    )
    return QuestionResult(
        question_id=key.question_id,
        earned=key.points if is_correct else 0,
        possible=key.points,
        is_correct=is_correct,
        answered=selected is not None,
    )


def grade_short_answer(key: ShortAnswerKey, answer: Optional[AnswerBase]) -> QuestionResult:
    text = _norm(answer.text_answer if answer else None)
    keywords = {k for k in (_norm(k) for k in key.keywords) if k}

    if not text:
        return QuestionResult(
            question_id=key.question_id, earned=0, possible=key.points, is_correct=False, answered=False
        )

    if not keywords:
        return QuestionResult(
            question_id=key.question_id, earned=key.points, possible=key.points, is_correct=True, answered=True
        )

    matched = sum(1 for keyword in keywords if keyword in text)
    return QuestionResult(
        question_id=key.question_id,
        earned=round_half_up(key.points * matched, len(keywords)),
        possible=key.points,
        is_correct=matched == len(keywords),
        answered=True,
    )


def grade_question(key: AnswerKey, answer: Optional[AnswerBase]) -> QuestionResult:
    if isinstance(key, McqAnswerKey):
        return grade_mcq(key, answer)
    if isinstance(key, ShortAnswerKey):
        return grade_short_answer(key, answer)
    raise TypeError(f"Unsupported answer key: {type(key).__name__}")


def grade_submission(keys: Iterable[AnswerKey], answers: Iterable[AnswerBase]) -> GradingResult:
    """Score ``answers`` against ``keys``.

    Answers for questions that are not in ``keys`` are ignored.
    """
    by_question = index_answers(answers)
    results = [grade_question(key, by_question.get(key.question_id)) for key in keys]

    earned = sum(r.earned for r in results)
    possible = sum(r.possible for r in results)
    score = round_half_up(100 * earned, possible) if possible > 0 else 0

    return GradingResult(
        score=score,
        earned_points=earned,
        total_points=possible,
        questions=results,
    )

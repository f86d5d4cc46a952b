from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.schemas.question import Question, QuestionCreate, QuestionPublic

class ExamBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    duration: int = Field(..., gt=0, description="Time limit in minutes")
    is_active: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

class ExamCreate(ExamBase):
    questions: List[QuestionCreate] = []

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Databases Midterm",
                "description": "Transactions and storage",
                "duration": 30,
                "is_active": True,
                "questions": [
                    {
                        "text": "Capital of France?",
                        "type": "MCQ",
                        "points": 10,
                        "options": [
                            {"text": "Paris", "is_correct": True},
                            {"text": "Lyon", "is_correct": False}
                        ]
                    },
                    {
                        "text": "Explain ACID.",
                        "type": "SHORT_ANSWER",
                        "points": 8,
                        "keywords": ["atomic", "consistency", "isolation", "durability"]
                    }
                ]
            }
        }
    )

class ExamUpdate(ExamCreate):
    """Full replacement of an exam definition, questions included."""
    pass

class Exam(ExamBase):
    id: int
    created_by_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ExamDetail(Exam):
    questions: List[Question] = []

class ExamPublicDetail(Exam):
    questions: List[QuestionPublic] = []

    model_config = ConfigDict(from_attributes=True, extra="forbid")

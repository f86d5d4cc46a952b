from sqlalchemy import Column, Integer, String, ForeignKey, Enum, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import QuestionTypeEnum

class Question(Base):
    __tablename__ = "questions"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_questions_points_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    text = Column(String, nullable=False)
    type = Column(Enum(QuestionTypeEnum), nullable=False)
    points = Column(Integer, nullable=False, default=1)
    keywords = Column(JSON, nullable=True) # SHORT_ANSWER grading keywords

    exam = relationship("Exam", back_populates="questions")
    options = relationship(
        "Option",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="Option.id"
    )

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.core.database import Base

class Answer(Base):
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, index=True)
    submission_id = Column(Integer, ForeignKey("submissions.id"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    selected_option_id = Column(Integer, ForeignKey("options.id"), nullable=True) # MCQ
    text_answer = Column(String, nullable=True) # SHORT_ANSWER
    is_correct = Column(Boolean, nullable=True) # populated by grading
    points_awarded = Column(Integer, nullable=False, default=0)

    submission = relationship("Submission", back_populates="answers")
    question = relationship("Question")

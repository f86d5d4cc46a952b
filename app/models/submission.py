from sqlalchemy import Column, Integer, DateTime, ForeignKey, Enum, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import SubmissionStatusEnum

class Submission(Base):
    __tablename__ = "submissions"
    __table_args__ = (
        # One IN_PROGRESS attempt per student and exam.
        Index(
            "uq_submissions_in_progress",
            "exam_id",
            "student_id",
            unique=True,
            postgresql_where=text("status = 'IN_PROGRESS'"),
            sqlite_where=text("status = 'IN_PROGRESS'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    end_time = Column(DateTime(timezone=True), nullable=True)
    score = Column(Integer, nullable=True) # percentage 0-100, set on completion
    status = Column(Enum(SubmissionStatusEnum), nullable=False, default=SubmissionStatusEnum.IN_PROGRESS)

    exam = relationship("Exam", back_populates="submissions")
    student = relationship("User", back_populates="submissions")
    answers = relationship("Answer", back_populates="submission", cascade="all, delete-orphan", order_by="Answer.id")

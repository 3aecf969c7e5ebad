from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Float, Enum, JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from classify.core.database import Base
from classify.core.constants import ExamCategoryEnum

class Exam(Base):
    __tablename__ = "cbt_exams"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    semester_id = Column(Integer, ForeignKey("semesters.id"), nullable=False, index=True)
    title = Column(String, index=True, nullable=False)
    category = Column(Enum(ExamCategoryEnum), nullable=False, default=ExamCategoryEnum.TEST)
    instructions = Column(String, nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=60)
    total_marks = Column(Float, nullable=False)
    pass_mark = Column(Float, nullable=False, default=50.0) # Percentage
    start_window = Column(DateTime(timezone=True), nullable=True)
    end_window = Column(DateTime(timezone=True), nullable=True)
    allow_review = Column(Boolean, default=True, nullable=False)
    is_published = Column(Boolean, default=False, nullable=False)
    topic_ids = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    num_questions = Column(Integer, nullable=True)
    is_archived = Column(Boolean, default=False, nullable=False)
    deletion_scheduled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship("Course")
    semester = relationship("Semester")
    exam_questions = relationship(
        "ExamQuestion",
        back_populates="exam",
        cascade="all, delete-orphan",
        order_by="ExamQuestion.position",
    )
    attempts = relationship("ExamAttempt", back_populates="exam", cascade="all, delete-orphan")

    @property
    def questions(self):
        return [eq.question for eq in self.exam_questions]

    @property
    def question_ids(self):
        return [eq.question_id for eq in self.exam_questions]


class ExamQuestion(Base):
    __tablename__ = "exam_questions"
    __table_args__ = (UniqueConstraint("exam_id", "question_id", name="uq_exam_question"),)

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("cbt_exams.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    position = Column(Integer, nullable=False)

    exam = relationship("Exam", back_populates="exam_questions")
    question = relationship("Question")

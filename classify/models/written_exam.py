from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from classify.core.database import Base
from classify.core.constants import WrittenExamTypeEnum

class WrittenExam(Base):
    __tablename__ = "written_exams"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    semester_id = Column(Integer, ForeignKey("semesters.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    exam_type = Column(Enum(WrittenExamTypeEnum), nullable=False, default=WrittenExamTypeEnum.WRITTEN)
    exam_date = Column(DateTime(timezone=True), nullable=True)
    total_marks = Column(Float, nullable=False, default=100.0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship("Course")
    semester = relationship("Semester")
    scores = relationship("Score", back_populates="exam", cascade="all, delete-orphan")


class Score(Base):
    __tablename__ = "scores"
    __table_args__ = (UniqueConstraint("exam_id", "student_id", name="uq_score_exam_student"),)

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("written_exams.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    score = Column(Float, nullable=False)
    grade = Column(String(2), nullable=False)
    remark = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    exam = relationship("WrittenExam", back_populates="scores")
    student = relationship("Student")

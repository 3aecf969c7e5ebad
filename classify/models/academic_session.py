from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from classify.core.database import Base

class AcademicSession(Base):
    __tablename__ = "academic_sessions"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    semesters = relationship("Semester", back_populates="session", cascade="all, delete-orphan")


class Semester(Base):
    __tablename__ = "semesters"
    __table_args__ = (UniqueConstraint("session_id", "name", name="uq_semester_session_name"),)

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("academic_sessions.id"), nullable=False)
    name = Column(String, nullable=False)
    is_current = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    session = relationship("AcademicSession", back_populates="semesters")

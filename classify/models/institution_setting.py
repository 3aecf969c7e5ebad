from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float
from sqlalchemy.sql import func
from classify.core.database import Base

class InstitutionSetting(Base):
    __tablename__ = "institution_settings"

    id = Column(Integer, primary_key=True, index=True)
    institution_name = Column(String, nullable=False, default="Institution Name")
    institution_acronym = Column(String, nullable=False, default="IN")
    attendance_weight = Column(Float, nullable=False, default=10.0)
    exam_deletion_grace_days = Column(Integer, nullable=False, default=3)
    require_attendance_session_for_cbt = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

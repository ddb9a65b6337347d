from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.types import JSON

from applytrack.database import Base


class JobSearchCriteria(Base):
    __tablename__ = "job_search_criteria"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    keywords = Column(JSON, nullable=False, default=list)
    job_titles = Column(JSON, nullable=False, default=list)
    locations = Column(JSON, nullable=False, default=list)
    exclude_keywords = Column(JSON, nullable=False, default=list)
    employment_type = Column(String(50))
    salary_min = Column(Integer)
    salary_max = Column(Integer)
    experience_level = Column(String(50))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.types import JSON

from applytrack.database import Base


class ScrapingSession(Base):
    __tablename__ = "scraping_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="running")
    total_criteria = Column(Integer, nullable=False, default=0)
    completed_criteria = Column(Integer, nullable=False, default=0)
    total_jobs_found = Column(Integer, nullable=False, default=0)
    error_count = Column(Integer, nullable=False, default=0)
    summary = Column(JSON)
    started_at = Column(DateTime, server_default=func.now())
    finished_at = Column(DateTime)

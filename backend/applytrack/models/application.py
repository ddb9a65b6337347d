from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func

from applytrack.database import Base


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("user_id", "scraped_job_id", name="uq_application_user_job"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    scraped_job_id = Column(Integer, ForeignKey("scraped_jobs.id", ondelete="SET NULL"))
    resume_id = Column(Integer, ForeignKey("resumes.id", ondelete="SET NULL"))
    cover_letter_id = Column(Integer, ForeignKey("cover_letters.id", ondelete="SET NULL"))
    job_title = Column(String(500), nullable=False)
    company = Column(String(255), nullable=False)
    listing_url = Column(String(1000))
    status = Column(String(50), default="draft", nullable=False)
    notes = Column(Text)
    applied_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

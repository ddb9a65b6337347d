from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint, func

from applytrack.database import Base


class ScrapedJob(Base):
    __tablename__ = "scraped_jobs"
    __table_args__ = (
        UniqueConstraint("url", name="uq_scraped_job_url"),
        Index("idx_scraped_jobs_user_active", "user_id", "is_active"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    criteria_id = Column(Integer, ForeignKey("job_search_criteria.id", ondelete="SET NULL"), index=True)
    source = Column(String(50), nullable=False)
    external_id = Column(String(255), nullable=False)
    title = Column(String(500), nullable=False)
    company = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    url = Column(String(1000), nullable=False)
    salary_min = Column(Float)
    salary_max = Column(Float)
    contract_type = Column(String(50))
    posted_date = Column(DateTime)
    is_active = Column(Boolean, default=True, nullable=False)
    match_score = Column(Float)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

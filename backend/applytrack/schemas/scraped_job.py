from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ScrapedJobOut(BaseModel):
    id: int
    criteria_id: int | None = None
    source: str
    external_id: str
    title: str
    company: str
    location: str
    description: str
    url: str
    salary_min: float | None = None
    salary_max: float | None = None
    contract_type: str | None = None
    posted_date: datetime | None = None
    is_active: bool
    match_score: float | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class ScrapedJobListOut(BaseModel):
    total: int
    limit: int
    offset: int
    jobs: list[ScrapedJobOut]


class ScrapedJobUpdate(BaseModel):
    is_active: bool


class ScoreRequest(BaseModel):
    resume_id: int


class ScoreResponse(BaseModel):
    job_id: int
    resume_id: int
    score: float
    matched_skills: list[str]
    missing_skills: list[str]
    breakdown: dict[str, float]

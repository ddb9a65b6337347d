from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class CoverLetterGenerateRequest(BaseModel):
    resume_id: int
    scraped_job_id: int
    tone: str = "professional"
    custom_intro: str = ""


class CoverLetterOut(BaseModel):
    id: int
    resume_id: int
    scraped_job_id: int | None = None
    tone: str
    content: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator


APPLICATION_STATUSES = ("draft", "applied", "interviewing", "offered", "accepted", "rejected", "withdrawn")


def _check_status(value: str | None) -> str | None:
    if value is not None and value not in APPLICATION_STATUSES:
        raise ValueError(f"status must be one of: {', '.join(APPLICATION_STATUSES)}")
    return value


class ApplicationCreate(BaseModel):
    scraped_job_id: int | None = None
    resume_id: int | None = None
    cover_letter_id: int | None = None
    job_title: str | None = Field(default=None, max_length=500)
    company: str | None = Field(default=None, max_length=255)
    listing_url: str | None = Field(default=None, max_length=1000)
    status: str = "draft"
    notes: str | None = None
    applied_at: datetime | None = None

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str) -> str:
        return _check_status(value)

    @model_validator(mode="after")
    def _job_reference(self) -> "ApplicationCreate":
        # Without a stored job the listing has to be described by hand.
        if self.scraped_job_id is None and not ((self.job_title or "").strip() and (self.company or "").strip()):
            raise ValueError("either scraped_job_id or job_title and company are required")
        return self


class ApplicationUpdate(BaseModel):
    status: str | None = None
    notes: str | None = None
    applied_at: datetime | None = None
    resume_id: int | None = None
    cover_letter_id: int | None = None

    @field_validator("status")
    @classmethod
    def _known_status(cls, value: str | None) -> str | None:
        return _check_status(value)


class ApplicationOut(BaseModel):
    id: int
    scraped_job_id: int | None = None
    resume_id: int | None = None
    cover_letter_id: int | None = None
    job_title: str
    company: str
    listing_url: str | None = None
    status: str
    notes: str | None = None
    applied_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ApplicationStatsOut(BaseModel):
    total: int = 0
    draft: int = 0
    applied: int = 0
    interviewing: int = 0
    offered: int = 0
    accepted: int = 0
    rejected: int = 0
    withdrawn: int = 0

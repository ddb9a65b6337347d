from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator


def _clean_terms(values: list[str]) -> list[str]:
    return list(dict.fromkeys(value.strip() for value in values if value and value.strip()))


class SearchCriteriaBase(BaseModel):
    keywords: list[str] = Field(default_factory=list)
    job_titles: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    exclude_keywords: list[str] = Field(default_factory=list)
    employment_type: str | None = None
    salary_min: int | None = Field(default=None, ge=0)
    salary_max: int | None = Field(default=None, ge=0)
    experience_level: str | None = None
    is_active: bool = True

    @field_validator("keywords", "job_titles", "locations", "exclude_keywords")
    @classmethod
    def _strip_terms(cls, values: list[str]) -> list[str]:
        return _clean_terms(values)

    @model_validator(mode="after")
    def _salary_bounds(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salary_min must not exceed salary_max")
        return self


class SearchCriteriaCreate(SearchCriteriaBase):
    name: str = Field(min_length=1, max_length=255)

    @model_validator(mode="after")
    def _has_search_terms(self):
        if not self.keywords and not self.job_titles:
            raise ValueError("at least one keyword or job title is required")
        return self


class SearchCriteriaUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    keywords: list[str] | None = None
    job_titles: list[str] | None = None
    locations: list[str] | None = None
    exclude_keywords: list[str] | None = None
    employment_type: str | None = None
    salary_min: int | None = Field(default=None, ge=0)
    salary_max: int | None = Field(default=None, ge=0)
    experience_level: str | None = None
    is_active: bool | None = None

    @field_validator("keywords", "job_titles", "locations", "exclude_keywords")
    @classmethod
    def _strip_terms(cls, values: list[str] | None) -> list[str] | None:
        return None if values is None else _clean_terms(values)


class SearchCriteriaOut(SearchCriteriaBase):
    id: int
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class CriteriaRunOut(BaseModel):
    success: bool
    jobs_found: int
    errors: list[str]


class CriteriaSummaryOut(BaseModel):
    name: str
    jobs_found: int
    errors: list[str]


class ScrapingSessionRunOut(BaseModel):
    session_id: int | None
    success: bool
    total_jobs: int
    criteria_summary: dict[int, CriteriaSummaryOut]


class ScrapingSessionOut(BaseModel):
    id: int
    status: str
    total_criteria: int
    completed_criteria: int
    total_jobs_found: int
    error_count: int
    summary: dict | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    class Config:
        from_attributes = True

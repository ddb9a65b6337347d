from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class CredentialFieldOut(BaseModel):
    field: str
    label: str

    class Config:
        from_attributes = True


class ConnectorConfigOut(BaseModel):
    type: str
    name: str
    description: str
    is_configured: bool
    is_supported: bool
    requires_credentials: list[CredentialFieldOut]

    class Config:
        from_attributes = True


class ConnectorSearchRequest(BaseModel):
    query: str | None = None
    location: str | None = None
    category: str | None = None
    salary_min: int | None = Field(default=None, ge=0)
    salary_max: int | None = Field(default=None, ge=0)
    company: str | None = None
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=20, ge=1, le=100)
    connectors: list[str] | None = None

    @model_validator(mode="after")
    def _salary_bounds(self) -> "ConnectorSearchRequest":
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salary_min must not exceed salary_max")
        return self


class JobResultOut(BaseModel):
    id: str
    title: str
    company: str
    location: str
    description: str
    url: str
    source: str
    salary_min: float | None = None
    salary_max: float | None = None
    posted_date: str | None = None
    contract_type: str | None = None

    class Config:
        from_attributes = True


class JobSearchResponseOut(BaseModel):
    jobs: list[JobResultOut]
    total_results: int
    page: int
    per_page: int
    has_more: bool

    class Config:
        from_attributes = True


class ConnectorFailureOut(BaseModel):
    connector: str
    error: str

    class Config:
        from_attributes = True


class ConnectorSearchResponse(BaseModel):
    results: list[JobSearchResponseOut]
    errors: list[ConnectorFailureOut]
    total_jobs: int

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResumeSection(BaseModel):
    # JSON Resume allows vendor extensions, so unknown keys are kept.
    model_config = ConfigDict(extra="allow")


class Location(ResumeSection):
    address: str | None = None
    postalCode: str | None = None
    city: str | None = None
    countryCode: str | None = None
    region: str | None = None


class Profile(ResumeSection):
    network: str | None = None
    username: str | None = None
    url: str | None = None


class Basics(ResumeSection):
    name: str = Field(min_length=1)
    label: str | None = None
    image: str | None = None
    email: str | None = None
    phone: str | None = None
    url: str | None = None
    summary: str | None = None
    location: Location | None = None
    profiles: list[Profile] = Field(default_factory=list)


class WorkItem(ResumeSection):
    name: str | None = None
    position: str | None = None
    url: str | None = None
    startDate: str | None = None
    endDate: str | None = None
    summary: str | None = None
    highlights: list[str] = Field(default_factory=list)


class VolunteerItem(ResumeSection):
    organization: str | None = None
    position: str | None = None
    url: str | None = None
    startDate: str | None = None
    endDate: str | None = None
    summary: str | None = None
    highlights: list[str] = Field(default_factory=list)


class EducationItem(ResumeSection):
    institution: str | None = None
    url: str | None = None
    area: str | None = None
    studyType: str | None = None
    startDate: str | None = None
    endDate: str | None = None
    score: str | None = None
    courses: list[str] = Field(default_factory=list)


class AwardItem(ResumeSection):
    title: str | None = None
    date: str | None = None
    awarder: str | None = None
    summary: str | None = None


class CertificateItem(ResumeSection):
    name: str | None = None
    date: str | None = None
    issuer: str | None = None
    url: str | None = None


class PublicationItem(ResumeSection):
    name: str | None = None
    publisher: str | None = None
    releaseDate: str | None = None
    url: str | None = None
    summary: str | None = None


class SkillItem(ResumeSection):
    name: str = Field(min_length=1)
    level: str | None = None
    keywords: list[str] = Field(default_factory=list)


class LanguageItem(ResumeSection):
    language: str = Field(min_length=1)
    fluency: str | None = None


class InterestItem(ResumeSection):
    name: str = Field(min_length=1)
    keywords: list[str] = Field(default_factory=list)


class ReferenceItem(ResumeSection):
    name: str | None = None
    reference: str | None = None


class ProjectItem(ResumeSection):
    name: str = Field(min_length=1)
    description: str | None = None
    highlights: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    startDate: str | None = None
    endDate: str | None = None
    url: str | None = None
    roles: list[str] = Field(default_factory=list)


class ResumeDocument(ResumeSection):
    """A JSON Resume (https://jsonresume.org/schema) document."""

    basics: Basics
    work: list[WorkItem] = Field(default_factory=list)
    volunteer: list[VolunteerItem] = Field(default_factory=list)
    education: list[EducationItem] = Field(default_factory=list)
    awards: list[AwardItem] = Field(default_factory=list)
    certificates: list[CertificateItem] = Field(default_factory=list)
    publications: list[PublicationItem] = Field(default_factory=list)
    skills: list[SkillItem] = Field(default_factory=list)
    languages: list[LanguageItem] = Field(default_factory=list)
    interests: list[InterestItem] = Field(default_factory=list)
    references: list[ReferenceItem] = Field(default_factory=list)
    projects: list[ProjectItem] = Field(default_factory=list)

    def skill_names(self) -> list[str]:
        names: list[str] = []
        for skill in self.skills:
            names.append(skill.name)
            names.extend(skill.keywords)
        for project in self.projects:
            names.extend(project.keywords)
        return list(dict.fromkeys(name.strip() for name in names if name and name.strip()))

    def plain_text(self) -> str:
        parts: list[str] = [self.basics.name, self.basics.label or "", self.basics.summary or ""]
        if self.basics.location and self.basics.location.city:
            parts.append(self.basics.location.city)
        for item in self.work:
            parts.extend([item.position or "", item.name or "", item.summary or "", *item.highlights])
        for project in self.projects:
            parts.extend([project.name, project.description or "", *project.highlights])
        parts.extend(self.skill_names())
        return "\n".join(part for part in parts if part)


THEMES = ("modern", "classic", "minimal", "professional")


class ResumeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    theme: str = "modern"
    json_data: ResumeDocument

    @field_validator("theme")
    @classmethod
    def _known_theme(cls, value: str) -> str:
        if value not in THEMES:
            raise ValueError(f"theme must be one of: {', '.join(THEMES)}")
        return value


class ResumeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    theme: str | None = None
    json_data: ResumeDocument | None = None

    @field_validator("theme")
    @classmethod
    def _known_theme(cls, value: str | None) -> str | None:
        if value is not None and value not in THEMES:
            raise ValueError(f"theme must be one of: {', '.join(THEMES)}")
        return value


class ResumeOut(BaseModel):
    id: int
    name: str
    theme: str
    json_data: dict[str, Any]
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ResumeSetActiveRequest(BaseModel):
    is_active: bool

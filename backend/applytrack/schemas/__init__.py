from applytrack.schemas.application import ApplicationCreate, ApplicationOut, ApplicationStatsOut, ApplicationUpdate
from applytrack.schemas.connector import (
    ConnectorConfigOut,
    ConnectorSearchRequest,
    ConnectorSearchResponse,
    JobResultOut,
)
from applytrack.schemas.cover_letter import CoverLetterGenerateRequest, CoverLetterOut
from applytrack.schemas.external_log import ExternalLogListOut, ExternalLogOut
from applytrack.schemas.resume import ResumeCreate, ResumeDocument, ResumeOut, ResumeSetActiveRequest, ResumeUpdate
from applytrack.schemas.scraped_job import ScrapedJobListOut, ScrapedJobOut
from applytrack.schemas.search_criteria import SearchCriteriaCreate, SearchCriteriaOut, SearchCriteriaUpdate

__all__ = [
    "ApplicationCreate",
    "ApplicationOut",
    "ApplicationStatsOut",
    "ApplicationUpdate",
    "ConnectorConfigOut",
    "ConnectorSearchRequest",
    "ConnectorSearchResponse",
    "JobResultOut",
    "CoverLetterGenerateRequest",
    "CoverLetterOut",
    "ExternalLogOut",
    "ExternalLogListOut",
    "ResumeCreate",
    "ResumeDocument",
    "ResumeOut",
    "ResumeSetActiveRequest",
    "ResumeUpdate",
    "ScrapedJobOut",
    "ScrapedJobListOut",
    "SearchCriteriaCreate",
    "SearchCriteriaOut",
    "SearchCriteriaUpdate",
]

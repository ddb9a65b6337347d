from applytrack.models.application import Application
from applytrack.models.cover_letter import CoverLetter
from applytrack.models.external_log import ExternalLog
from applytrack.models.resume import Resume
from applytrack.models.scraped_job import ScrapedJob
from applytrack.models.scraping_session import ScrapingSession
from applytrack.models.search_criteria import JobSearchCriteria
from applytrack.models.user import User

__all__ = [
    "Application",
    "CoverLetter",
    "ExternalLog",
    "JobSearchCriteria",
    "Resume",
    "ScrapedJob",
    "ScrapingSession",
    "User",
]

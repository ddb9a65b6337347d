from __future__ import annotations

import contextlib
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from applytrack.connectors.base import JobResult, JobSearchParams, NoConnectorsConfiguredError
from applytrack.connectors.manager import ConnectorManager
from applytrack.models.scraped_job import ScrapedJob
from applytrack.models.scraping_session import ScrapingSession
from applytrack.models.search_criteria import JobSearchCriteria


logger = logging.getLogger(__name__)

SCRAPE_PAGE_SIZE = 50


@dataclass
class CriteriaRunResult:
    success: bool
    jobs_found: int
    errors: list[str] = field(default_factory=list)


@dataclass
class CriteriaSummary:
    name: str
    jobs_found: int
    errors: list[str] = field(default_factory=list)


@dataclass
class SessionSummary:
    session_id: int | None
    success: bool
    total_jobs: int
    criteria_summary: dict[int, CriteriaSummary] = field(default_factory=dict)


class JobScraperService:
    """Runs saved search criteria through the connectors and stores new postings.

    A posting is stored once per URL across the whole ``scraped_jobs`` table,
    so re-running the same criteria or session never creates duplicates.
    """

    def __init__(self, db: Session, user_id: int, manager: ConnectorManager) -> None:
        self.db = db
        self.user_id = user_id
        self.manager = manager

    async def run_scrape_for_criteria(self, criteria_id: int) -> CriteriaRunResult:
        criteria = (
            self.db.query(JobSearchCriteria)
            .filter(JobSearchCriteria.id == criteria_id, JobSearchCriteria.user_id == self.user_id)
            .first()
        )
        if not criteria:
            return CriteriaRunResult(success=False, jobs_found=0, errors=["Criteria not found"])
        return await self._scrape_criteria(criteria, seen_urls=set())

    async def run_scraping_session(self) -> SessionSummary:
        active_criteria = (
            self.db.query(JobSearchCriteria)
            .filter(JobSearchCriteria.user_id == self.user_id, JobSearchCriteria.is_active == True)  # noqa: E712
            .order_by(JobSearchCriteria.id.asc())
            .all()
        )
        if not active_criteria:
            return SessionSummary(session_id=None, success=False, total_jobs=0)
        if not self.manager.get_configured_connectors():
            raise NoConnectorsConfiguredError("No job connectors are configured")

        session = ScrapingSession(
            user_id=self.user_id,
            status="running",
            total_criteria=len(active_criteria),
            completed_criteria=0,
            total_jobs_found=0,
            error_count=0,
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        logger.info("Scraping session %s started for user %s (%d criteria)", session.id, self.user_id, len(active_criteria))

        summary: dict[int, CriteriaSummary] = {}
        seen_urls: set[str] = set()
        try:
            for criteria in active_criteria:
                result = await self._scrape_criteria(criteria, seen_urls)
                summary[criteria.id] = CriteriaSummary(
                    name=criteria.name,
                    jobs_found=result.jobs_found,
                    errors=result.errors,
                )
                session.completed_criteria = len(summary)
                self.db.add(session)
                self.db.commit()
        except Exception:
            self.db.rollback()
            session.status = "failed"
            session.finished_at = _utcnow()
            session.summary = _summary_payload(summary)
            self.db.add(session)
            self.db.commit()
            logger.exception("Scraping session %s failed", session.id)
            raise

        total_jobs = sum(item.jobs_found for item in summary.values())
        session.status = "completed"
        session.total_jobs_found = total_jobs
        session.error_count = sum(len(item.errors) for item in summary.values())
        session.summary = _summary_payload(summary)
        session.finished_at = _utcnow()
        self.db.add(session)
        self.db.commit()
        logger.info("Scraping session %s completed: %d new jobs", session.id, total_jobs)

        return SessionSummary(session_id=session.id, success=True, total_jobs=total_jobs, criteria_summary=summary)

    async def _scrape_criteria(self, criteria: JobSearchCriteria, seen_urls: set[str]) -> CriteriaRunResult:
        errors: list[str] = []
        jobs_found = 0
        excluded = [term.strip().lower() for term in (criteria.exclude_keywords or []) if str(term).strip()]

        for params in build_search_params(criteria):
            outcome = await self.manager.search_jobs(params)
            errors.extend(f"{failure.connector}: {failure.error}" for failure in outcome.errors)
            for job in outcome.jobs:
                if _is_excluded(job, excluded):
                    continue
                if self._save_if_new(job, criteria.id, seen_urls):
                    jobs_found += 1

        logger.info("Criteria %s (%s): %d new jobs, %d errors", criteria.id, criteria.name, jobs_found, len(errors))
        return CriteriaRunResult(success=not errors or jobs_found > 0, jobs_found=jobs_found, errors=errors)

    def _save_if_new(self, job: JobResult, criteria_id: int, seen_urls: set[str]) -> bool:
        url = job.url.strip()
        if not url or url in seen_urls:
            return False
        seen_urls.add(url)
        if self.db.query(ScrapedJob.id).filter(ScrapedJob.url == url).first():
            logger.debug("Skipping duplicate job %s", url)
            return False

        self.db.add(
            ScrapedJob(
                user_id=self.user_id,
                criteria_id=criteria_id,
                source=job.source,
                external_id=job.id[:255],
                title=job.title[:500] or "Untitled Position",
                company=job.company[:255] or "Unknown Company",
                location=job.location[:255] or "Not specified",
                description=job.description,
                url=url[:1000],
                salary_min=job.salary_min,
                salary_max=job.salary_max,
                contract_type=job.contract_type,
                posted_date=_parse_posted_date(job.posted_date),
                is_active=True,
                match_score=None,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            # Another writer stored the same URL between the lookup and the insert.
            self.db.rollback()
            return False
        return True


def build_search_params(criteria: JobSearchCriteria) -> list[JobSearchParams]:
    terms = [str(term).strip() for term in (criteria.keywords or []) + (criteria.job_titles or []) if str(term).strip()]
    query = " OR ".join(dict.fromkeys(terms)) or None
    locations = [str(loc).strip() for loc in (criteria.locations or []) if str(loc).strip()] or [None]
    return [
        JobSearchParams(
            query=query,
            location=location,
            salary_min=criteria.salary_min,
            salary_max=criteria.salary_max,
            per_page=SCRAPE_PAGE_SIZE,
        )
        for location in dict.fromkeys(locations)
    ]


def _is_excluded(job: JobResult, excluded: list[str]) -> bool:
    if not excluded:
        return False
    haystack = f"{job.title} {job.company} {job.description}".lower()
    return any(term in haystack for term in excluded)


def _parse_posted_date(value: str | None) -> datetime | None:
    if not value:
        return None
    with contextlib.suppress(ValueError):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed
    return None


def _summary_payload(summary: dict[int, CriteriaSummary]) -> dict[str, dict]:
    return {str(criteria_id): asdict(item) for criteria_id, item in summary.items()}


def _utcnow() -> datetime:
    # Timestamp columns hold naive UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)

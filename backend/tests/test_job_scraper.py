import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fakes import FakeConnector, make_job

from applytrack.connectors.base import NoConnectorsConfiguredError
from applytrack.connectors.manager import ConnectorManager
from applytrack.models.scraped_job import ScrapedJob
from applytrack.models.scraping_session import ScrapingSession
from applytrack.models.search_criteria import JobSearchCriteria
from applytrack.services.job_scraper import JobScraperService, build_search_params


def add_criteria(db, user, **fields):
    values = {"name": "Data roles", "keywords": ["python"], "job_titles": ["Data Engineer"]}
    values.update(fields)
    criteria = JobSearchCriteria(user_id=user.id, **values)
    db.add(criteria)
    db.commit()
    db.refresh(criteria)
    return criteria


def test_search_params_join_terms_and_split_locations():
    criteria = JobSearchCriteria(
        keywords=["python", "spark"],
        job_titles=["Data Engineer", "python"],
        locations=["Berlin", "Munich"],
        salary_min=50000,
    )

    params = build_search_params(criteria)

    assert [p.location for p in params] == ["Berlin", "Munich"]
    assert params[0].query == "python OR spark OR Data Engineer"
    assert params[0].salary_min == 50000
    assert params[0].per_page == 50


def test_rerunning_criteria_does_not_duplicate_jobs(db, user):
    criteria = add_criteria(db, user)
    jobs = [make_job(i, "adzuna") for i in range(3)]
    manager = ConnectorManager({"adzuna": FakeConnector("adzuna", jobs=jobs)}, timeout=5)
    service = JobScraperService(db, user.id, manager)

    first = asyncio.run(service.run_scrape_for_criteria(criteria.id))
    second = asyncio.run(service.run_scrape_for_criteria(criteria.id))

    assert first.jobs_found == 3
    assert second.jobs_found == 0
    assert second.success is True
    assert db.query(ScrapedJob).count() == 3


def test_excluded_keywords_and_blank_urls_are_skipped(db, user):
    criteria = add_criteria(db, user, exclude_keywords=["Recruiter"])
    jobs = [
        make_job(1, "adzuna"),
        make_job(2, "adzuna", company="Recruiter Agency"),
        make_job(3, "adzuna", url=""),
    ]
    manager = ConnectorManager({"adzuna": FakeConnector("adzuna", jobs=jobs)}, timeout=5)

    result = asyncio.run(JobScraperService(db, user.id, manager).run_scrape_for_criteria(criteria.id))

    assert result.jobs_found == 1
    assert [row.external_id for row in db.query(ScrapedJob).all()] == ["adzuna-1"]


def test_connector_errors_are_prefixed_with_connector_name(db, user):
    criteria = add_criteria(db, user)
    manager = ConnectorManager(
        {
            "adzuna": FakeConnector("adzuna", jobs=[make_job(1, "adzuna")]),
            "linkedin": FakeConnector("linkedin", error="rate limited"),
        },
        timeout=5,
    )

    result = asyncio.run(JobScraperService(db, user.id, manager).run_scrape_for_criteria(criteria.id))

    assert result.success is True
    assert result.jobs_found == 1
    assert result.errors == ["linkedin: rate limited"]


def test_unknown_criteria_reports_error(db, user):
    manager = ConnectorManager({"adzuna": FakeConnector("adzuna")}, timeout=5)

    result = asyncio.run(JobScraperService(db, user.id, manager).run_scrape_for_criteria(999))

    assert result.success is False
    assert result.errors == ["Criteria not found"]


def test_session_runs_active_criteria_and_records_summary(db, user):
    first = add_criteria(db, user, name="Berlin", locations=["Berlin"])
    add_criteria(db, user, name="Paused", is_active=False)
    second = add_criteria(db, user, name="Remote", locations=["Remote"])
    jobs = [make_job(i, "adzuna") for i in range(2)]
    manager = ConnectorManager({"adzuna": FakeConnector("adzuna", jobs=jobs)}, timeout=5)

    summary = asyncio.run(JobScraperService(db, user.id, manager).run_scraping_session())

    assert summary.success is True
    assert summary.total_jobs == 2
    assert set(summary.criteria_summary) == {first.id, second.id}
    assert summary.criteria_summary[first.id].jobs_found == 2
    assert summary.criteria_summary[second.id].jobs_found == 0

    row = db.query(ScrapingSession).one()
    assert row.id == summary.session_id
    assert row.status == "completed"
    assert row.total_criteria == 2
    assert row.completed_criteria == 2
    assert row.summary[str(first.id)]["name"] == "Berlin"
    assert row.finished_at.tzinfo is None
    assert abs(datetime.now(timezone.utc).replace(tzinfo=None) - row.finished_at) < timedelta(minutes=5)


def test_session_without_active_criteria_does_nothing(db, user):
    manager = ConnectorManager({"adzuna": FakeConnector("adzuna")}, timeout=5)

    summary = asyncio.run(JobScraperService(db, user.id, manager).run_scraping_session())

    assert summary.session_id is None
    assert summary.success is False
    assert db.query(ScrapingSession).count() == 0


def test_session_requires_a_configured_connector(db, user):
    add_criteria(db, user)
    manager = ConnectorManager({"adzuna": FakeConnector("adzuna", configured=False)}, timeout=5)

    with pytest.raises(NoConnectorsConfiguredError):
        asyncio.run(JobScraperService(db, user.id, manager).run_scraping_session())

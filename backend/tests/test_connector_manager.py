import asyncio

import pytest
from fakes import FakeConnector, make_job

from applytrack.connectors.base import (
    ConnectorConfigurationError,
    JobSearchParams,
    NoConnectorsConfiguredError,
)
from applytrack.connectors.linkedin import LinkedInConnector
from applytrack.connectors.manager import ConnectorManager


PARAMS = JobSearchParams(query="data engineer")


def test_partial_failure_keeps_successful_results():
    good = FakeConnector("adzuna", jobs=[make_job(i, "adzuna") for i in range(10)])
    limited = FakeConnector("linkedin", error="rate limited")
    off = FakeConnector("indeed", configured=False)
    manager = ConnectorManager({"adzuna": good, "linkedin": limited, "indeed": off}, timeout=5)

    outcome = asyncio.run(manager.search_jobs(PARAMS))

    assert len(outcome.jobs) == 10
    assert [(e.connector, e.error) for e in outcome.errors] == [("linkedin", "rate limited")]
    assert off.calls == []


def test_requested_unconfigured_connectors_are_reported_not_called():
    good = FakeConnector("adzuna", jobs=[make_job(1, "adzuna")])
    manager = ConnectorManager({"adzuna": good, "linkedin": LinkedInConnector()}, timeout=5)

    outcome = asyncio.run(manager.search_jobs(PARAMS, ["adzuna", "linkedin", "adzuna", "monster"]))

    assert len(good.calls) == 1
    assert len(outcome.results) == 1
    errors = {e.connector: e.error for e in outcome.errors}
    assert errors["linkedin"].startswith("linkedin connector is not supported")
    assert errors["monster"] == "Unknown connector: monster"


def test_no_configured_connectors_raises():
    manager = ConnectorManager({"adzuna": FakeConnector("adzuna", configured=False)}, timeout=5)

    with pytest.raises(NoConnectorsConfiguredError):
        asyncio.run(manager.search_jobs(PARAMS))


def test_slow_connector_times_out_without_blocking_others():
    fast = FakeConnector("adzuna", jobs=[make_job(1, "adzuna")])
    slow = FakeConnector("indeed", jobs=[make_job(2, "indeed")], delay=1.0)
    manager = ConnectorManager({"adzuna": fast, "indeed": slow}, timeout=0.05)

    outcome = asyncio.run(manager.search_jobs(PARAMS))

    assert [job.id for job in outcome.jobs] == ["adzuna-1"]
    assert outcome.errors[0].connector == "indeed"
    assert "timed out" in outcome.errors[0].error


def test_get_connector_rejects_unconfigured():
    manager = ConnectorManager({"adzuna": FakeConnector("adzuna", configured=False)}, timeout=5)

    with pytest.raises(ConnectorConfigurationError):
        manager.get_connector("adzuna")
    with pytest.raises(ConnectorConfigurationError):
        manager.get_connector("nope")


def test_job_details_go_to_the_named_connector():
    job = make_job(3, "adzuna")
    manager = ConnectorManager({"adzuna": FakeConnector("adzuna", jobs=[job])}, timeout=5)

    assert asyncio.run(manager.get_job_details("adzuna-3", "adzuna")) == job
    assert asyncio.run(manager.get_job_details("unknown", "adzuna")) is None


def test_for_user_prefers_stored_credentials():
    class StoredUser:
        adzuna_app_id = "stored-id"
        adzuna_api_key = "stored-key"

    manager = ConnectorManager.for_user(StoredUser())

    assert manager.get_configured_connectors() == ["adzuna"]
    assert manager.connectors["adzuna"].app_id == "stored-id"
    assert [config.type for config in manager.get_available_connectors()] == ["adzuna", "linkedin", "indeed"]


def test_three_connectors_with_one_rate_limited():
    manager = ConnectorManager(
        {
            "adzuna": FakeConnector("adzuna", jobs=[make_job(i, "adzuna") for i in range(5)]),
            "indeed": FakeConnector("indeed", jobs=[make_job(i, "indeed") for i in range(5)]),
            "linkedin": FakeConnector("linkedin", error="rate limited"),
        },
        timeout=5,
    )

    outcome = asyncio.run(manager.search_jobs(PARAMS))

    assert len(outcome.results) == 2
    assert len(outcome.jobs) == 10
    assert len(outcome.errors) == 1
    assert outcome.errors[0].connector == "linkedin"
    assert "rate limited" in outcome.errors[0].error

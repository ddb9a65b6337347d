import pytest
from fakes import FakeConnector, make_job
from resume_data import RESUME

from applytrack.api.deps import get_connector_manager
from applytrack.auth import create_access_token, hash_password
from applytrack.connectors.linkedin import LinkedInConnector
from applytrack.connectors.manager import ConnectorManager
from applytrack.models.external_log import ExternalLog
from applytrack.models.resume import Resume
from applytrack.models.user import User


@pytest.fixture
def fake_manager(client):
    from applytrack.main import app

    manager = ConnectorManager(
        {
            "adzuna": FakeConnector("adzuna", jobs=[make_job(i, "adzuna") for i in range(3)]),
            "linkedin": LinkedInConnector(),
        },
        timeout=5,
    )
    app.dependency_overrides[get_connector_manager] = lambda: manager
    return manager


def create_criteria(client, auth_headers, **fields):
    payload = {"name": "Data roles", "keywords": ["python"], "locations": ["Berlin"]}
    payload.update(fields)
    response = client.post("/api/search-criteria", json=payload, headers=auth_headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_register_login_and_store_credentials(client):
    registered = client.post("/api/auth/register", json={"username": "Alex", "password": "long-password"})
    assert registered.status_code == 200
    assert registered.json()["username"] == "alex"

    duplicate = client.post("/api/auth/register", json={"username": "alex", "password": "long-password"})
    assert duplicate.status_code == 409

    bad_login = client.post("/api/auth/login", json={"username": "alex", "password": "wrong-password"})
    assert bad_login.status_code == 401

    token = client.post("/api/auth/login", json={"username": "alex", "password": "long-password"}).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}
    assert client.get("/api/auth/me", headers=headers).json()["has_adzuna_credentials"] is False

    updated = client.put(
        "/api/auth/credentials",
        json={"adzuna_app_id": "id-1", "adzuna_api_key": "key-1"},
        headers=headers,
    )
    assert updated.json()["has_adzuna_credentials"] is True

    connectors = client.get("/api/connectors", headers=headers).json()
    adzuna = next(item for item in connectors if item["type"] == "adzuna")
    assert adzuna["is_configured"] is True


def test_routes_require_a_token(client):
    assert client.get("/api/connectors").status_code == 401
    assert client.get("/api/scraped-jobs").status_code == 401
    assert client.get("/api/resumes", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_search_without_configured_connectors_is_rejected(client, auth_headers):
    connectors = client.get("/api/connectors", headers=auth_headers).json()
    assert {item["type"]: item["is_configured"] for item in connectors} == {
        "adzuna": False,
        "linkedin": False,
        "indeed": False,
    }
    assert next(item for item in connectors if item["type"] == "adzuna")["requires_credentials"] == [
        {"field": "adzuna_app_id", "label": "App ID"},
        {"field": "adzuna_api_key", "label": "API Key"},
    ]

    response = client.post("/api/connectors/search", json={"query": "python"}, headers=auth_headers)
    assert response.status_code == 400

    details = client.get("/api/connectors/adzuna/jobs/1", headers=auth_headers)
    assert details.status_code == 400


def test_connector_search_reports_partial_failures(client, auth_headers, fake_manager):
    response = client.post(
        "/api/connectors/search",
        json={"query": "python", "connectors": ["adzuna", "linkedin"]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total_jobs"] == 3
    assert body["errors"][0]["connector"] == "linkedin"


def test_connector_job_details(client, auth_headers, fake_manager):
    found = client.get("/api/connectors/adzuna/jobs/adzuna-1", headers=auth_headers)
    assert found.status_code == 200
    assert found.json()["url"] == "https://jobs.example.com/adzuna/1"

    assert client.get("/api/connectors/adzuna/jobs/nope", headers=auth_headers).status_code == 404
    assert client.get("/api/connectors/linkedin/jobs/1", headers=auth_headers).status_code == 400


def test_search_criteria_crud(client, auth_headers):
    created = create_criteria(client, auth_headers, keywords=[" python ", "python", ""])
    assert created["keywords"] == ["python"]

    listed = client.get("/api/search-criteria", headers=auth_headers).json()
    assert [item["id"] for item in listed] == [created["id"]]

    updated = client.put(f"/api/search-criteria/{created['id']}", json={"is_active": False}, headers=auth_headers)
    assert updated.json()["is_active"] is False

    invalid = client.put(
        f"/api/search-criteria/{created['id']}", json={"keywords": [], "job_titles": []}, headers=auth_headers
    )
    assert invalid.status_code == 422

    assert client.delete(f"/api/search-criteria/{created['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/search-criteria/{created['id']}", headers=auth_headers).status_code == 404


def test_search_criteria_validation(client, auth_headers):
    no_terms = client.post("/api/search-criteria", json={"name": "Empty"}, headers=auth_headers)
    assert no_terms.status_code == 422

    bad_salary = client.post(
        "/api/search-criteria",
        json={"name": "Pay", "keywords": ["python"], "salary_min": 90000, "salary_max": 50000},
        headers=auth_headers,
    )
    assert bad_salary.status_code == 422


def test_scrape_without_connectors_is_rejected(client, auth_headers):
    criteria = create_criteria(client, auth_headers)

    response = client.post(f"/api/search-criteria/{criteria['id']}/scrape", headers=auth_headers)

    assert response.status_code == 400


def test_scrape_score_and_write_cover_letter(client, auth_headers, fake_manager):
    criteria = create_criteria(client, auth_headers)

    run = client.post(f"/api/search-criteria/{criteria['id']}/scrape", headers=auth_headers).json()
    assert run == {"success": True, "jobs_found": 3, "errors": []}
    rerun = client.post(f"/api/search-criteria/{criteria['id']}/scrape", headers=auth_headers).json()
    assert rerun["jobs_found"] == 0

    jobs = client.get("/api/scraped-jobs", params={"criteria_id": criteria["id"]}, headers=auth_headers).json()
    assert jobs["total"] == 3
    job_id = jobs["jobs"][0]["id"]

    resume = client.post(
        "/api/resumes", json={"name": "Main", "theme": "classic", "json_data": RESUME}, headers=auth_headers
    ).json()
    assert resume["is_active"] is True

    score = client.post(f"/api/scraped-jobs/{job_id}/score", json={"resume_id": resume["id"]}, headers=auth_headers)
    assert score.status_code == 200
    assert 0.0 <= score.json()["score"] <= 1.0
    assert client.get(f"/api/scraped-jobs/{job_id}", headers=auth_headers).json()["match_score"] == score.json()["score"]

    letter = client.post(
        "/api/cover-letters/generate",
        json={"resume_id": resume["id"], "scraped_job_id": job_id, "tone": "concise"},
        headers=auth_headers,
    )
    assert letter.status_code == 201
    assert "Example GmbH" in letter.json()["content"]

    exported = client.get(f"/api/resumes/{resume['id']}/export", headers=auth_headers).json()
    assert exported["resume"]["basics"]["name"] == "Jane Doe"
    assert [item["id"] for item in exported["cover_letters"]] == [letter.json()["id"]]

    hidden = client.patch(f"/api/scraped-jobs/{job_id}", json={"is_active": False}, headers=auth_headers)
    assert hidden.json()["is_active"] is False
    assert client.get("/api/scraped-jobs", headers=auth_headers).json()["total"] == 2
    assert client.get("/api/scraped-jobs", params={"active_only": False}, headers=auth_headers).json()["total"] == 3


def test_cover_letter_rejects_unknown_tone(client, auth_headers):
    response = client.post(
        "/api/cover-letters/generate",
        json={"resume_id": 1, "scraped_job_id": 1, "tone": "sarcastic"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert client.get("/api/cover-letters/templates", headers=auth_headers).json() == [
        "professional",
        "enthusiastic",
        "concise",
    ]


def test_scraping_session_routes(client, auth_headers, fake_manager):
    create_criteria(client, auth_headers, name="Berlin")

    run = client.post("/api/scraping/sessions", headers=auth_headers)
    assert run.status_code == 200
    assert run.json()["total_jobs"] == 3

    sessions = client.get("/api/scraping/sessions", headers=auth_headers).json()
    assert sessions[0]["id"] == run.json()["session_id"]
    assert sessions[0]["status"] == "completed"


def test_resume_activation_is_exclusive(client, auth_headers):
    first = client.post("/api/resumes", json={"name": "A", "json_data": RESUME}, headers=auth_headers).json()
    second = client.post("/api/resumes", json={"name": "B", "json_data": RESUME}, headers=auth_headers).json()
    assert second["is_active"] is False

    client.put(f"/api/resumes/{second['id']}/set-active", json={"is_active": True}, headers=auth_headers)

    states = {item["id"]: item["is_active"] for item in client.get("/api/resumes", headers=auth_headers).json()}
    assert states == {first["id"]: False, second["id"]: True}

    bad_theme = client.put(f"/api/resumes/{first['id']}", json={"theme": "neon"}, headers=auth_headers)
    assert bad_theme.status_code == 422


def test_external_logs_are_filtered_per_user(client, auth_headers, db, user):
    db.add_all(
        [
            ExternalLog(user_id=user.id, service="Adzuna", endpoint="https://a", method="GET", response_time=5, success=True),
            ExternalLog(
                user_id=user.id,
                service="Adzuna",
                endpoint="https://b",
                method="GET",
                response_time=9,
                success=False,
                error_message="HTTP 500: Internal Server Error",
            ),
        ]
    )
    db.commit()

    failures = client.get("/api/external-logs", params={"success": False}, headers=auth_headers).json()
    assert failures["total"] == 1
    assert failures["logs"][0]["error_message"] == "HTTP 500: Internal Server Error"

    log_id = failures["logs"][0]["id"]
    assert client.get(f"/api/external-logs/{log_id}", headers=auth_headers).json()["endpoint"] == "https://b"
    assert client.get("/api/external-logs/999", headers=auth_headers).status_code == 404


def test_application_tracking(client, auth_headers, fake_manager):
    criteria = create_criteria(client, auth_headers)
    client.post(f"/api/search-criteria/{criteria['id']}/scrape", headers=auth_headers)
    job = client.get("/api/scraped-jobs", headers=auth_headers).json()["jobs"][0]
    resume = client.post("/api/resumes", json={"name": "Main", "json_data": RESUME}, headers=auth_headers).json()

    created = client.post(
        "/api/applications",
        json={"scraped_job_id": job["id"], "resume_id": resume["id"]},
        headers=auth_headers,
    )
    assert created.status_code == 201
    application = created.json()
    assert application["job_title"] == job["title"]
    assert application["company"] == "Example GmbH"
    assert application["listing_url"] == job["url"]
    assert application["status"] == "draft"
    assert application["applied_at"] is None

    again = client.post("/api/applications", json={"scraped_job_id": job["id"]}, headers=auth_headers)
    assert again.json()["id"] == application["id"]

    applied = client.patch(
        f"/api/applications/{application['id']}", json={"status": "applied", "notes": "Sent"}, headers=auth_headers
    )
    assert applied.status_code == 200
    assert applied.json()["applied_at"] is not None
    assert applied.json()["notes"] == "Sent"

    manual = client.post(
        "/api/applications",
        json={"job_title": "Analyst", "company": "Acme", "status": "interviewing"},
        headers=auth_headers,
    )
    assert manual.status_code == 201

    stats = client.get("/api/applications/stats", headers=auth_headers).json()
    assert stats["total"] == 2
    assert stats["applied"] == 1
    assert stats["interviewing"] == 1
    assert stats["draft"] == 0

    listed = client.get("/api/applications", params={"status": "applied"}, headers=auth_headers).json()
    assert [item["id"] for item in listed] == [application["id"]]

    client.delete(f"/api/scraped-jobs/{job['id']}", headers=auth_headers)
    client.delete(f"/api/resumes/{resume['id']}", headers=auth_headers)
    kept = client.get(f"/api/applications/{application['id']}", headers=auth_headers).json()
    assert kept["scraped_job_id"] is None
    assert kept["resume_id"] is None
    assert kept["job_title"] == job["title"]

    assert client.delete(f"/api/applications/{application['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/applications/{application['id']}", headers=auth_headers).status_code == 404


def test_application_validation_and_ownership(client, auth_headers, db):
    missing_listing = client.post("/api/applications", json={"company": "Acme"}, headers=auth_headers)
    assert missing_listing.status_code == 422

    bad_status = client.post(
        "/api/applications", json={"job_title": "Analyst", "company": "Acme", "status": "ghosted"}, headers=auth_headers
    )
    assert bad_status.status_code == 422

    unknown_job = client.post("/api/applications", json={"scraped_job_id": 999}, headers=auth_headers)
    assert unknown_job.status_code == 404

    other = User(username="someone-else", password_hash=hash_password("other-pass"))
    db.add(other)
    db.commit()
    foreign_resume = Resume(user_id=other.id, name="Theirs", json_data=RESUME)
    db.add(foreign_resume)
    db.commit()

    foreign = client.post(
        "/api/applications",
        json={"job_title": "Analyst", "company": "Acme", "resume_id": foreign_resume.id},
        headers=auth_headers,
    )
    assert foreign.status_code == 404

    other_headers = {"Authorization": f"Bearer {create_access_token(other.id)}"}
    mine = client.post("/api/applications", json={"job_title": "Analyst", "company": "Acme"}, headers=auth_headers).json()
    assert client.get(f"/api/applications/{mine['id']}", headers=other_headers).status_code == 404
    assert client.patch(f"/api/applications/{mine['id']}", json={"status": "ghosted"}, headers=auth_headers).status_code == 422

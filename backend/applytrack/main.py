from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from applytrack.api import (
    applications,
    auth,
    connectors,
    cover_letters,
    external_logs,
    resumes,
    scraped_jobs,
    scraping,
    search_criteria,
)
from applytrack.bootstrap import run_runtime_migrations
from applytrack.config import settings
from applytrack.database import Base, engine
from applytrack.log import configure_logging
import applytrack.models  # noqa: F401


app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost", "http://localhost:80", "http://localhost:8000", "http://127.0.0.1:8000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    configure_logging(settings.log_level)
    settings.ensure_directories()
    Base.metadata.create_all(bind=engine)
    run_runtime_migrations(engine)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(connectors.router, prefix="/api/connectors", tags=["connectors"])
app.include_router(search_criteria.router, prefix="/api/search-criteria", tags=["search_criteria"])
app.include_router(scraping.router, prefix="/api/scraping", tags=["scraping"])
app.include_router(scraped_jobs.router, prefix="/api/scraped-jobs", tags=["scraped_jobs"])
app.include_router(external_logs.router, prefix="/api/external-logs", tags=["external_logs"])
app.include_router(resumes.router, prefix="/api/resumes", tags=["resumes"])
app.include_router(cover_letters.router, prefix="/api/cover-letters", tags=["cover_letters"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])

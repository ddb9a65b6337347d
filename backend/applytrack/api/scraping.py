from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from applytrack.api.deps import get_connector_manager
from applytrack.auth import get_current_user
from applytrack.connectors.base import NoConnectorsConfiguredError
from applytrack.connectors.manager import ConnectorManager
from applytrack.database import get_db
from applytrack.models.scraping_session import ScrapingSession
from applytrack.models.user import User
from applytrack.schemas.search_criteria import ScrapingSessionOut, ScrapingSessionRunOut
from applytrack.services.job_scraper import JobScraperService


router = APIRouter()


@router.post("/sessions", response_model=ScrapingSessionRunOut)
async def run_scraping_session(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    manager: ConnectorManager = Depends(get_connector_manager),
) -> ScrapingSessionRunOut:
    service = JobScraperService(db, current_user.id, manager)
    try:
        summary = await service.run_scraping_session()
    except NoConnectorsConfiguredError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ScrapingSessionRunOut(**asdict(summary))


@router.get("/sessions", response_model=list[ScrapingSessionOut])
def list_scraping_sessions(
    limit: int = Query(default=20, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ScrapingSession]:
    return (
        db.query(ScrapingSession)
        .filter(ScrapingSession.user_id == current_user.id)
        .order_by(ScrapingSession.id.desc())
        .limit(limit)
        .all()
    )

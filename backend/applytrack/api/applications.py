from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from applytrack.auth import get_current_user
from applytrack.database import get_db
from applytrack.models.application import Application
from applytrack.models.cover_letter import CoverLetter
from applytrack.models.resume import Resume
from applytrack.models.scraped_job import ScrapedJob
from applytrack.models.user import User
from applytrack.schemas.application import (
    APPLICATION_STATUSES,
    ApplicationCreate,
    ApplicationOut,
    ApplicationStatsOut,
    ApplicationUpdate,
)


router = APIRouter()


def _get_owned_application(db: Session, app_id: int, user_id: int) -> Application:
    application = db.query(Application).filter(Application.id == app_id, Application.user_id == user_id).first()
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


def _check_resume(db: Session, resume_id: int | None, user_id: int) -> None:
    if resume_id is None:
        return
    if not db.query(Resume.id).filter(Resume.id == resume_id, Resume.user_id == user_id).first():
        raise HTTPException(status_code=404, detail="Resume not found")


def _check_cover_letter(db: Session, cover_letter_id: int | None, user_id: int) -> None:
    if cover_letter_id is None:
        return
    if not db.query(CoverLetter.id).filter(CoverLetter.id == cover_letter_id, CoverLetter.user_id == user_id).first():
        raise HTTPException(status_code=404, detail="Cover letter not found")


def _stamp_applied(application: Application) -> None:
    if application.status == "applied" and application.applied_at is None:
        application.applied_at = datetime.now(timezone.utc).replace(tzinfo=None)


@router.get("", response_model=list[ApplicationOut])
def list_applications(
    status: str | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Application]:
    query = db.query(Application).filter(Application.user_id == current_user.id)
    if status:
        query = query.filter(Application.status == status)
    return query.order_by(Application.updated_at.desc(), Application.id.desc()).all()


@router.post("", response_model=ApplicationOut, status_code=201)
def create_application(
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Application:
    job = None
    if payload.scraped_job_id is not None:
        job = (
            db.query(ScrapedJob)
            .filter(ScrapedJob.id == payload.scraped_job_id, ScrapedJob.user_id == current_user.id)
            .first()
        )
        if not job:
            raise HTTPException(status_code=404, detail="Job not found")

        existing = (
            db.query(Application)
            .filter(Application.user_id == current_user.id, Application.scraped_job_id == job.id)
            .first()
        )
        if existing:
            return existing

    _check_resume(db, payload.resume_id, current_user.id)
    _check_cover_letter(db, payload.cover_letter_id, current_user.id)

    # The listing is copied so the application survives the job row being deleted.
    application = Application(
        user_id=current_user.id,
        scraped_job_id=job.id if job else None,
        resume_id=payload.resume_id,
        cover_letter_id=payload.cover_letter_id,
        job_title=(payload.job_title or "").strip() or (job.title if job else ""),
        company=(payload.company or "").strip() or (job.company if job else ""),
        listing_url=payload.listing_url or (job.url if job else None),
        status=payload.status,
        notes=payload.notes,
        applied_at=payload.applied_at,
    )
    _stamp_applied(application)
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


@router.get("/stats", response_model=ApplicationStatsOut)
def application_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ApplicationStatsOut:
    statuses = [row.status for row in db.query(Application.status).filter(Application.user_id == current_user.id).all()]
    counts = Counter(statuses)
    return ApplicationStatsOut(total=len(statuses), **{status: counts.get(status, 0) for status in APPLICATION_STATUSES})


@router.get("/{app_id}", response_model=ApplicationOut)
def get_application(
    app_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Application:
    return _get_owned_application(db, app_id, current_user.id)


@router.patch("/{app_id}", response_model=ApplicationOut)
def update_application(
    app_id: int,
    payload: ApplicationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Application:
    application = _get_owned_application(db, app_id, current_user.id)
    fields = payload.model_dump(exclude_unset=True)
    _check_resume(db, fields.get("resume_id"), current_user.id)
    _check_cover_letter(db, fields.get("cover_letter_id"), current_user.id)

    for name, value in fields.items():
        if name == "status" and value is None:
            continue
        setattr(application, name, value)
    _stamp_applied(application)

    db.add(application)
    db.commit()
    db.refresh(application)
    return application


@router.delete("/{app_id}")
def delete_application(
    app_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, str | int]:
    application = _get_owned_application(db, app_id, current_user.id)
    db.delete(application)
    db.commit()
    return {"status": "deleted", "application_id": app_id}

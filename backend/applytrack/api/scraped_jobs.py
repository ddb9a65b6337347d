from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from applytrack.auth import get_current_user
from applytrack.database import get_db
from applytrack.models.application import Application
from applytrack.models.resume import Resume
from applytrack.models.scraped_job import ScrapedJob
from applytrack.models.user import User
from applytrack.schemas.resume import ResumeDocument
from applytrack.schemas.scraped_job import (
    ScoreRequest,
    ScoreResponse,
    ScrapedJobListOut,
    ScrapedJobOut,
    ScrapedJobUpdate,
)
from applytrack.services.matcher import JobMatcher


router = APIRouter()
matcher = JobMatcher()


def _get_owned_job(db: Session, job_id: int, user_id: int) -> ScrapedJob:
    job = db.query(ScrapedJob).filter(ScrapedJob.id == job_id, ScrapedJob.user_id == user_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


def job_payload(job: ScrapedJob) -> dict[str, str]:
    return {
        "title": job.title or "",
        "company": job.company or "",
        "location": job.location or "",
        "description": job.description or "",
    }


@router.get("", response_model=ScrapedJobListOut)
def list_scraped_jobs(
    q: str | None = Query(default=None),
    source: str | None = Query(default=None),
    criteria_id: int | None = Query(default=None),
    active_only: bool = Query(default=True),
    min_score: float | None = Query(default=None, ge=0, le=1),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScrapedJobListOut:
    query = db.query(ScrapedJob).filter(ScrapedJob.user_id == current_user.id)
    if q:
        like = f"%{q.strip()}%"
        query = query.filter(
            or_(ScrapedJob.title.ilike(like), ScrapedJob.company.ilike(like), ScrapedJob.description.ilike(like))
        )
    if source:
        query = query.filter(ScrapedJob.source == source)
    if criteria_id is not None:
        query = query.filter(ScrapedJob.criteria_id == criteria_id)
    if active_only:
        query = query.filter(ScrapedJob.is_active == True)  # noqa: E712
    if min_score is not None:
        query = query.filter(ScrapedJob.match_score >= min_score)

    total = query.count()
    rows = query.order_by(ScrapedJob.created_at.desc(), ScrapedJob.id.desc()).offset(offset).limit(limit).all()
    return ScrapedJobListOut(
        total=total,
        limit=limit,
        offset=offset,
        jobs=[ScrapedJobOut.model_validate(row) for row in rows],
    )


@router.get("/{job_id}", response_model=ScrapedJobOut)
def get_scraped_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScrapedJob:
    return _get_owned_job(db, job_id, current_user.id)


@router.patch("/{job_id}", response_model=ScrapedJobOut)
def update_scraped_job(
    job_id: int,
    payload: ScrapedJobUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScrapedJob:
    job = _get_owned_job(db, job_id, current_user.id)
    job.is_active = payload.is_active
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


@router.delete("/{job_id}")
def delete_scraped_job(
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, str | int]:
    job = _get_owned_job(db, job_id, current_user.id)
    db.query(Application).filter(Application.scraped_job_id == job.id).update(
        {Application.scraped_job_id: None}, synchronize_session=False
    )
    db.delete(job)
    db.commit()
    return {"status": "deleted", "job_id": job_id}


@router.post("/{job_id}/score", response_model=ScoreResponse)
def score_scraped_job(
    job_id: int,
    payload: ScoreRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ScoreResponse:
    job = _get_owned_job(db, job_id, current_user.id)
    resume = db.query(Resume).filter(Resume.id == payload.resume_id, Resume.user_id == current_user.id).first()
    if not resume:
        raise HTTPException(status_code=404, detail="Resume not found")

    result = matcher.calculate_match_score(ResumeDocument.model_validate(resume.json_data), job_payload(job))
    job.match_score = result["score"]
    db.add(job)
    db.commit()

    return ScoreResponse(job_id=job.id, resume_id=resume.id, **result)
